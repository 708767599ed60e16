"""
yaib (Yet Another Image Builder)

Builds bootable OS images from a declarative recipe: an ordered list of
typed actions run through a fixed lifecycle, on the host or inside a
disposable sandbox.

Main modules:
- recipe: Recipe loading, templating and validation
- factories / registry: Tag based construction of actions
- abstractions: The Action base class and its lifecycle phases
- builder: The lifecycle driver
- session: Path resolution and scratch directory handling
- sandbox: Docker-backed sandbox machine
- bases: Concrete action kinds
- io: Path helpers and the file tree materializer
- utils: Logging, reflection and command helpers

Quick start example:
```python
from yaib import BuildSession, DockerSandbox

with BuildSession("recipe.yaml", DockerSandbox(enabled=False)) as session:
    status = session.run()
```
"""

__version__ = "0.3.0"

from .abstractions import Action
from .protocols import SandboxProtocol, MachineProtocol
from .registry import initialize_registries, action_registry
from .recipe import Recipe, RecipeModel
from .datacls import BuildContext
from .builder import Builder
from .session import BuildSession
from .sandbox import DockerSandbox
from .io import copy_file, copy_tree
from .exceptions import (
    YaibError,
    ConfigurationError,
    UnknownActionError,
    DefinitionError,
    BuildError,
    ActionError,
    ActionVerifyError,
)

__all__ = [
    # Version
    '__version__',
    # Abstractions
    'Action',
    'SandboxProtocol',
    'MachineProtocol',
    # Registry
    'initialize_registries',
    'action_registry',
    # Recipe
    'Recipe',
    'RecipeModel',
    # Build
    'BuildContext',
    'Builder',
    'BuildSession',
    'DockerSandbox',
    # IO
    'copy_file',
    'copy_tree',
    # Exceptions
    'YaibError',
    'ConfigurationError',
    'UnknownActionError',
    'DefinitionError',
    'BuildError',
    'ActionError',
    'ActionVerifyError',
]
