"""
yaib Bases Module

This module contains the concrete action kinds. The registry scans this
package; a class named `<Kind>Action` is registered under the kebab-case
tag `<kind>` (e.g. `ImagePartitionAction` -> `image-partition`).

Usage:
    from yaib.bases import RunAction, AptAction
"""

from .debootstrap import DebootstrapAction
from .apt import AptAction
from .run import RunAction
from .archive import PackAction, UnpackAction
from .overlay import OverlayAction
from .raw import RawAction
from .partition import ImagePartitionAction
from .filesystem import FilesystemDeployAction
from .ostree import OstreeCommitAction, OstreeDeployAction

__all__ = [
    'DebootstrapAction',
    'AptAction',
    'RunAction',
    'PackAction',
    'UnpackAction',
    'OverlayAction',
    'RawAction',
    'ImagePartitionAction',
    'FilesystemDeployAction',
    'OstreeCommitAction',
    'OstreeDeployAction',
]
