"""
yaib Utils Module

- logger: Logging setup and configuration
- util: Name conversion and size parsing
- reflection: Class discovery and reflection utilities
- command: External command runner

Usage:
    from yaib.utils import setup_logger, Command, parse_size
"""

from .logger import setup_logger, parse_module_levels
from .util import to_snake, to_kebab, parse_size
from .reflection import discover_classes, extract_action_info
from .command import Command

__all__ = [
    'setup_logger',
    'parse_module_levels',
    'to_snake',
    'to_kebab',
    'parse_size',
    # Reflection utilities
    'discover_classes',
    'extract_action_info',
    'Command',
]
