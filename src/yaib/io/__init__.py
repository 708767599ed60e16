"""
yaib IO Module

- clean_path, clean_path_at: Lexical path resolution against a working directory
- copy_file: Atomic single file copy
- copy_tree: Recursive tree overlay with permission and symlink fidelity

Usage:
    from yaib.io import clean_path, copy_tree

    copy_tree(clean_path("overlay"), "/scratch/root")
"""

from .path import clean_path, clean_path_at
from .tree import copy_file, copy_tree

__all__ = [
    'clean_path',
    'clean_path_at',
    'copy_file',
    'copy_tree',
]
