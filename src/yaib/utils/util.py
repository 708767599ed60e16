"""
Some utils for yaib
"""

import re

from .. import constants
from ..exceptions import ActionDefinitionError

# ----------------------
#
#  Name Converting
#
# ----------------------

cpn = re.compile(r'(?<!^)(?=[A-Z])')
cp_pattern = re.compile(r'^[a-zA-Z][a-zA-Z0-9]*$')
size_pattern = re.compile(r'^\s*(\d+)\s*([a-zA-Z]*)\s*$')

def to_snake(name: str) -> str:
    """
    Convert camalCase or PascalCase to snake_case
    """
    if not cp_pattern.fullmatch(name):
        raise ValueError(f"Only PascalCase and camelCase can use to_snake, but '{name}' got.")
    return cpn.sub('_', name).lower()


def to_kebab(name: str) -> str:
    """
    Convert camalCase or PascalCase to kebab-case
    """
    return to_snake(name).replace('_', '-')

# ----------------------
#
#  Sizes
#
# ----------------------

def parse_size(size: int | str) -> int:
    """
    Convert a human size like '4GB', '512MiB' or 1024 into bytes
    """
    if isinstance(size, int):
        value, unit = size, ""
    else:
        match = size_pattern.fullmatch(size)
        if not match:
            raise ActionDefinitionError(f"Invalid size '{size}'")
        value, unit = int(match.group(1)), match.group(2).upper()
    if unit not in constants.SIZE_UNITS:
        raise ActionDefinitionError(f"Unknown size unit '{unit}' in '{size}'")
    return value * constants.SIZE_UNITS[unit]
