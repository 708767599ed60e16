import inspect
import importlib
from typing import Dict, Optional
import logging

from .util import to_kebab
from .. import constants

logger = logging.getLogger(__name__)


def discover_classes(
    pkg_name: str,
    base_cls: type,
    exclude_abstract: bool = True,
    exclude_base: bool = True
) -> Dict[str, type]:
    """
    Discover classes extends base from pkg

    Args:
        pkg_name: package name (e.g. 'yaib.bases')
        base_cls: base class (e.g. Action)
        exclude_abstract: whether to exclude abstract classes
        exclude_base: whether to exclude base class itself

    Returns:
        dictionary {class name: class object}
    """
    discovered = {}

    module = importlib.import_module(pkg_name)

    for name, obj in inspect.getmembers(module, inspect.isclass):
        if exclude_base and obj == base_cls:
            continue

        if not issubclass(obj, base_cls):
            continue

        if exclude_abstract and inspect.isabstract(obj):
            continue

        discovered[name] = obj

    return discovered


def extract_action_info(cls_name: str) -> Optional[str]:
    """
    Extract the recipe tag from an action class name

    Args:
        cls_name: class name (e.g. 'ImagePartitionAction')

    Returns:
        recipe tag (e.g. 'image-partition') or None
    """
    suffix = constants.ACTION_CLASS_SUFFIX
    if not cls_name.endswith(suffix):
        return None

    base_name = cls_name[:-len(suffix)]
    if not base_name:
        logger.warning(f"Failed to extract action tag from {cls_name}")
        return None
    return to_kebab(base_name)
