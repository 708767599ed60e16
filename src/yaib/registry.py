"""
yaib Registries

This module contains the registry mapping recipe tags to action classes.

Dependencies:
- abstractions: For the Action base class used in discovery
- utils: For class discovery and tag extraction
"""

from typing import Dict, Type, Set, Optional, TypeVar, Generic
from abc import ABC, abstractmethod
import logging

from .abstractions import Action
from .utils import discover_classes, extract_action_info

logger = logging.getLogger(__name__)

K = TypeVar('K')
V = TypeVar('V')

class Registry(Generic[K, V], ABC):
    """
    An abstract base class for a generic discoverable registry.
    """

    # --- Configuration: To be defined by subclasses ---
    package: Optional[str] = None # package to scan
    base_class: Optional[Type] = None # base class to discover

    def __init__(self):
        self._registry: Dict[K, V] = {}

        if self.package is None or self.base_class is None:
            raise NotImplementedError(
                f"{self.__class__.__name__} must define class attributes "
                "'package' and 'base_class'."
            )

        logger.debug(f"Initialized {self.__class__.__name__}")

    def register(self, key: K, value: V):
        self._registry[key] = value
        logger.debug(f"Registered in {self.__class__.__name__}: {key} -> {getattr(value, '__name__', str(value))}")

    def get(self, key: K) -> Optional[V]:
        return self._registry.get(key)

    @property
    def registry(self) -> Dict[K, V]:
        return self._registry

    @abstractmethod
    def _register_item(self, class_name: str, discovered_class: Type[V]):
        """
        Abstract method: Defines the logic to register a single discovered class.
        """
        raise NotImplementedError

    def discover(self):
        """
        Template method to automatically discover and register classes.
        """
        logger.debug(f"Starting discovery for {self.__class__.__name__} in '{self.package}'...")
        discovered = discover_classes(
            self.package,
            self.base_class,
            exclude_abstract=True,
            exclude_base=True
        )

        for name, obj in discovered.items():
            self._register_item(name, obj)

        logger.debug(f"Discovery for {self.__class__.__name__} finished. Total items: {len(self._registry)}")


class ActionRegistry(Registry[str, Type[Action]]):
    """
    Registry of the closed set of action kinds, keyed by recipe tag.
    The tag is derived from the class name: `OstreeCommitAction` -> `ostree-commit`.
    """
    package = "yaib.bases"
    base_class = Action

    def _register_item(self, class_name: str, discovered_class: Type[Action]):
        tag = extract_action_info(class_name)
        if tag:
            self.register(tag, discovered_class)

    def action(self, tag: str) -> Optional[Type[Action]]:
        if not self.registry:
            self.discover()
        return self.get(tag)

    def get_supports(self) -> Set[str]:
        if not self.registry:
            self.discover()
        return set(self.registry.keys())


# Global registry
action_registry = ActionRegistry()


def initialize_registries():
    """
    Initialize the global registry with auto-discovery.
    """
    logger.debug("Initializing action registry...")
    action_registry.discover()
    logger.debug(f"Discovered {len(action_registry.registry)} action kinds: {sorted(action_registry.registry)}")
