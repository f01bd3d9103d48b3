"""
Type Registry - tag to factory mapping for deserialization.

Serialized observables record a ``varType`` tag for every property. Primitive
tags are restored as-is; every other tag is looked up here and the registered
factory rebuilds the value from its serialized form. A tag with no factory is
not an error: the property is dropped.

Implementation:
    - get_type_registry(): lazy singleton pattern
    - TypeRegistry: tag -> factory and class -> tag tables
    - _reset_type_registry(): fresh registry for tests
"""

import logging
from typing import Any, Callable, Dict, Optional

from .base import NOT_PRESENT

logger = logging.getLogger(__name__)

Factory = Callable[[Any], Any]


class TypeRegistry:
    """
    Registry of factories able to rebuild non-primitive serialized values.

    Tag Strategy:
        A value's tag is the tag registered for the nearest class in its MRO,
        falling back to the class ``__name__``. Registering a tag without a
        class only enables reconstruction under that tag.
    """

    def __init__(self, install_defaults: bool = True):
        self._factories: Dict[str, Factory] = {}
        self._tags: Dict[type, str] = {}
        if install_defaults:
            self._install_defaults()

    def _install_defaults(self) -> None:
        """
        Register the built-in containers and the bindable value types.

        Lazy imports avoid the circular dependency between this module and
        the observable modules that consult the registry.
        """
        from .observable import ObservableObject
        from .observable_list import ObservableList
        from .values.vec2 import Vec2

        self.register("list", list, list)
        self.register("dict", dict, dict)
        self.register("tuple", tuple, tuple)
        self.register("ObservableObject", ObservableObject, ObservableObject)
        self.register("ObservableList", ObservableList, ObservableList)
        self.register("Vec2", Vec2.from_json, Vec2)

    def register(self, tag: str, factory: Factory, cls: Optional[type] = None) -> None:
        """Register ``factory`` under ``tag``; map ``cls`` to the tag if given."""
        if not callable(factory):
            raise TypeError(f"Factory for '{tag}' must be callable, got {factory!r}")
        self._factories[tag] = factory
        if cls is not None:
            self._tags[cls] = tag
        logger.debug(f"Registered type tag '{tag}'")

    def unregister(self, tag: str) -> bool:
        """Forget ``tag`` and any class mapped to it."""
        if tag not in self._factories:
            return False
        del self._factories[tag]
        for cls in [c for c, t in self._tags.items() if t == tag]:
            del self._tags[cls]
        return True

    def factory_for(self, tag: str) -> Optional[Factory]:
        return self._factories.get(tag)

    def tag_for(self, value: Any) -> str:
        for cls in type(value).__mro__:
            if cls in self._tags:
                return self._tags[cls]
        return type(value).__name__

    def build(self, tag: str, data: Any) -> Any:
        """
        Rebuild a value from its serialized form.

        Returns NOT_PRESENT when no factory is registered for ``tag``.
        """
        factory = self._factories.get(tag)
        if factory is None:
            logger.debug(f"No factory registered for type tag '{tag}'")
            return NOT_PRESENT
        return factory(data)

    def __contains__(self, tag: object) -> bool:
        return tag in self._factories

    def __len__(self) -> int:
        return len(self._factories)


_type_registry = None


def get_type_registry() -> TypeRegistry:
    """
    Get or create the global type registry.

    Lazy singleton pattern: creates on first access, reuses thereafter.
    Testing can reset via _reset_type_registry().
    """
    global _type_registry
    if _type_registry is None:
        _type_registry = TypeRegistry()
    return _type_registry


def _reset_type_registry() -> None:
    """
    Reset the global registry for testing purposes.

    The next get_type_registry() call builds a fresh one with the defaults.
    """
    global _type_registry
    _type_registry = None


def register_type(tag: str, factory: Factory, cls: Optional[type] = None) -> None:
    """Register a factory in the global registry."""
    get_type_registry().register(tag, factory, cls)
