"""
Bindable Observable - Observable Property Bags
==============================================

This module provides ObservableObject, an object whose properties notify
registered observers whenever they are added, changed or removed.

Every ObservableObject keeps an explicit property-descriptor table: each
property name maps to a PropertyDescriptor holding its value, its flags and,
for filtered properties, the filter function. All reads and writes go through
one accessor pair (``get`` / ``set``), and attribute or item syntax is sugar
over that pair:

```python
from bindable import ObservableObject

point = ObservableObject({"x": 0, "y": 0})

def on_change(event):
    print(f"{event.name}: {event.old_value!r} -> {point.get(event.name)!r}")

handle = point.add_change_observer(on_change)
point.x = 5          # prints "x: 0 -> 5"
point.x = 5          # same value, no notification
point.remove_change_observer(handle)
```

Property Kinds
--------------

- **PLAIN**: readable and writable, notifies on every real change
- **READ_ONLY**: never changes after it is added
- **PRIVATE_SET**: only the setter returned by ``add_property_with_private_set``
  can change it; ordinary assignment is ignored
- **FILTERED**: every assignment is passed through ``filter(new, current)`` and
  the result becomes the candidate value

Rejected mutations (duplicate names, reserved names, non-removable targets,
read-only writes) are reported through return values, never exceptions.

Notification
------------

Notification is synchronous. ``notify_all`` stamps the event with the object
that changed, appends this object to the event's ``senders`` chain, and calls
each observer registered at that moment, in registration order, with a private
copy of the event.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .base import (
    NOT_PRESENT,
    ChangeEvent,
    ObservableInterface,
    values_equal,
)
from .registry import TypeRegistry, get_type_registry
from .serialization import (
    PRIMITIVE_TAGS,
    SERIALIZED_DATA_KEY,
    encode_value,
    primitive_tag,
)
from .util.observer_registry import ObserverHandle, ObserverRegistry

logger = logging.getLogger(__name__)

SetFilter = Callable[[Any, Any], Any]


class PropertyKind(Enum):
    """How a property may be written."""

    PLAIN = "plain"
    READ_ONLY = "read-only"
    PRIVATE_SET = "privately-settable"
    FILTERED = "filtered"


@dataclass
class PropertyDescriptor:
    """One entry of an ObservableObject's property table."""

    name: str
    value: Any
    kind: PropertyKind = PropertyKind.PLAIN
    removable: bool = True
    enumerable: bool = True
    set_filter: Optional[SetFilter] = None

    @property
    def writable(self) -> bool:
        return self.kind in (PropertyKind.PLAIN, PropertyKind.FILTERED)


class ObservableObject(ObservableInterface):
    """
    A property bag that notifies observers about every property change.

    Args:
        object_to_copy: Optional source of initial properties. A mapping holding
            the ``"ObservableSerializedData"`` key is treated as serialized data
            and each descriptor is rebuilt with its flags; any other mapping (or
            another ObservableObject, or an object's public attributes) is copied
            as plain, removable, writable, enumerable properties.
        simple_serialize: When True, ``to_json`` returns a plain mapping of the
            enumerable properties. When False it returns the descriptor-list
            form that preserves property flags.
        registry: TypeRegistry used to rebuild non-primitive serialized values.
            Defaults to the global registry.
    """

    RESERVED_NAME = SERIALIZED_DATA_KEY

    def __init__(
        self,
        object_to_copy: Any = None,
        simple_serialize: bool = True,
        registry: Optional[TypeRegistry] = None,
    ):
        object.__setattr__(self, "_properties", {})
        object.__setattr__(self, "_observers", ObserverRegistry())
        object.__setattr__(self, "_simple_serialize", simple_serialize)
        object.__setattr__(self, "_registry", registry)
        object.__setattr__(self, "_sealed", False)

        if object_to_copy is None:
            return
        if isinstance(object_to_copy, ObservableObject):
            source = object_to_copy.to_dict()
        elif isinstance(object_to_copy, Mapping):
            if SERIALIZED_DATA_KEY in object_to_copy:
                for descriptor in object_to_copy[SERIALIZED_DATA_KEY]:
                    self.add_deserialized_property(descriptor)
                return
            source = object_to_copy
        elif hasattr(object_to_copy, "__dict__"):
            source = {k: v for k, v in vars(object_to_copy).items() if not k.startswith("_")}
        else:
            return
        for name, value in source.items():
            self.add_property(name, value, True, True, True)

    # ========================================================================
    # Attribute / item sugar over get() and set()
    # ========================================================================

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails
        if name.startswith("_"):
            raise AttributeError(name)
        descriptor = self.__dict__.get("_properties", {}).get(name)
        if descriptor is None:
            raise AttributeError(
                f"'{type(self).__name__}' object has no property '{name}'"
            )
        return descriptor.value

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_") or hasattr(type(self), name):
            object.__setattr__(self, name, value)
        elif name in self._properties:
            self.set(name, value)
        else:
            raise AttributeError(
                f"'{type(self).__name__}' object has no property '{name}'; "
                f"use add_property() to add it"
            )

    def __delattr__(self, name: str) -> None:
        if name in self._properties:
            if not self.remove_property(name):
                raise AttributeError(f"Property '{name}' cannot be removed")
        else:
            object.__delattr__(self, name)

    def __getitem__(self, name: str) -> Any:
        descriptor = self._properties.get(name)
        if descriptor is None:
            raise KeyError(name)
        return descriptor.value

    def __setitem__(self, name: str, value: Any) -> None:
        if name not in self._properties:
            raise KeyError(name)
        self.set(name, value)

    def __contains__(self, name: object) -> bool:
        return name in self._properties

    def __dir__(self):
        return list(super().__dir__()) + list(self._properties)

    # ========================================================================
    # Property access
    # ========================================================================

    def get(self, name: str, default: Any = NOT_PRESENT) -> Any:
        """Return the value of ``name``, or ``default`` if there is no such property."""
        descriptor = self._properties.get(name)
        if descriptor is None:
            return default
        return descriptor.value

    def set(self, name: str, value: Any) -> bool:
        """
        Assign ``value`` to the property ``name``.

        Returns False when the property does not exist or does not accept
        ordinary assignment (read-only and privately-settable properties).
        An accepted write of an equal value returns True without notifying.
        """
        descriptor = self._properties.get(name)
        if descriptor is None:
            logger.debug(f"Ignored write to missing property '{name}'")
            return False
        if not descriptor.writable:
            logger.debug(f"Ignored write to {descriptor.kind.value} property '{name}'")
            return False
        if descriptor.kind is PropertyKind.FILTERED:
            value = descriptor.set_filter(value, descriptor.value)
        self._write(descriptor, value)
        return True

    def _write(self, descriptor: PropertyDescriptor, value: Any) -> None:
        if values_equal(descriptor.value, value):
            return
        old_value = descriptor.value
        descriptor.value = value
        self.notify_all(ChangeEvent(name=descriptor.name, old_value=old_value))

    def has_property(self, name: str) -> bool:
        return name in self._properties

    def get_descriptor(self, name: str) -> Optional[PropertyDescriptor]:
        """Return a copy of the descriptor for ``name``, or None."""
        descriptor = self._properties.get(name)
        return replace(descriptor) if descriptor is not None else None

    def property_names(self, enumerable_only: bool = True) -> List[str]:
        return [
            name
            for name, descriptor in self._properties.items()
            if descriptor.enumerable or not enumerable_only
        ]

    # ========================================================================
    # Adding and removing properties
    # ========================================================================

    def _accept_new_name(self, name: Any) -> Optional[str]:
        """Normalize ``name`` for a new property, or None if it must be rejected."""
        if name is None:
            return None
        name = str(name)
        if name == self.RESERVED_NAME or name in self._properties:
            logger.debug(f"Rejected property name '{name}'")
            return None
        if self._sealed:
            logger.debug(f"Rejected property '{name}' on sealed object")
            return None
        return name

    def _install(self, descriptor: PropertyDescriptor) -> None:
        self._properties[descriptor.name] = descriptor
        self.notify_all(
            ChangeEvent(name=descriptor.name, old_value=NOT_PRESENT, object=self)
        )

    def add_property(
        self,
        name: str,
        value: Any,
        removable: bool = True,
        writable: bool = True,
        enumerable: bool = True,
    ) -> bool:
        """
        Add a property and notify observers of the addition.

        Returns False, without changing anything, if ``name`` is None, the
        reserved serialization name, or already present.
        """
        name = self._accept_new_name(name)
        if name is None:
            return False
        kind = PropertyKind.PLAIN if writable else PropertyKind.READ_ONLY
        self._install(PropertyDescriptor(name, value, kind, removable, enumerable))
        return True

    def add_property_with_private_set(
        self, name: str, value: Any, enumerable: bool = True
    ) -> Optional[Callable[[Any], None]]:
        """
        Add a non-removable property that only the returned setter can change.

        Ordinary assignment to the property is ignored. Calling the setter with
        a different value updates the property and notifies observers. Returns
        None if the property could not be added.
        """
        name = self._accept_new_name(name)
        if name is None:
            return None
        descriptor = PropertyDescriptor(
            name, value, PropertyKind.PRIVATE_SET, removable=False, enumerable=enumerable
        )
        self._install(descriptor)

        def set_value(new_value: Any) -> None:
            self._write(descriptor, new_value)

        return set_value

    def add_property_with_set_filter(
        self,
        name: str,
        value: Any,
        set_filter: SetFilter,
        removable: bool = True,
        enumerable: bool = True,
    ) -> bool:
        """
        Add a property whose assignments pass through ``set_filter(new, current)``.

        The filter's return value becomes the candidate value; observers are
        notified only if it differs from the current value.
        """
        if not callable(set_filter):
            return False
        name = self._accept_new_name(name)
        if name is None:
            return False
        self._install(
            PropertyDescriptor(
                name, value, PropertyKind.FILTERED, removable, enumerable, set_filter
            )
        )
        return True

    def add_ro_property(self, name: str, value: Any, enumerable: bool = True) -> bool:
        """Add a property that can neither be written nor removed."""
        return self.add_property(name, value, False, False, enumerable)

    def add_deserialized_property(self, descriptor: Mapping[str, Any]) -> bool:
        """
        Add a property from one serialized descriptor.

        Primitive values are taken as-is. Other values are rebuilt through the
        type registry; when no factory is registered for the descriptor's
        ``varType`` the property is skipped and False is returned.
        """
        var_type = descriptor.get("varType")
        if var_type is None:
            return False
        value = descriptor.get("value")
        if var_type not in PRIMITIVE_TAGS:
            value = self.registry.build(var_type, value)
            if value is NOT_PRESENT:
                logger.debug(
                    f"Dropped property '{descriptor.get('name')}': "
                    f"unknown type '{var_type}'"
                )
                return False
        return self.add_property(
            descriptor.get("name"),
            value,
            descriptor.get("configurable", True),
            descriptor.get("writable", True),
            descriptor.get("enumerable", True),
        )

    def remove_property(self, name: str) -> bool:
        """Remove a removable property and notify with the removed value."""
        if name is None or self._sealed:
            return False
        descriptor = self._properties.get(name)
        if descriptor is None or not descriptor.removable:
            return False
        del self._properties[name]
        self.notify_all(ChangeEvent(name=name, old_value=descriptor.value))
        return True

    def seal(self) -> None:
        """Prevent any further property additions or removals."""
        self._sealed = True

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    # ========================================================================
    # Observers
    # ========================================================================

    def add_change_observer(
        self,
        callback: Callable[[ChangeEvent], Any],
        user_data: Any = None,
        call_binding: Any = None,
    ) -> Optional[ObserverHandle]:
        """
        Register ``callback`` to be called with a ChangeEvent on every change.

        ``user_data`` is handed back on each event. When ``call_binding`` is
        given the callback is invoked as a method bound to it. Returns the
        handle needed for removal, or None if ``callback`` is not callable.
        """
        return self._observers.add(callback, user_data, call_binding)

    def remove_change_observer(self, handle: Optional[ObserverHandle]) -> bool:
        return self._observers.remove(handle)

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def notify_all(self, details: Union[ChangeEvent, Mapping[str, Any]]) -> None:
        """
        Notify every registered observer about a change.

        ``details`` needs ``name`` and ``old_value``; ``object`` defaults to
        this object. This object is appended to the event's ``senders`` chain
        before dispatch, and each observer receives its own copy carrying its
        user data.
        """
        event = ChangeEvent.coerce(details)
        if event.object is None:
            event.object = self
        event.senders.append(self)
        for handle in self._observers.snapshot():
            handle.invoke(event.copy_for(self, handle.user_data))

    # ========================================================================
    # Serialization
    # ========================================================================

    @property
    def registry(self) -> TypeRegistry:
        if self._registry is not None:
            return self._registry
        return get_type_registry()

    @property
    def simple_serialize(self) -> bool:
        return self._simple_serialize

    def to_dict(self) -> Dict[str, Any]:
        """Enumerable properties as a plain mapping of raw values."""
        return {
            name: descriptor.value
            for name, descriptor in self._properties.items()
            if descriptor.enumerable
        }

    def to_json(self) -> Dict[str, Any]:
        """
        JSON-compatible form of the enumerable properties.

        Simple mode gives ``{name: value}``. Otherwise the result is
        ``{"ObservableSerializedData": [descriptor, ...]}`` where each
        descriptor records name, value, flags and a ``varType`` tag.
        """
        if self._simple_serialize:
            return {name: encode_value(value) for name, value in self.to_dict().items()}

        entries = []
        for name, descriptor in self._properties.items():
            if not descriptor.enumerable:
                continue
            value = descriptor.value
            entries.append(
                {
                    "name": name,
                    "value": encode_value(value),
                    "enumerable": descriptor.enumerable,
                    "writable": descriptor.writable,
                    "configurable": descriptor.removable,
                    "varType": primitive_tag(value) or self.registry.tag_for(value),
                }
            )
        return {SERIALIZED_DATA_KEY: entries}

    def __str__(self) -> str:
        return f"[object {type(self).__name__}]"

    def __repr__(self) -> str:
        fields = [f"{name}={value!r}" for name, value in self.to_dict().items()]
        return f"{type(self).__name__}({', '.join(fields)})"
