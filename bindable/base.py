"""
Base classes and shared types for the bindable observables.

This module provides the foundational pieces every observable type builds on:
the change event payload, the "absent value" sentinel, the equality rule used
for change detection, and the abstract interface observables implement.

Architecture:
    ChangeEvent: notification payload handed to observers
    NOT_PRESENT: sentinel for "no value" (property added, or never set)
    ObservableInterface: abstract base defining the observer contract
    values_equal: identity/equality test deciding whether a write is a change

Protocols (TYPE_CHECKING only):
    Serializable: objects exposing ``to_json()``
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any, Callable, List, Mapping, Optional, Protocol, Union

from .util.observer_registry import ObserverHandle


class _NotPresent:
    """Sentinel for a value that does not exist (e.g. before a property was added)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "NOT_PRESENT"

    def __bool__(self):
        return False

    def __reduce__(self):
        return (_NotPresent, ())


NOT_PRESENT = _NotPresent()


# ============================================================================
# EXCEPTIONS
# ============================================================================


class BindableError(Exception):
    """Base class for errors raised by bindable."""

    pass


class SerializationError(BindableError, TypeError):
    """Raised when a value cannot be converted to a JSON-compatible form."""

    pass


# ============================================================================
# Change Events
# ============================================================================


@dataclass
class ChangeEvent:
    """
    Details of a single change, as seen by one observer.

    Every observer receives its own copy, so observers may annotate or forward
    the event they were given without affecting other observers.

    Attributes:
        name: Property name, or the stringified index for list structure changes
        old_value: Value before the change; NOT_PRESENT when a property is added
        object: The object whose property changed, or the list for structural changes
        senders: Every object that relayed this event; the last entry is the closest
        sender: The object that invoked this observer
        user_data: The user data given when the observer was registered
        list_change_type: "add", "remove" or "replace" for list structure changes
        index: Position of the affected list item
        list_item: The list item an item-level change was forwarded from
    """

    name: Optional[str] = None
    old_value: Any = NOT_PRESENT
    object: Any = None
    senders: List[Any] = field(default_factory=list)
    sender: Any = None
    user_data: Any = None
    list_change_type: Optional[str] = None
    index: Optional[int] = None
    list_item: Any = None

    @classmethod
    def coerce(cls, details: Union["ChangeEvent", Mapping[str, Any]]) -> "ChangeEvent":
        """Accept either an event or a plain mapping of event fields."""
        if isinstance(details, ChangeEvent):
            return details
        return cls(**dict(details))

    def copy_for(self, sender: Any, user_data: Any) -> "ChangeEvent":
        """Per-observer copy with its own senders list."""
        return replace(
            self, senders=list(self.senders), sender=sender, user_data=user_data
        )


# ============================================================================
# Change detection
# ============================================================================


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never equals a number here
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def values_equal(a: Any, b: Any) -> bool:
    """
    Decide whether assigning ``b`` over ``a`` is a no-op.

    Identical objects are equal. Otherwise both must share a type and compare
    equal; non-bool ints and floats count as one numeric type. Comparisons
    that raise or cannot be reduced to a bool count as different.
    """
    if a is b:
        return True
    if type(a) is not type(b) and not (_is_number(a) and _is_number(b)):
        return False
    try:
        return bool(a == b)
    except (TypeError, ValueError):
        return False


# ============================================================================
# Protocols (Documentation Only - NOT for runtime checks)
# ============================================================================


class Serializable(Protocol):
    """Protocol for values that know their own JSON-compatible form.

    NOTE: This is for TYPE CHECKING ONLY. Serialization code probes for
    ``to_json`` with getattr instead of isinstance().
    """

    def to_json(self) -> Any: ...


# ============================================================================
# Base Observable Interface
# ============================================================================


class ObservableInterface(ABC):
    """Abstract interface shared by ObservableObject and ObservableList."""

    @abstractmethod
    def add_change_observer(
        self, callback: Callable[[ChangeEvent], Any], user_data: Any = None, *args
    ) -> Optional[ObserverHandle]:
        """Register an observer; returns a handle, or None if not callable."""
        pass

    @abstractmethod
    def remove_change_observer(self, handle: Optional[ObserverHandle]) -> bool:
        """Unregister by exact handle identity."""
        pass

    @abstractmethod
    def to_json(self) -> Any:
        """Return a JSON-compatible form of this observable."""
        pass
