"""
Copy-on-Write Observer Registry
===============================

This module provides ObserverHandle and ObserverRegistry, the observer storage
embedded in every bindable observable.

Registrations are kept in an immutable tuple that is replaced on every add or
remove. A notification pass iterates the tuple it read at the start of the
pass, so observers added or removed by a callback mid-pass only affect the
next pass:

- an observer removed during a pass still receives the event being dispatched
- an observer added during a pass does not
"""

from dataclasses import dataclass
from types import MethodType
from typing import Any, Callable, Iterator, Optional, Tuple


@dataclass(frozen=True, eq=False)
class ObserverHandle:
    """
    Opaque, immutable token returned when an observer is registered.

    Handles compare by identity: two registrations of the same callback yield
    two distinct handles, and only the exact handle removes its registration.
    """

    callback: Callable
    user_data: Any = None
    call_binding: Any = None
    wants_item_changes: bool = True

    def invoke(self, event: Any) -> Any:
        """Call the observer, bound to ``call_binding`` when one was given."""
        if self.call_binding is None:
            return self.callback(event)
        return MethodType(self.callback, self.call_binding)(event)


class ObserverRegistry:
    """
    Ordered, copy-on-write collection of observer handles.

    Invocation order is registration order.
    """

    __slots__ = ("_handles",)

    def __init__(self):
        self._handles: Tuple[ObserverHandle, ...] = ()

    def add(
        self,
        callback: Callable,
        user_data: Any = None,
        call_binding: Any = None,
        wants_item_changes: bool = True,
    ) -> Optional[ObserverHandle]:
        """Register a callback; returns None if it is not callable."""
        if not callable(callback):
            return None
        handle = ObserverHandle(callback, user_data, call_binding, wants_item_changes)
        self._handles = self._handles + (handle,)
        return handle

    def remove(self, handle: Optional[ObserverHandle]) -> bool:
        """Remove the registration matching ``handle`` by identity."""
        for i, existing in enumerate(self._handles):
            if existing is handle:
                self._handles = self._handles[:i] + self._handles[i + 1 :]
                return True
        return False

    def snapshot(self) -> Tuple[ObserverHandle, ...]:
        """Return the registrations as they are right now."""
        return self._handles

    def clear(self) -> None:
        self._handles = ()

    def __contains__(self, handle: object) -> bool:
        return any(existing is handle for existing in self._handles)

    def __iter__(self) -> Iterator[ObserverHandle]:
        return iter(self._handles)

    def __len__(self) -> int:
        return len(self._handles)

    def __bool__(self) -> bool:
        return bool(self._handles)
