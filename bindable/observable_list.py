"""
Bindable ObservableList - Ordered Collections with Change Forwarding
====================================================================

This module provides ObservableList, an ordered, indexable collection that
notifies its observers when items are added, removed or replaced.

Items that are themselves ObservableObjects are subscribed to automatically:
when one of their properties changes, the list re-emits the event to its own
observers stamped with the item and its current index. Subscriptions follow
the item's lifetime in the list and are torn down when it is removed or
replaced.

```python
from bindable import ObservableList, ObservableObject

todos = ObservableList()
todos.add_change_observer(print_event, wants_item_changes=True)

todo = ObservableObject({"title": "write docs", "done": False})
todos.add(todo)       # "add" event, index 0
todo.done = True      # forwarded: object=todo, name="done", index=0
todos.remove_range(0) # "remove" event, old_value=todo
```

Event Routing
-------------

Structural events (``list_change_type`` of "add", "remove" or "replace") have
the list as ``object`` and the stringified index as ``name``. Forwarded item
events keep the originating object and property name. Observers registered
without ``wants_item_changes`` only receive structural events.

Bulk operations notify once per affected item.
"""

import logging
from typing import Any, Callable, Iterable, Iterator, List, Mapping, Optional, Union

from .base import ChangeEvent, ObservableInterface
from .observable import ObservableObject
from .serialization import encode_value
from .util.observer_registry import ObserverHandle, ObserverRegistry

logger = logging.getLogger(__name__)


class _Stop:
    """Token a for_each callback returns to end the iteration."""

    def __repr__(self):
        return "STOP"


STOP = _Stop()

ADD = "add"
REMOVE = "remove"
REPLACE = "replace"


class _Slot:
    """Storage cell: the item, its current index and its subscription handle."""

    __slots__ = ("item", "index", "handle")

    def __init__(self, item: Any, index: int):
        self.item = item
        self.index = index
        self.handle: Optional[ObserverHandle] = None


def _is_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ObservableList(ObservableInterface):
    """
    An observable, ordered collection of arbitrary values.

    Args:
        items: Optional iterable whose elements are added in order
        add_validator: Optional predicate; an item is only added when it
            returns True for that item
    """

    def __init__(
        self,
        items: Optional[Iterable[Any]] = None,
        add_validator: Optional[Callable[[Any], bool]] = None,
    ):
        self._slots: List[_Slot] = []
        self._observers = ObserverRegistry()
        self._add_validator = add_validator if callable(add_validator) else None
        if items is not None:
            for item in items:
                self.add(item)

    # ========================================================================
    # Subscriptions to contained observables
    # ========================================================================

    def _subscribe(self, slot: _Slot) -> None:
        """Forward the slot item's change events, if it is observable."""
        if not isinstance(slot.item, ObservableObject):
            slot.handle = None
            return
        item = slot.item

        def forward_item_change(event: ChangeEvent) -> None:
            event.list_item = item
            event.index = slot.index
            self._notify_observers(event)

        slot.handle = item.add_change_observer(forward_item_change, self)
        logger.debug(f"Subscribed to list item at index {slot.index}")

    def _unsubscribe(self, slot: _Slot) -> None:
        if slot.handle is not None:
            slot.item.remove_change_observer(slot.handle)
            slot.handle = None
            logger.debug(f"Unsubscribed from list item at index {slot.index}")

    def _reindex(self, start_index: int) -> None:
        """Refresh the index of every slot from ``start_index`` on."""
        for i in range(start_index, len(self._slots)):
            self._slots[i].index = i

    # ========================================================================
    # Mutation
    # ========================================================================

    def add(self, item: Any, index: Optional[int] = None) -> bool:
        """
        Insert ``item`` at ``index`` (default: the end) and notify observers.

        Returns False, leaving the list unchanged, if ``index`` is not an
        integer in ``[0, len]`` or the add-validator rejects the item.
        """
        if index is None:
            index = len(self._slots)
        elif not _is_index(index) or index < 0 or index > len(self._slots):
            logger.debug(f"Rejected add at invalid index {index!r}")
            return False

        if self._add_validator is not None and self._add_validator(item) is not True:
            logger.debug(f"Add-validator rejected {item!r}")
            return False

        slot = _Slot(item, index)
        self._subscribe(slot)
        self._slots.insert(index, slot)
        self._reindex(index)

        self._notify_observers(
            ChangeEvent(
                name=str(index), object=self, list_change_type=ADD, index=index
            )
        )
        return True

    push = add
    append = add

    def remove_range(self, start_index: int, count: int = 1) -> int:
        """
        Remove up to ``count`` items starting at ``start_index``.

        Returns the number removed; 0 when ``start_index`` is outside
        ``[0, len)`` or ``count`` is not positive. Each removed item produces
        one "remove" event carrying its original index.
        """
        if not _is_index(start_index) or start_index < 0 or start_index >= len(self._slots):
            return 0
        if count <= 0:
            return 0
        count = min(count, len(self._slots) - start_index)

        removed = self._slots[start_index : start_index + count]
        del self._slots[start_index : start_index + count]
        self._reindex(start_index)

        for slot in removed:
            self._unsubscribe(slot)

        for slot in removed:
            index = slot.index
            self._notify_observers(
                ChangeEvent(
                    name=str(index),
                    old_value=slot.item,
                    object=self,
                    list_change_type=REMOVE,
                    index=index,
                )
            )
        return len(removed)

    def clear(self) -> None:
        self.remove_range(0, len(self._slots))

    def remove_last(self) -> bool:
        if not self._slots:
            return False
        return self.remove_range(len(self._slots) - 1) == 1

    def splice(
        self, start_index: int, delete_count: Optional[int] = None, *items: Any
    ) -> List[Any]:
        """
        Remove and/or insert items, with JavaScript ``Array.splice`` semantics.

        A negative ``start_index`` counts from the end; the result is clamped to
        ``[0, len]``. ``delete_count`` defaults to every item from the start on.
        The given ``items`` are then inserted in order starting at the start
        index. Returns the removed items.
        """
        length = len(self._slots)
        if start_index > length:
            start_index = length
        elif start_index < -length:
            start_index = 0
        elif start_index < 0:
            start_index = length + start_index

        if delete_count is None or delete_count > length - start_index:
            delete_count = length - start_index

        removed_items = [
            slot.item for slot in self._slots[start_index : start_index + max(delete_count, 0)]
        ]
        self.remove_range(start_index, delete_count)

        for offset, item in enumerate(items):
            self.add(item, start_index + offset)

        return removed_items

    def replace(self, index: int, new_item: Any) -> bool:
        """
        Put ``new_item`` at ``index`` in place of the current item.

        Replacing an item with itself does nothing. Otherwise the old item's
        subscription is torn down, the new item is subscribed if observable,
        and a "replace" event carrying the old item is sent. Returns False for
        an index outside ``[0, len)``.
        """
        if not _is_index(index) or index < 0 or index >= len(self._slots):
            return False
        slot = self._slots[index]
        if slot.item is new_item:
            return True

        old_item = slot.item
        self._unsubscribe(slot)
        slot.item = new_item
        self._subscribe(slot)

        self._notify_observers(
            ChangeEvent(
                name=str(index),
                old_value=old_item,
                object=self,
                list_change_type=REPLACE,
                index=index,
            )
        )
        return True

    # ========================================================================
    # Access and queries
    # ========================================================================

    def at(self, index: int, default: Any = None) -> Any:
        """Return the item at ``index``, or ``default`` when out of range."""
        if not _is_index(index) or index < 0 or index >= len(self._slots):
            return default
        return self._slots[index].item

    def __len__(self) -> int:
        return len(self._slots)

    @property
    def length(self) -> int:
        return len(self._slots)

    def __getitem__(self, index: int) -> Any:
        if not _is_index(index) or index < 0 or index >= len(self._slots):
            raise IndexError(f"list index {index!r} out of range")
        return self._slots[index].item

    def __setitem__(self, index: int, new_item: Any) -> None:
        if not self.replace(index, new_item):
            raise IndexError(f"list assignment index {index!r} out of range")

    def __iter__(self) -> Iterator[Any]:
        i = 0
        while i < len(self._slots):
            yield self._slots[i].item
            i += 1

    def __contains__(self, item: object) -> bool:
        return any(slot.item is item or slot.item == item for slot in self._slots)

    def for_each(self, callback: Callable[[Any, int], Any], start_index: int = 0) -> None:
        """
        Call ``callback(item, index)`` for each item from ``start_index`` on.

        Iteration stops early when the callback returns ``STOP``. The length is
        re-read on every step, so the walk sees mutations made by the callback.
        """
        i = start_index
        while 0 <= i < len(self._slots):
            if callback(self._slots[i].item, i) is STOP:
                break
            i += 1

    def index_of(self, item: Any, start_index: int = 0) -> int:
        """Index of the first item identical to ``item``, or -1."""
        found = -1

        def match(candidate, index):
            nonlocal found
            if candidate is item:
                found = index
                return STOP
            return None

        self.for_each(match, start_index)
        return found

    def first(self, predicate: Callable[[Any, int], bool], start_index: int = 0) -> Any:
        """
        First item for which ``predicate(item, index)`` returns True, or None.

        Only a result that is ``True`` matches; other truthy values do not.
        """
        result = None

        def match(candidate, index):
            nonlocal result
            if predicate(candidate, index) is True:
                result = candidate
                return STOP
            return None

        self.for_each(match, start_index)
        return result

    def last(self, predicate: Callable[[Any, int], bool], start_index: int = 0) -> Any:
        """Last item for which ``predicate(item, index)`` returns True, or None."""
        result = None

        def match(candidate, index):
            nonlocal result
            if predicate(candidate, index) is True:
                result = candidate
            return None

        self.for_each(match, start_index)
        return result

    def every(self, predicate: Callable[[Any], bool]) -> bool:
        outcome = True

        def check(candidate, index):
            nonlocal outcome
            if not predicate(candidate):
                outcome = False
                return STOP
            return None

        self.for_each(check)
        return outcome

    def filter(self, predicate: Callable[[Any], bool]) -> "ObservableList":
        """New ObservableList holding the items that satisfy ``predicate``."""
        return ObservableList(item for item in self if predicate(item))

    # ========================================================================
    # Observers
    # ========================================================================

    def add_change_observer(
        self,
        callback: Callable[[ChangeEvent], Any],
        user_data: Any = None,
        wants_item_changes: bool = False,
    ) -> Optional[ObserverHandle]:
        """
        Register an observer of this list.

        With ``wants_item_changes`` the observer also receives property changes
        forwarded from ObservableObject items. Returns the handle needed for
        removal, or None if ``callback`` is not callable.
        """
        return self._observers.add(
            callback, user_data, wants_item_changes=wants_item_changes is True
        )

    def remove_change_observer(self, handle: Optional[ObserverHandle]) -> bool:
        return self._observers.remove(handle)

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def _notify_observers(self, details: Union[ChangeEvent, Mapping[str, Any]]) -> None:
        """
        Send a structural or forwarded event to this list's observers.

        The list is appended to the event's ``senders`` chain. Events whose
        ``object`` is not this list are skipped for observers that did not ask
        for item changes.
        """
        event = ChangeEvent.coerce(details)
        if event.object is None:
            event.object = self
        event.senders.append(self)
        is_structural = event.object is self
        for handle in self._observers.snapshot():
            if not is_structural and not handle.wants_item_changes:
                continue
            handle.invoke(event.copy_for(self, handle.user_data))

    notify_all = _notify_observers

    # ========================================================================
    # Conversion
    # ========================================================================

    def to_array(self) -> List[Any]:
        return [slot.item for slot in self._slots]

    def to_json(self) -> List[Any]:
        """The items' own serialized forms, in order."""
        return [encode_value(slot.item) for slot in self._slots]

    def __str__(self) -> str:
        return ",".join(str(slot.item) for slot in self._slots)

    def __repr__(self) -> str:
        return f"ObservableList({self.to_array()!r})"
