"""
Invertible commands.

An invertible command performs one action when executed and returns another
command that undoes it. Executing that returned command in turn yields a
command that redoes the original action, which is all the undo/redo stack
needs to replay history in both directions.

Commands:
    InvertibleCommand: abstract capability, ``exec() -> InvertibleCommand``
    InvertibleCommands: composite running sub-commands in order
    SetPropertyCommand: assign a property, attribute or mapping key
    ListInsertCommand / ListRemoveCommand: single-item list edits
    CallbackCommand: pair of plain callables
"""

from abc import ABC, abstractmethod
from collections.abc import MutableMapping
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Tuple

from .observable import ObservableObject
from .observable_list import ObservableList


class InvertibleCommand(ABC):
    """A reversible action. Subclasses must implement ``exec``."""

    @abstractmethod
    def exec(self) -> Optional["InvertibleCommand"]:
        """Perform the action and return the command that reverts it."""
        pass


@dataclass(frozen=True, init=False)
class InvertibleCommands(InvertibleCommand):
    """
    A sequence of commands executed as one.

    The inverse runs the sub-commands' inverses in reverse order.
    """

    commands: Tuple[InvertibleCommand, ...]

    def __init__(self, commands: Iterable[InvertibleCommand]):
        object.__setattr__(self, "commands", tuple(commands))

    def exec(self) -> "InvertibleCommands":
        inverses = [command.exec() for command in self.commands]
        inverses.reverse()
        return InvertibleCommands(inverses)

    def __len__(self) -> int:
        return len(self.commands)


@dataclass(frozen=True)
class SetPropertyCommand(InvertibleCommand):
    """Set ``name`` on ``target`` to ``value``; the inverse restores the prior value."""

    target: Any
    name: str
    value: Any

    def exec(self) -> "SetPropertyCommand":
        target = self.target
        if isinstance(target, ObservableObject):
            current = target.get(self.name)
            target.set(self.name, self.value)
        elif isinstance(target, MutableMapping):
            current = target.get(self.name)
            target[self.name] = self.value
        else:
            current = getattr(target, self.name)
            setattr(target, self.name, self.value)
        return SetPropertyCommand(target, self.name, current)


@dataclass(frozen=True)
class ListInsertCommand(InvertibleCommand):
    """
    Insert ``item`` at ``index`` of an ObservableList or plain list.

    Returns None instead of an inverse when an ObservableList rejects the item.
    """

    target: Any
    item: Any
    index: int

    def exec(self) -> Optional["ListRemoveCommand"]:
        if isinstance(self.target, ObservableList):
            if not self.target.add(self.item, self.index):
                return None
        else:
            self.target.insert(self.index, self.item)
        return ListRemoveCommand(self.target, self.index)


@dataclass(frozen=True)
class ListRemoveCommand(InvertibleCommand):
    """Remove the item at ``index``; the inverse re-inserts it there."""

    target: Any
    index: int

    def exec(self) -> ListInsertCommand:
        item = self.target[self.index]
        if isinstance(self.target, ObservableList):
            self.target.remove_range(self.index, 1)
        else:
            del self.target[self.index]
        return ListInsertCommand(self.target, item, self.index)


@dataclass(frozen=True)
class CallbackCommand(InvertibleCommand):
    """Run ``do``; the inverse runs ``undo`` (and inverts back to ``do``)."""

    do: Callable[[], Any]
    undo: Callable[[], Any]

    def exec(self) -> "CallbackCommand":
        self.do()
        return CallbackCommand(self.undo, self.do)
