"""
Bindable Undo/Redo - Observable Undo and Redo Stacks
====================================================

UndoRedoStack keeps two stacks of ``(label, command)`` pairs and exposes four
observable properties that UI code can bind to:

- ``undo_text`` / ``redo_text``: label of the next undo/redo action, or
  "Undo" / "Redo" when the stack is empty
- ``undo_count`` / ``redo_count``: stack depths

```python
from bindable import ObservableObject, SetPropertyCommand, UndoRedoStack

doc = ObservableObject({"title": "draft"})
history = UndoRedoStack()

history.exec_with_undo("Undo rename", SetPropertyCommand(doc, "title", "final"))
history.exec_undo()   # doc.title == "draft", history.redo_text == "Redo rename"
history.exec_redo()   # doc.title == "final"
```

Labels are swapped by plain text replacement of "Undo" with "Redo" (and back)
whenever an action moves between the stacks; labels without those words pass
through unchanged.
"""

import logging
from typing import List, Sequence, Tuple, Union

from .commands import InvertibleCommand, InvertibleCommands
from .observable import ObservableObject

logger = logging.getLogger(__name__)

CommandOrCommands = Union[InvertibleCommand, Sequence[InvertibleCommand]]


class UndoRedoStack(ObservableObject):
    """
    Undo and redo stacks with observable labels and depths.

    Each of ``undo_text``, ``redo_text``, ``undo_count`` and ``redo_count`` is
    a privately-settable property: observers are told whenever one of them
    changes, and only the stack itself can change them.
    """

    DEFAULT_UNDO_TEXT = "Undo"
    DEFAULT_REDO_TEXT = "Redo"

    def __init__(self, simple_serialize: bool = True):
        super().__init__(simple_serialize=simple_serialize)
        self._undos: List[Tuple[str, InvertibleCommand]] = []
        self._redos: List[Tuple[str, InvertibleCommand]] = []

        self._set_undo_text = self.add_property_with_private_set(
            "undo_text", self.DEFAULT_UNDO_TEXT
        )
        self._set_redo_text = self.add_property_with_private_set(
            "redo_text", self.DEFAULT_REDO_TEXT
        )
        self._set_undo_count = self.add_property_with_private_set("undo_count", 0)
        self._set_redo_count = self.add_property_with_private_set("redo_count", 0)

    @property
    def can_undo(self) -> bool:
        return bool(self._undos)

    @property
    def can_redo(self) -> bool:
        return bool(self._redos)

    def peek_undo_label(self) -> str:
        return self._undos[-1][0] if self._undos else self.DEFAULT_UNDO_TEXT

    def peek_redo_label(self) -> str:
        return self._redos[-1][0] if self._redos else self.DEFAULT_REDO_TEXT

    def add_undo(self, label: str, command: CommandOrCommands) -> bool:
        """
        Push an undo action and discard every pending redo.

        A list or tuple of commands is wrapped in InvertibleCommands.
        """
        if isinstance(command, (list, tuple)):
            command = InvertibleCommands(command)

        self._undos.append((label, command))
        self._set_undo_text(label)

        self._redos.clear()
        self._set_redo_text(self.DEFAULT_REDO_TEXT)

        self._set_undo_count(len(self._undos))
        self._set_redo_count(0)
        logger.debug(f"Pushed undo '{label}' (depth {len(self._undos)})")
        return True

    def exec_undo(self) -> None:
        """Undo the most recent action. Does nothing if there is none."""
        if not self._undos:
            return
        label, command = self._undos.pop()
        redo = command.exec()

        redo_label = label.replace("Undo", "Redo", 1)
        self._redos.append((redo_label, redo))
        self._set_redo_text(redo_label)
        self._set_redo_count(len(self._redos))

        self._set_undo_text(self.peek_undo_label())
        self._set_undo_count(len(self._undos))
        logger.debug(f"Executed undo '{label}'")

    def exec_redo(self) -> None:
        """Redo the most recently undone action. Does nothing if there is none."""
        if not self._redos:
            return
        label, command = self._redos.pop()
        undo = command.exec()

        undo_label = label.replace("Redo", "Undo", 1)
        self._undos.append((undo_label, undo))
        self._set_undo_text(undo_label)
        self._set_undo_count(len(self._undos))

        self._set_redo_text(self.peek_redo_label())
        self._set_redo_count(len(self._redos))
        logger.debug(f"Executed redo '{label}'")

    def exec_with_undo(self, label: str, command: InvertibleCommand) -> bool:
        """
        Execute ``command`` now and record its inverse as an undo.

        Returns False, recording nothing, when the command yields no inverse.
        """
        inverse = command.exec()
        if inverse is None:
            return False
        self.add_undo(label, [inverse])
        return True

    def clear(self) -> None:
        """Empty both stacks; only properties that actually change are notified."""
        self._undos.clear()
        self._redos.clear()
        self._set_undo_text(self.DEFAULT_UNDO_TEXT)
        self._set_redo_text(self.DEFAULT_REDO_TEXT)
        self._set_undo_count(0)
        self._set_redo_count(0)

    def history(self) -> Tuple[List[str], List[str]]:
        """Labels of the undo and redo stacks, bottom first."""
        return [label for label, _ in self._undos], [label for label, _ in self._redos]

    def __repr__(self) -> str:
        return (
            f"UndoRedoStack(undo_count={len(self._undos)}, "
            f"redo_count={len(self._redos)}, undo_text={self.undo_text!r}, "
            f"redo_text={self.redo_text!r})"
        )
