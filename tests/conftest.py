"""
Shared pytest fixtures and configuration for bindable tests.
"""

import pytest

from bindable import ObservableList, ObservableObject, UndoRedoStack
from bindable.registry import _reset_type_registry


@pytest.fixture(autouse=True)
def reset_type_registry():
    """Reset the global type registry before each test to prevent state leakage."""
    _reset_type_registry()


@pytest.fixture
def recorder():
    """Provide an observer callback that records every event it receives."""

    class Recorder:
        def __init__(self):
            self.events = []

        def __call__(self, event):
            self.events.append(event)

        @property
        def names(self):
            return [event.name for event in self.events]

        @property
        def change_types(self):
            return [event.list_change_type for event in self.events]

    return Recorder()


@pytest.fixture
def point():
    """Provide an ObservableObject with plain x/y properties."""
    return ObservableObject({"x": 1, "y": 2})


@pytest.fixture
def todo_list():
    """Provide an ObservableList holding three observable todo items."""
    return ObservableList(
        ObservableObject({"title": title, "done": False})
        for title in ("write", "review", "ship")
    )


@pytest.fixture
def history():
    """Provide a fresh UndoRedoStack."""
    return UndoRedoStack()
