"""
Bindable - Observable State Containers with Undo/Redo
=====================================================

Reactive building blocks for data-bound applications: property bags that
notify on change, ordered lists that forward their items' changes, and a
command-based undo/redo stack.
"""

from .base import (
    NOT_PRESENT,
    BindableError,
    ChangeEvent,
    ObservableInterface,
    SerializationError,
    values_equal,
)
from .commands import (
    CallbackCommand,
    InvertibleCommand,
    InvertibleCommands,
    ListInsertCommand,
    ListRemoveCommand,
    SetPropertyCommand,
)
from .observable import ObservableObject, PropertyDescriptor, PropertyKind
from .observable_list import STOP, ObservableList
from .registry import (
    TypeRegistry,
    _reset_type_registry,
    get_type_registry,
    register_type,
)
from .serialization import SERIALIZED_DATA_KEY, dumps, encode_value, json_default
from .undo import UndoRedoStack
from .util import ObserverHandle
from .values import TextSelection, Vec2

__version__ = "0.1.0"

__all__ = [
    # Observables
    "ObservableObject",
    "ObservableList",
    "ObservableInterface",
    "PropertyDescriptor",
    "PropertyKind",
    "ChangeEvent",
    "ObserverHandle",
    # Commands and undo
    "InvertibleCommand",
    "InvertibleCommands",
    "SetPropertyCommand",
    "ListInsertCommand",
    "ListRemoveCommand",
    "CallbackCommand",
    "UndoRedoStack",
    # Serialization
    "TypeRegistry",
    "get_type_registry",
    "register_type",
    "SERIALIZED_DATA_KEY",
    "dumps",
    "encode_value",
    "json_default",
    # Values
    "Vec2",
    "TextSelection",
    # Sentinels
    "NOT_PRESENT",
    "STOP",
    "values_equal",
    # Exceptions
    "BindableError",
    "SerializationError",
    # Testing utilities (internal use)
    "_reset_type_registry",
]
