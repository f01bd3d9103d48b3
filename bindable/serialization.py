"""
Serialization helpers shared by the observables.

Values are converted to JSON-compatible structures recursively: anything with
a ``to_json()`` method is asked for its own form, mappings and sequences are
walked, primitives pass through.
"""

import json
from typing import Any, Mapping, Optional

from .base import SerializationError

SERIALIZED_DATA_KEY = "ObservableSerializedData"

PRIMITIVE_TAGS = ("string", "boolean", "number", "null")


def primitive_tag(value: Any) -> Optional[str]:
    """Return the primitive ``varType`` tag for ``value``, or None if it has none."""
    if value is None:
        return "null"
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return None


def encode_value(value: Any) -> Any:
    """Convert ``value`` to its JSON-compatible form."""
    if primitive_tag(value) is not None:
        return value
    to_json = getattr(value, "to_json", None)
    if callable(to_json):
        return encode_value(to_json())
    if isinstance(value, Mapping):
        return {str(k): encode_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [encode_value(v) for v in value]
    return value


def json_default(value: Any) -> Any:
    """
    ``default=`` hook for :func:`json.dumps`.

    Raises SerializationError (a TypeError) for values without ``to_json()``,
    which is what json expects from the hook.
    """
    to_json = getattr(value, "to_json", None)
    if callable(to_json):
        return to_json()
    raise SerializationError(
        f"Object of type {type(value).__name__} is not JSON serializable"
    )


def dumps(value: Any, **kwargs) -> str:
    """Serialize ``value`` to a JSON string, honouring ``to_json()`` methods."""
    kwargs.setdefault("default", json_default)
    return json.dumps(value, **kwargs)
