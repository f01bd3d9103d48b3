"""
Plain value types used alongside the observables.

- Vec2: immutable 2D vector
- TextSelection: immutable selected range of a string, plus string helpers
"""

from .text import (
    TextSelection,
    count_substrings,
    is_whitespace,
    repeat_string,
    replace_all,
)
from .vec2 import Vec2

__all__ = [
    "TextSelection",
    "Vec2",
    "count_substrings",
    "is_whitespace",
    "repeat_string",
    "replace_all",
]
