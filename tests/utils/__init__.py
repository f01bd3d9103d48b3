"""
Test utilities for bindable.

This package contains shared testing utilities to help write
better, more maintainable tests.
"""

from .memory_utils import assert_no_object_leak, assert_released, count_types

__all__ = [
    "assert_released",
    "assert_no_object_leak",
    "count_types",
]
