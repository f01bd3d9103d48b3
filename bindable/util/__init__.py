"""
Bindable Utils - Internal Support Classes
=========================================

This package contains internal support classes for the bindable observables.

Classes:
- ObserverRegistry: Copy-on-Write ordered observer storage
- ObserverHandle: Opaque identity token for one observer registration
"""

from .observer_registry import ObserverHandle, ObserverRegistry

__all__ = [
    "ObserverHandle",
    "ObserverRegistry",
]
