"""
Immutable 2D vector value type.

Vec2 is an ordinary value: it carries no observers of its own and is stored
in observables like any other value. It is registered with the type registry
under the tag ``"Vec2"`` so that serialized observables holding vectors can be
rebuilt.

Most methods accept either another vector or a pair of numbers:

    >>> Vec2(1, 2).add(Vec2(3, 4))
    Vec2(x=4, y=6)
    >>> Vec2(1, 2).add(3, 4)
    Vec2(x=4, y=6)
"""

import math
from dataclasses import dataclass
from typing import Any, List, Optional, Union

import numpy as np

Number = Union[int, float]


@dataclass(frozen=True, init=False)
class Vec2:
    """An immutable (x, y) pair. Construct from two numbers or any object with x/y."""

    x: Number
    y: Number

    def __init__(self, x: Any, y: Optional[Number] = None):
        if y is None and hasattr(x, "x") and hasattr(x, "y"):
            x, y = x.x, x.y
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)

    @staticmethod
    def _pair(other: Any, y: Optional[Number]):
        if y is None:
            return other.x, other.y
        return other, y

    @classmethod
    def from_json(cls, data: Any) -> "Vec2":
        """Rebuild from ``[x, y]`` or ``{"x": .., "y": ..}``."""
        if isinstance(data, dict):
            return cls(data["x"], data["y"])
        x, y = data
        return cls(x, y)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "Vec2":
        return cls(float(array[0]), float(array[1]))

    # Arithmetic

    def add(self, other: Any, y: Optional[Number] = None) -> "Vec2":
        ox, oy = self._pair(other, y)
        return Vec2(self.x + ox, self.y + oy)

    def sub(self, other: Any, y: Optional[Number] = None) -> "Vec2":
        ox, oy = self._pair(other, y)
        return Vec2(self.x - ox, self.y - oy)

    def mul(self, scalar: Number) -> "Vec2":
        return Vec2(self.x * scalar, self.y * scalar)

    def div(self, scalar: Number) -> "Vec2":
        # No zero check
        return Vec2(self.x / scalar, self.y / scalar)

    def dot(self, other: Any, y: Optional[Number] = None) -> Number:
        ox, oy = self._pair(other, y)
        return self.x * ox + self.y * oy

    def __add__(self, other: "Vec2") -> "Vec2":
        return self.add(other)

    def __sub__(self, other: "Vec2") -> "Vec2":
        return self.sub(other)

    def __mul__(self, scalar: Number) -> "Vec2":
        return self.mul(scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: Number) -> "Vec2":
        return self.div(scalar)

    def __neg__(self) -> "Vec2":
        return Vec2(-self.x, -self.y)

    # Geometry

    @property
    def length(self) -> float:
        return float(np.hypot(self.x, self.y))

    @property
    def length_squared(self) -> Number:
        return self.x * self.x + self.y * self.y

    def distance(self, other: Any, y: Optional[Number] = None) -> float:
        ox, oy = self._pair(other, y)
        return float(np.hypot(self.x - ox, self.y - oy))

    def equals(self, other: Any, y: Optional[Number] = None) -> bool:
        if isinstance(other, Vec2):
            return self.x == other.x and self.y == other.y
        return self.x == other and self.y == y

    def ccw_angle(self) -> float:
        """Counter-clockwise angle from the +x axis in ``[0, 2*pi)``; 0 for (0, 0)."""
        if self.x == 0 and self.y == 0:
            return 0.0
        angle = float(np.arctan2(self.y, self.x))
        return angle if angle >= 0 else angle + 2.0 * math.pi

    def perp(self) -> "Vec2":
        return Vec2(-self.y, self.x)

    def normalize(self) -> "Vec2":
        """Unit vector in the same direction; the zero vector returns itself."""
        length = self.length
        if length == 0:
            return self
        return Vec2(self.x / length, self.y / length)

    def set_length(self, new_length: Number) -> "Vec2":
        """Same direction with ``new_length``; the zero vector returns itself."""
        length = self.length
        if length == 0:
            return self
        return Vec2(self.x * new_length / length, self.y * new_length / length)

    def rotate(self, angle: float) -> "Vec2":
        """Rotate by ``angle`` radians; positive angles turn clockwise."""
        c, s = np.cos(angle), np.sin(angle)
        rotation = np.array([[c, s], [-s, c]])
        return Vec2.from_array(rotation @ self.to_array())

    def scalar_project(self, onto: "Vec2") -> float:
        """Scalar projection onto ``onto``, which must not be the zero vector."""
        return self.dot(onto) / onto.length

    # Conversion

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=float)

    def to_json(self) -> List[Number]:
        return [self.x, self.y]

    def __str__(self) -> str:
        return f"{self.x},{self.y}"
