# vector.py
"""
A mutable 2-D vector backed by a NumPy float64 array.

Every operation mutates the vector in place. Because the storage is a
NumPy array, dividing by zero follows IEEE-754 (inf / NaN) rather than
raising, and a Vector2 can wrap a row of a larger array so that updates
write straight through to the owner.
"""
import math
import numpy as np

# --- Data Contracts ---
#
# class Vector2:
#   - __init__(self, x: float = 0.0, y: float = 0.0)
#   - Vector2.view(array) -> Vector2
#     - Inputs: a float64 ndarray of shape (2,). No copy is made.
#   - add / subtract(other: Vector2) -> None
#   - scale / divide(factor: float) -> None
#   - magnitude() -> float
#   - normalize() -> None
#     - Invariants: a zero vector stays (0, 0); it never becomes NaN.
#   - rotate(angle: float) -> None, angle in radians, about the origin.


class Vector2:
    """A 2-D float pair supporting in-place arithmetic."""

    __slots__ = ("array",)

    def __init__(self, x: float = 0.0, y: float = 0.0):
        self.array = np.array([x, y], dtype=np.float64)

    @classmethod
    def view(cls, array: np.ndarray) -> "Vector2":
        """Wraps an existing (2,) float64 array without copying it."""
        vector = cls.__new__(cls)
        vector.array = array
        return vector

    @property
    def x(self) -> float:
        return float(self.array[0])

    @x.setter
    def x(self, value: float):
        self.array[0] = value

    @property
    def y(self) -> float:
        return float(self.array[1])

    @y.setter
    def y(self, value: float):
        self.array[1] = value

    def add(self, other: "Vector2"):
        self.array += other.array

    def subtract(self, other: "Vector2"):
        self.array -= other.array

    def scale(self, factor: float):
        self.array *= factor

    def divide(self, factor: float):
        # Division by zero is left to IEEE-754; only the warning is silenced.
        with np.errstate(divide='ignore', invalid='ignore'):
            self.array /= factor

    def magnitude(self) -> float:
        return math.hypot(self.array[0], self.array[1])

    def normalize(self):
        mag = self.magnitude()
        if mag != 0.0:
            self.divide(mag)

    def rotate(self, angle: float):
        """Rotates the vector about the origin by `angle` radians."""
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        x, y = self.x, self.y
        self.array[0] = cos_a * x - sin_a * y
        self.array[1] = sin_a * x + cos_a * y

    def copy(self) -> "Vector2":
        return Vector2(self.x, self.y)

    def as_tuple(self) -> tuple:
        return (self.x, self.y)

    def __eq__(self, other):
        if not isinstance(other, Vector2):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    def __repr__(self):
        return f"Vector2({self.x}, {self.y})"

    def __str__(self):
        return f"{self.x}x{self.y}"
