"""Plain 2D geometry value types shared by the engine and renderers."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Vector2D:
    """A point or direction in screen space (y grows downward)."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vector2D) -> Vector2D:
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2D) -> Vector2D:
        return Vector2D(self.x - other.x, self.y - other.y)

    def scaled(self, factor: float) -> Vector2D:
        return Vector2D(self.x * factor, self.y * factor)

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def distance_to(self, other: Vector2D) -> float:
        return (other - self).length()


@dataclass(frozen=True)
class JointPlacement:
    """Where a renderer drew a joint: pivot position and accumulated world rotation."""

    position: Vector2D
    rotation: float
