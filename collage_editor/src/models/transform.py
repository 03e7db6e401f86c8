"""Point data structure shared by the gesture interpreter and renderers."""
import math
from dataclasses import dataclass


@dataclass
class Vec2:
    """2D vector for coordinate pairs.

    Used for any x/y pair in viewport pixels:
    - Pointer positions fed to the gesture interpreter
    - Layer offsets and box origins
    """
    x: float
    y: float

    def __iter__(self):
        """Allow tuple unpacking: x, y = vec2"""
        return iter((self.x, self.y))

    def __sub__(self, other):
        return Vec2(self.x - other.x, self.y - other.y)

    def distance_to(self, other) -> float:
        """Euclidean distance to another point."""
        return math.hypot(other.x - self.x, other.y - self.y)

    def angle_to(self, other) -> float:
        """Angle of the segment self -> other in degrees (atan2, y-down)."""
        return math.degrees(math.atan2(other.y - self.y, other.x - self.x))
