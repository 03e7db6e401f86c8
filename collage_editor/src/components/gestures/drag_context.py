"""Gesture state for layer interactions.

Explicit state enum plus the baselines captured on each transition,
replacing loose dragging/gesture boolean flags.
"""

from dataclasses import dataclass
from enum import Enum

from models.transform import Vec2


class GestureState(Enum):
    IDLE = 'idle'
    DRAGGING = 'dragging'
    PINCHING = 'pinching'


@dataclass
class DragBaseline:
    """Captured when the first pointer goes down."""
    pointer_start: Vec2
    layer_start: Vec2


@dataclass
class PinchBaseline:
    """Captured when the second pointer goes down.

    distance may be 0 when both pointers land on the same spot; the
    interpreter re-captures the baseline once they separate.
    """
    distance: float
    angle: float
    scale: float
    rotation: float
