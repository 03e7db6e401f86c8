"""Per-layer pointer gesture interpreter.

Turns pointer down/move/up/cancel events addressed to one layer into
geometry changes on that layer:

    IDLE --1st pointer down--> DRAGGING --2nd pointer down--> PINCHING
      ^                           |                              |
      +------- pointer up --------+---- fewer than 2 pointers ---+

DRAGGING translates the layer by the pointer delta. PINCHING scales by the
ratio of inter-pointer distances (clamped) and rotates by the change in
inter-pointer angle (unbounded). Losing one finger of a pinch goes back to
IDLE; the remaining pointer does not resume a drag.

Every layer item owns its own interpreter, so pointer ids never leak
between layers. No Qt here: the canvas forwards plain coordinates.
"""

import logging
from collections import OrderedDict
from typing import Callable, Optional

from models.layer import Layer, clamp_scale
from models.transform import Vec2
from .drag_context import GestureState, DragBaseline, PinchBaseline

logger = logging.getLogger(__name__)


class GestureInterpreter:
    """Three-state machine driving one layer's translation, scale and rotation.

    Args:
        layer: Layer mutated in place
        on_select: Called with the layer id on every pointer down
        on_change: Optional, called with the layer after each geometry change
    """

    def __init__(self, layer: Layer, on_select: Callable[[str], None],
                 on_change: Optional[Callable[[Layer], None]] = None):
        self.layer = layer
        self._on_select = on_select
        self._on_change = on_change

        # Insertion-ordered; the first two entries parameterize a pinch
        self._pointers = OrderedDict()
        self._state = GestureState.IDLE
        self._drag = None
        self._pinch = None

    @property
    def state(self) -> GestureState:
        return self._state

    @property
    def pointer_count(self) -> int:
        return len(self._pointers)

    def is_tracking(self, pointer_id) -> bool:
        return pointer_id in self._pointers

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def pointer_down(self, pointer_id, x: float, y: float):
        self._on_select(self.layer.id)

        self._pointers[pointer_id] = Vec2(x, y)
        count = len(self._pointers)

        if count == 1:
            self._begin_drag(Vec2(x, y))
        elif count == 2:
            self._begin_pinch()
        # A third pointer is only tracked so its release is accounted for

    def pointer_move(self, pointer_id, x: float, y: float):
        if pointer_id not in self._pointers:
            return
        self._pointers[pointer_id] = Vec2(x, y)

        if self._state is GestureState.PINCHING and len(self._pointers) >= 2:
            self._update_pinch()
        elif self._state is GestureState.DRAGGING:
            self._update_drag(Vec2(x, y))

    def pointer_up(self, pointer_id):
        self._pointers.pop(pointer_id, None)

        if self._state is GestureState.DRAGGING:
            self._end()
        elif self._state is GestureState.PINCHING and len(self._pointers) < 2:
            self._end()

    pointer_cancel = pointer_up

    def reset(self):
        """Forget every tracked pointer (e.g. the item lost its grab)."""
        self._pointers.clear()
        self._end()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _begin_drag(self, start: Vec2):
        self._pinch = None
        self._drag = DragBaseline(
            pointer_start=start,
            layer_start=Vec2(self.layer.x, self.layer.y),
        )
        self._state = GestureState.DRAGGING
        logger.debug("Layer %s: drag start at %s", self.layer.id, start)

    def _begin_pinch(self):
        self._drag = None
        self._pinch = self._capture_pinch()
        self._state = GestureState.PINCHING
        logger.debug("Layer %s: pinch start %s", self.layer.id, self._pinch)

    def _end(self):
        self._drag = None
        self._pinch = None
        self._state = GestureState.IDLE

    def _capture_pinch(self) -> PinchBaseline:
        p1, p2 = self._pinch_points()
        return PinchBaseline(
            distance=p1.distance_to(p2),
            angle=p1.angle_to(p2),
            scale=self.layer.scale,
            rotation=self.layer.rotation,
        )

    def _pinch_points(self):
        points = iter(self._pointers.values())
        return next(points), next(points)

    # ------------------------------------------------------------------
    # Geometry updates
    # ------------------------------------------------------------------

    def _update_drag(self, current: Vec2):
        delta = current - self._drag.pointer_start
        self.layer.x = self._drag.layer_start.x + delta.x
        self.layer.y = self._drag.layer_start.y + delta.y
        self._changed()

    def _update_pinch(self):
        p1, p2 = self._pinch_points()
        distance = p1.distance_to(p2)

        if self._pinch.distance == 0:
            if distance == 0:
                # Still coincident: scale factor 1, angle undefined
                return
            self._pinch = self._capture_pinch()
            return

        factor = distance / self._pinch.distance
        self.layer.scale = clamp_scale(self._pinch.scale * factor)
        self.layer.rotation = self._pinch.rotation + (p1.angle_to(p2) - self._pinch.angle)
        self._changed()

    def _changed(self):
        if self._on_change is not None:
            self._on_change(self.layer)
