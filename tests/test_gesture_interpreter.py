"""
Tests for the per-layer gesture interpreter.

Covers:
- Drag translation relative to the gesture baseline
- Pinch scale (clamped) and rotation (unbounded)
- State transitions on pointer up / cancel, including pinch -> IDLE
- Coincident pinch pointers
- Selection callback on every pointer down
"""
import pytest

from components.gestures import GestureInterpreter, GestureState
from constants import SCALE_MIN, SCALE_MAX
from models.layer import ImageLayer


@pytest.fixture
def layer():
    return ImageLayer(src='a.png', x=100, y=100)


@pytest.fixture
def selected():
    return []


@pytest.fixture
def changes():
    return []


@pytest.fixture
def gesture(layer, selected, changes):
    return GestureInterpreter(layer, selected.append, changes.append)


# ══════════════════════════════════════════════════════════════════════════
# Drag
# ══════════════════════════════════════════════════════════════════════════

class TestDrag:

    def test_pointer_down_selects_and_starts_drag(self, gesture, layer, selected):
        gesture.pointer_down(1, 10, 10)
        assert selected == [layer.id]
        assert gesture.state is GestureState.DRAGGING

    def test_drag_translates_by_delta(self, gesture, layer, changes):
        gesture.pointer_down(1, 10, 10)
        gesture.pointer_move(1, 40, 5)
        assert (layer.x, layer.y) == (130, 95)
        gesture.pointer_move(1, 20, 30)
        # Always relative to the baseline, not the previous move
        assert (layer.x, layer.y) == (110, 120)
        assert changes == [layer, layer]

    def test_pointer_up_ends_drag(self, gesture, layer):
        gesture.pointer_down(1, 10, 10)
        gesture.pointer_up(1)
        assert gesture.state is GestureState.IDLE
        gesture.pointer_move(1, 50, 50)
        assert (layer.x, layer.y) == (100, 100)

    def test_cancel_ends_drag(self, gesture):
        gesture.pointer_down(1, 10, 10)
        gesture.pointer_cancel(1)
        assert gesture.state is GestureState.IDLE
        assert gesture.pointer_count == 0

    def test_move_of_untracked_pointer_ignored(self, gesture, layer, changes):
        gesture.pointer_down(1, 10, 10)
        gesture.pointer_move(7, 99, 99)
        assert (layer.x, layer.y) == (100, 100)
        assert changes == []

    def test_second_drag_uses_new_baseline(self, gesture, layer):
        gesture.pointer_down(1, 0, 0)
        gesture.pointer_move(1, 10, 0)
        gesture.pointer_up(1)
        gesture.pointer_down(1, 50, 50)
        gesture.pointer_move(1, 55, 50)
        assert layer.x == 115


# ══════════════════════════════════════════════════════════════════════════
# Pinch
# ══════════════════════════════════════════════════════════════════════════

class TestPinch:

    def _pinch(self, gesture):
        gesture.pointer_down(1, 0, 0)
        gesture.pointer_down(2, 100, 0)

    def test_second_pointer_starts_pinch(self, gesture, selected):
        self._pinch(gesture)
        assert gesture.state is GestureState.PINCHING
        assert len(selected) == 2

    def test_pinch_scales_by_distance_ratio(self, gesture, layer):
        self._pinch(gesture)
        gesture.pointer_move(2, 200, 0)
        assert layer.scale == pytest.approx(2.0)
        gesture.pointer_move(2, 50, 0)
        assert layer.scale == pytest.approx(0.5)

    def test_pinch_does_not_translate(self, gesture, layer):
        self._pinch(gesture)
        gesture.pointer_move(1, 30, 30)
        assert (layer.x, layer.y) == (100, 100)

    def test_pinch_scale_clamped(self, gesture, layer):
        self._pinch(gesture)
        gesture.pointer_move(2, 10000, 0)
        assert layer.scale == SCALE_MAX
        gesture.pointer_move(2, 1, 0)
        assert layer.scale == SCALE_MIN

    def test_pinch_rotates_by_angle_delta(self, gesture, layer):
        layer.rotation = 10
        self._pinch(gesture)
        gesture.pointer_move(2, 0, 100)
        assert layer.rotation == pytest.approx(100)
        assert layer.scale == pytest.approx(1.0)

    def test_rotation_unbounded(self, gesture, layer):
        layer.rotation = 350
        self._pinch(gesture)
        gesture.pointer_move(2, 0, 100)
        assert layer.rotation == pytest.approx(440)

    def test_pinch_baseline_includes_prior_scale(self, gesture, layer):
        layer.scale = 2.0
        self._pinch(gesture)
        gesture.pointer_move(2, 150, 0)
        assert layer.scale == pytest.approx(3.0)

    def test_lifting_one_finger_goes_idle(self, gesture, layer):
        self._pinch(gesture)
        gesture.pointer_up(2)
        assert gesture.state is GestureState.IDLE
        # Remaining pointer does not resume a drag
        gesture.pointer_move(1, 50, 50)
        assert (layer.x, layer.y) == (100, 100)

    def test_third_pointer_tracked_only(self, gesture, layer):
        self._pinch(gesture)
        gesture.pointer_down(3, 500, 500)
        gesture.pointer_up(3)
        assert gesture.state is GestureState.PINCHING
        gesture.pointer_move(2, 200, 0)
        assert layer.scale == pytest.approx(2.0)

    def test_coincident_pointers_keep_scale(self, gesture, layer):
        gesture.pointer_down(1, 10, 10)
        gesture.pointer_down(2, 10, 10)
        gesture.pointer_move(2, 10, 10)
        assert layer.scale == 1.0
        # Separating re-captures the baseline instead of dividing by zero
        gesture.pointer_move(2, 20, 10)
        assert layer.scale == 1.0
        gesture.pointer_move(2, 30, 10)
        assert layer.scale == pytest.approx(2.0)

    def test_reset_forgets_pointers(self, gesture):
        self._pinch(gesture)
        gesture.reset()
        assert gesture.state is GestureState.IDLE
        assert not gesture.is_tracking(1)
