"""
Collage Editor - Gesture Components

- drag_context.py: GestureState enum and the baselines each state captures
- interpreter.py: per-layer pointer state machine (drag, pinch, rotate)
"""

from .drag_context import GestureState, DragBaseline, PinchBaseline
from .interpreter import GestureInterpreter

__all__ = ['GestureState', 'DragBaseline', 'PinchBaseline', 'GestureInterpreter']
