"""
View transform and interaction controller
Pan/zoom state for the design canvas, driven by toolkit-independent input events
"""

import math
from typing import Optional, Sequence, Tuple
from dataclasses import dataclass, field
import logging

from earthsmiles_core.config.settings import (
    ZOOM_INTENSITY, ZOOM_MIN_SCALE, ZOOM_MAX_SCALE
)

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


@dataclass
class ViewState:
    """Interactive zoom factor and pan offset (device pixels)"""
    scale: float = 1.0
    offset: Point = (0.0, 0.0)

    def reset(self) -> None:
        self.scale = 1.0
        self.offset = (0.0, 0.0)


# Input events. Positions are canvas-local device pixels.

@dataclass(frozen=True)
class WheelEvent:
    delta_y: float


@dataclass(frozen=True)
class PointerDown:
    x: float
    y: float


@dataclass(frozen=True)
class PointerMove:
    x: float
    y: float


@dataclass(frozen=True)
class PointerUp:
    pass


@dataclass(frozen=True)
class TouchStart:
    touches: Sequence[Point] = field(default_factory=tuple)


@dataclass(frozen=True)
class TouchMove:
    touches: Sequence[Point] = field(default_factory=tuple)


@dataclass(frozen=True)
class TouchEnd:
    touches: Sequence[Point] = field(default_factory=tuple)


class InteractionController:
    """
    Press-move-release drag state machine plus stateless wheel zoom

    Idle -> (press) -> Dragging -> (release) -> Idle.
    Panning accumulates raw screen deltas, independent of the zoom level.
    Only single-contact touches pan; multi-touch is ignored.
    """

    def __init__(self, view_state: Optional[ViewState] = None,
                 min_scale: Optional[float] = ZOOM_MIN_SCALE,
                 max_scale: Optional[float] = ZOOM_MAX_SCALE):
        self.logger = logging.getLogger(__name__)
        self.view_state = view_state if view_state is not None else ViewState()
        self.min_scale = min_scale
        self.max_scale = max_scale
        self.is_dragging = False
        self.last_pointer: Optional[Point] = None

    def zoom(self, wheel_delta: float) -> None:
        """Exponential zoom step: scroll up (negative delta) zooms in"""
        direction = (wheel_delta > 0) - (wheel_delta < 0)
        scale = self.view_state.scale * math.exp(direction * -ZOOM_INTENSITY)

        if self.min_scale is not None:
            scale = max(scale, self.min_scale)
        if self.max_scale is not None:
            scale = min(scale, self.max_scale)

        self.view_state.scale = scale

    def begin_drag(self, pos: Point) -> None:
        self.is_dragging = True
        self.last_pointer = (float(pos[0]), float(pos[1]))

    def update_drag(self, pos: Point) -> bool:
        """Add the delta since the last pointer position to the offset"""
        if not self.is_dragging:
            return False

        x, y = float(pos[0]), float(pos[1])
        dx = x - self.last_pointer[0]
        dy = y - self.last_pointer[1]

        ox, oy = self.view_state.offset
        self.view_state.offset = (ox + dx, oy + dy)
        self.last_pointer = (x, y)
        return True

    def end_drag(self) -> None:
        self.is_dragging = False
        self.last_pointer = None

    def reset(self) -> None:
        """Back to scale 1 and no offset; any drag in progress is dropped"""
        self.view_state.reset()
        self.end_drag()

    def handle_event(self, event) -> bool:
        """
        Apply an input event

        Returns:
            True when the view changed and the scene should be redrawn

        Raises:
            TypeError: For objects that are not one of the input event types
        """
        if isinstance(event, WheelEvent):
            self.zoom(event.delta_y)
            return event.delta_y != 0

        if isinstance(event, PointerDown):
            self.begin_drag((event.x, event.y))
            return False

        if isinstance(event, PointerMove):
            return self.update_drag((event.x, event.y))

        if isinstance(event, PointerUp):
            self.end_drag()
            return False

        if isinstance(event, TouchStart):
            if len(event.touches) == 1:
                self.begin_drag(event.touches[0])
            return False

        if isinstance(event, TouchMove):
            if len(event.touches) == 1 and self.is_dragging:
                return self.update_drag(event.touches[0])
            return False

        if isinstance(event, TouchEnd):
            self.end_drag()
            return False

        raise TypeError(f"Unsupported input event: {type(event).__name__}")
