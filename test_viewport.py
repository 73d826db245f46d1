"""
TEST FILE: VIEW INTERACTION
Wheel zoom, drag panning and touch handling on the design canvas
"""

import math

import pytest

from earthsmiles_core.models.viewport import (
    ViewState, InteractionController, WheelEvent, PointerDown, PointerMove,
    PointerUp, TouchStart, TouchMove, TouchEnd
)


@pytest.fixture
def controller():
    return InteractionController()


def test_reset_restores_identity(controller):
    controller.view_state.scale = 3.7
    controller.view_state.offset = (12.0, -4.0)
    controller.begin_drag((1, 1))

    controller.reset()

    assert controller.view_state == ViewState()
    assert not controller.is_dragging


def test_wheel_up_zooms_in(controller):
    assert controller.handle_event(WheelEvent(delta_y=-100))
    assert controller.view_state.scale == pytest.approx(math.exp(0.1))


def test_wheel_down_zooms_out(controller):
    controller.handle_event(WheelEvent(delta_y=3))
    assert controller.view_state.scale == pytest.approx(math.exp(-0.1))


def test_zoom_in_then_out_returns_to_start(controller):
    controller.handle_event(WheelEvent(delta_y=-1))
    controller.handle_event(WheelEvent(delta_y=1))
    assert controller.view_state.scale == pytest.approx(1.0)


def test_zero_wheel_delta_leaves_scale(controller):
    assert not controller.handle_event(WheelEvent(delta_y=0))
    assert controller.view_state.scale == 1.0


def test_zoom_is_unbounded_by_default(controller):
    for _ in range(200):
        controller.zoom(-1)
    assert controller.view_state.scale == pytest.approx(math.exp(20))


def test_zoom_bounds_are_optional():
    bounded = InteractionController(min_scale=0.5, max_scale=2.0)
    for _ in range(50):
        bounded.zoom(-1)
    assert bounded.view_state.scale == 2.0
    for _ in range(50):
        bounded.zoom(1)
    assert bounded.view_state.scale == 0.5


def test_drag_accumulates_deltas(controller):
    controller.handle_event(PointerDown(100, 100))
    assert controller.handle_event(PointerMove(110, 95))
    assert controller.handle_event(PointerMove(130, 95))
    assert controller.handle_event(PointerMove(125, 120))
    controller.handle_event(PointerUp())

    assert controller.view_state.offset == pytest.approx((25.0, 20.0))
    assert not controller.is_dragging


def test_pan_does_not_depend_on_zoom(controller):
    controller.zoom(-1)
    controller.zoom(-1)
    controller.handle_event(PointerDown(0, 0))
    controller.handle_event(PointerMove(10, 10))
    assert controller.view_state.offset == pytest.approx((10.0, 10.0))


def test_moves_without_press_are_ignored(controller):
    assert not controller.handle_event(PointerMove(50, 50))
    controller.handle_event(PointerDown(0, 0))
    controller.handle_event(PointerUp())
    assert not controller.handle_event(PointerMove(80, 80))
    assert controller.view_state.offset == (0.0, 0.0)


def test_single_touch_drags(controller):
    controller.handle_event(TouchStart(touches=[(10, 10)]))
    assert controller.handle_event(TouchMove(touches=[(15, 30)]))
    controller.handle_event(TouchEnd())
    assert controller.view_state.offset == pytest.approx((5.0, 20.0))


def test_multi_touch_is_ignored(controller):
    assert not controller.handle_event(TouchStart(touches=[(10, 10), (50, 50)]))
    assert not controller.handle_event(TouchMove(touches=[(20, 20), (60, 60)]))
    assert not controller.is_dragging
    assert controller.view_state.offset == (0.0, 0.0)


def test_second_finger_mid_drag_does_not_pan(controller):
    controller.handle_event(TouchStart(touches=[(0, 0)]))
    controller.handle_event(TouchMove(touches=[(5, 0)]))
    assert not controller.handle_event(TouchMove(touches=[(50, 50), (90, 90)]))
    assert controller.view_state.offset == pytest.approx((5.0, 0.0))


def test_unknown_event_raises(controller):
    with pytest.raises(TypeError):
        controller.handle_event("click")


def test_shared_view_state():
    state = ViewState(scale=2.0, offset=(3.0, 4.0))
    controller = InteractionController(view_state=state)
    controller.handle_event(WheelEvent(delta_y=-1))
    assert state.scale == pytest.approx(2.0 * math.exp(0.1))
