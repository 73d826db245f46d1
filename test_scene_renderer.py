"""
TEST FILE: SCENE RENDERING
Draw-call sequences for the three design views, plus a raster smoke test
"""

import math

import pytest

from earthsmiles_core.models.design import compute_design
from earthsmiles_core.models.viewport import ViewState
from earthsmiles_core.rendering import (
    SceneRenderer, RecordingSurface, MatplotlibSurface, draw_dimension_line, render_to_png
)
from earthsmiles_core.rendering.scene import format_measure, fit_scale
from earthsmiles_core.rendering.surface import arc_angles

CANVAS = (800, 600)


@pytest.fixture
def design():
    return compute_design(1, 3, 1025, 'loamy', 'orchard')


@pytest.fixture
def renderer():
    return SceneRenderer()


def _render(renderer, design, mode, view_state=None):
    surface = RecordingSurface()
    renderer.render(design, mode, view_state, CANVAS, surface)
    return surface


def test_format_measure():
    assert format_measure(4.0) == '4'
    assert format_measure(3.80) == '3.8'
    assert format_measure(0.23) == '0.23'


def test_fit_scale_per_view(design):
    identity = ViewState()
    assert fit_scale(design, 'single', identity, CANVAS) == pytest.approx(600 / (3.8 * 1.5))
    assert fit_scale(design, 'layout', identity, CANVAS) == pytest.approx(600 / (3.8 * 6))
    assert fit_scale(design, 'cross-section', identity, CANVAS) == pytest.approx(600 / (3.8 * 2))
    assert fit_scale(design, 'single', ViewState(scale=2.0), CANVAS) == pytest.approx(2 * 600 / (3.8 * 1.5))


@pytest.mark.parametrize("mode", ['single', 'layout', 'cross-section'])
def test_render_starts_with_clear_and_balances_state(renderer, design, mode):
    surface = _render(renderer, design, mode)
    ops = surface.ops()
    assert surface.commands[0] == ('clear', CANVAS)
    assert ops.count('save') == ops.count('restore')


@pytest.mark.parametrize("mode", ['single', 'layout', 'cross-section'])
def test_render_is_idempotent(renderer, design, mode):
    surface = RecordingSurface()
    renderer.render(design, mode, None, CANVAS, surface)
    first = list(surface.commands)
    renderer.render(design, mode, None, CANVAS, surface)
    assert surface.commands == first


def test_single_view(renderer, design):
    surface = _render(renderer, design, 'single')

    arcs = surface.calls('arc')
    assert len(arcs) == 3
    assert arcs[0] == (0, 0, 1.9, 0, math.pi, True)

    texts = surface.texts()
    assert '3.8m' in texts
    assert 'Depth: 0.23m' in texts
    assert 'Single Structure View' in texts
    assert 'Excavated Area' in texts


def test_view_transform_follows_offset_and_zoom(renderer, design):
    state = ViewState(scale=1.5, offset=(20.0, -10.0))
    surface = _render(renderer, design, 'single', state)

    assert surface.calls('translate')[0] == (420.0, 290.0)
    sx, sy = surface.calls('scale')[0]
    assert sx == sy == pytest.approx(1.5 * 600 / (3.8 * 1.5))


def test_layout_view_draws_staggered_grid(renderer, design):
    surface = _render(renderer, design, 'layout')

    arcs = surface.calls('arc')
    assert len(arcs) == 32
    centres = sorted({(round(a[0], 6), round(a[1], 6)) for a in arcs})
    assert len(centres) == 16

    col_spacing = 3.8 * 1.2
    first_row = [a for a in arcs if a[1] == arcs[0][1]]
    second_row_y = (1 - 2) * (3.8 * 0.8 + 4.0)
    second_row = [a for a in arcs if a[1] == pytest.approx(second_row_y)]
    assert first_row[0][0] == pytest.approx(-2 * col_spacing)
    assert second_row[0][0] == pytest.approx(-2 * col_spacing + col_spacing / 2)

    assert ((0.2, 0.2),) in surface.calls('set_dash')

    texts = surface.texts()
    assert '4m spacing' in texts
    assert 'Structures per hectare: 753' in texts
    assert 'Total structures: 753' in texts
    assert 'Spacing: 4m' in texts
    assert 'Layout: Staggered pattern' in texts


def test_cross_section_view(renderer, design):
    surface = _render(renderer, design, 'cross-section')

    assert len(surface.calls('arc')) == 2
    texts = surface.texts()
    assert 'Depth: 0.23m' in texts
    assert 'Bund: 0.32m' in texts
    assert 'Cross-Section View' in texts
    assert 'Water Collection' in texts

    # Two dimension lines, two arrowheads each
    assert len(surface.calls('rotate')) == 4


def test_dimension_line_arrowheads():
    surface = RecordingSurface()
    draw_dimension_line(surface, 5, 0, 5, -2, 'Depth: 2m')

    rotations = surface.calls('rotate')
    assert rotations == [(math.pi / 2,), (-math.pi / 2,)]
    assert surface.calls('translate') == [(5, 0), (5, -2)]
    assert surface.calls('fill_text') == [('Depth: 2m', 5, -1.0)]
    assert surface.ops()[0] == 'save'
    assert surface.ops()[-1] == 'restore'


def test_unknown_view_mode_raises(renderer, design):
    with pytest.raises(ValueError):
        renderer.render(design, 'isometric', None, CANVAS, RecordingSurface())


def test_degenerate_design_draws_notice_only(renderer):
    dry = compute_design(1, 3, 0, 'loamy', 'orchard')
    surface = _render(renderer, dry, 'single')

    assert surface.calls('arc') == []
    assert surface.texts() == ["No structure to display - check rainfall and site inputs"]


def test_arc_sweep_direction():
    ccw = arc_angles(0, math.pi, True)
    assert ccw[0] == 0
    assert ccw[-1] == pytest.approx(-math.pi)

    cw = arc_angles(math.pi, 0, False)
    assert cw[-1] == pytest.approx(2 * math.pi)

    full = arc_angles(0, 2 * math.pi, False)
    assert full[-1] == pytest.approx(2 * math.pi)


@pytest.mark.parametrize("mode", ['single', 'layout', 'cross-section'])
def test_png_rendering(design, mode):
    png = render_to_png(design, mode, ViewState(scale=1.2, offset=(15, 5)), (320, 240))
    assert png.startswith(b'\x89PNG')


def test_matplotlib_surface_data_uri(renderer, design):
    surface = MatplotlibSurface(200, 150)
    renderer.render(design, 'cross-section', None, (200, 150), surface)
    assert surface.to_data_uri().startswith('data:image/png;base64,')


def test_matplotlib_surface_follows_render_size(renderer, design):
    surface = MatplotlibSurface(200, 150)
    renderer.render(design, 'single', None, (320, 240), surface)

    assert (surface.width, surface.height) == (320, 240)
    assert surface.ax.get_xlim() == (0, 320)
    assert surface.ax.get_ylim() == (240, 0)
    width_in, height_in = surface.figure.get_size_inches()
    assert width_in * surface.dpi == pytest.approx(320)
    assert height_in * surface.dpi == pytest.approx(240)
    assert surface.to_png().startswith(b'\x89PNG')
