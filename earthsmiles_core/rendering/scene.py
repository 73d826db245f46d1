"""
Scene Renderer
Draws an earth smile design in three views: single structure, staggered
field layout and cross-section. Geometry is issued in metres (1 unit = 1 m)
around the canvas centre; legends and info panels are in device pixels.
"""

import math
from typing import Optional, Tuple
import logging

from earthsmiles_core.models.design import DesignResult
from earthsmiles_core.models.viewport import ViewState
from earthsmiles_core.rendering.surface import DrawingSurface, MatplotlibSurface
from earthsmiles_core.config.settings import (
    VIEW_SINGLE, VIEW_LAYOUT, VIEW_CROSS_SECTION, VIEW_MODES,
    FIT_DIVISORS, DEFAULT_CANVAS_SIZE, DEFAULT_DPI,
    LAYOUT_ROWS, LAYOUT_COLS, LAYOUT_COL_SPACING_RATIO, LAYOUT_ROW_SPACING_RATIO,
    BUND_WIDTH_RATIO, ARROWHEAD_HALF_WIDTH, ARROWHEAD_LENGTH, DIMENSION_OFFSET_M,
    LINE_WIDTH_BUND, LINE_WIDTH_GUIDE, DASH_SPACING, DASH_DIMENSION,
    FONT_LABEL_SINGLE, FONT_LABEL_LAYOUT, FONT_LABEL_SECTION, FONT_LABEL_DIMENSION,
    FONT_LEGEND_PX, LEGEND_X_PX, LEGEND_Y_PX, LEGEND_SWATCH_PX, LEGEND_ROW_PX, INFO_ROW_PX,
    COLOR_SCHEME, VIEW_TITLES, VIEW_LEGENDS
)

logger = logging.getLogger(__name__)


def format_measure(value: float) -> str:
    """Compact number for labels: 4.0 -> '4', 3.80 -> '3.8'"""
    return f"{value:.2f}".rstrip('0').rstrip('.')


def fit_scale(design: DesignResult, view_mode: str, view_state: ViewState,
              canvas_size: Tuple[int, int]) -> float:
    """Pixels per metre for a view: fit-to-canvas factor times interactive zoom"""
    width, height = canvas_size
    return min(width, height) / (design.diameter * FIT_DIVISORS[view_mode]) * view_state.scale


def draw_arrowhead(surface: DrawingSurface, x: float, y: float, angle: float) -> None:
    surface.save()
    surface.translate(x, y)
    surface.rotate(angle)

    surface.set_fill(COLOR_SCHEME['text'])
    surface.begin_path()
    surface.move_to(0, 0)
    surface.line_to(-ARROWHEAD_HALF_WIDTH, -ARROWHEAD_LENGTH)
    surface.line_to(ARROWHEAD_HALF_WIDTH, -ARROWHEAD_LENGTH)
    surface.close_path()
    surface.fill()

    surface.restore()


def draw_dimension_line(surface: DrawingSurface, x1: float, y1: float,
                        x2: float, y2: float, label: str) -> None:
    """Dashed dimension line with arrowheads at both ends and a centred label"""
    surface.save()

    surface.set_stroke(COLOR_SCHEME['text'])
    surface.set_dash(DASH_DIMENSION)
    surface.set_line_width(LINE_WIDTH_GUIDE)

    surface.begin_path()
    surface.move_to(x1, y1)
    surface.line_to(x2, y2)
    surface.stroke()

    draw_arrowhead(surface, x1, y1, math.pi / 2)
    draw_arrowhead(surface, x2, y2, -math.pi / 2)

    surface.set_fill(COLOR_SCHEME['text'])
    surface.set_font(FONT_LABEL_DIMENSION, 'center')
    surface.fill_text(label, x1, (y1 + y2) / 2)

    surface.restore()


class SceneRenderer:
    """Full-scene redraw of a design for one view mode"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def render(self,
               design: DesignResult,
               view_mode: str,
               view_state: Optional[ViewState] = None,
               canvas_size: Tuple[int, int] = DEFAULT_CANVAS_SIZE,
               surface: Optional[DrawingSurface] = None) -> DrawingSurface:
        """
        Clear the surface and draw the design

        Args:
            design: Calculated design
            view_mode: single | layout | cross-section
            view_state: Interactive zoom/pan (identity if omitted)
            canvas_size: (width, height) in device pixels
            surface: Target surface (a new MatplotlibSurface if omitted)

        Returns:
            The surface that was drawn on

        Raises:
            ValueError: For an unknown view mode
        """
        if view_mode not in VIEW_MODES:
            raise ValueError(f"Unknown view mode: {view_mode} (expected one of {VIEW_MODES})")

        if view_state is None:
            view_state = ViewState()
        if surface is None:
            surface = MatplotlibSurface(canvas_size[0], canvas_size[1], dpi=DEFAULT_DPI)

        width, height = canvas_size
        surface.clear(width, height)

        if design.is_degenerate:
            self.logger.warning(f"Skipping {view_mode} view: degenerate diameter {design.diameter}")
            self._draw_notice(surface, canvas_size)
            return surface

        if view_mode == VIEW_SINGLE:
            self._draw_single_structure(surface, design, view_state, canvas_size)
        elif view_mode == VIEW_LAYOUT:
            self._draw_field_layout(surface, design, view_state, canvas_size)
        else:
            self._draw_cross_section(surface, design, view_state, canvas_size)

        return surface

    def _begin_local(self, surface: DrawingSurface, design: DesignResult, view_mode: str,
                     view_state: ViewState, canvas_size: Tuple[int, int]) -> None:
        width, height = canvas_size
        offset_x, offset_y = view_state.offset
        scale = fit_scale(design, view_mode, view_state, canvas_size)

        surface.save()
        surface.translate(width / 2 + offset_x, height / 2 + offset_y)
        surface.scale(scale, scale)

    def _draw_single_structure(self, surface: DrawingSurface, design: DesignResult,
                               view_state: ViewState, canvas_size: Tuple[int, int]) -> None:
        diameter = design.diameter
        radius = diameter / 2
        self._begin_local(surface, design, VIEW_SINGLE, view_state, canvas_size)

        # Excavated basin
        surface.set_fill(COLOR_SCHEME['excavation'])
        surface.begin_path()
        surface.arc(0, 0, radius, 0, math.pi, True)
        surface.fill()

        # Bund as a ring around the basin rim
        bund_width = design.bund_height * BUND_WIDTH_RATIO
        surface.set_fill(COLOR_SCHEME['bund'])
        surface.set_stroke(COLOR_SCHEME['bund_outline'])
        surface.set_line_width(LINE_WIDTH_BUND)
        surface.begin_path()
        surface.arc(0, 0, radius + bund_width / 2, 0, math.pi, True)
        surface.arc(0, 0, max(radius - bund_width / 2, 0.0), math.pi, 0, False)
        surface.close_path()
        surface.fill()
        surface.stroke()

        surface.set_fill(COLOR_SCHEME['text'])
        surface.set_font(FONT_LABEL_SINGLE, 'center')
        surface.fill_text(f"{format_measure(diameter)}m", 0, -radius - 1)
        surface.fill_text(f"Depth: {format_measure(design.depth)}m", diameter / 4, design.depth / 2)

        surface.restore()

        self._draw_legend(surface, VIEW_SINGLE, title_gap=20)

    def _draw_field_layout(self, surface: DrawingSurface, design: DesignResult,
                           view_state: ViewState, canvas_size: Tuple[int, int]) -> None:
        diameter = design.diameter
        spacing = design.spacing_between
        self._begin_local(surface, design, VIEW_LAYOUT, view_state, canvas_size)

        rows, cols = LAYOUT_ROWS, LAYOUT_COLS
        row_spacing = diameter * LAYOUT_ROW_SPACING_RATIO + spacing
        col_spacing = diameter * LAYOUT_COL_SPACING_RATIO

        # Staggered grid: odd rows shift half a column
        for row in range(rows):
            for col in range(cols):
                x = (col - cols / 2) * col_spacing + (row % 2) * (col_spacing / 2)
                y = (row - rows / 2) * row_spacing

                surface.set_fill(COLOR_SCHEME['excavation'] if row % 2 == 0 else COLOR_SCHEME['excavation_alt'])
                surface.begin_path()
                surface.arc(x, y, diameter / 2, 0, math.pi, True)
                surface.fill()

                surface.set_stroke(COLOR_SCHEME['bund'])
                surface.set_line_width(LINE_WIDTH_BUND)
                surface.begin_path()
                surface.arc(x, y, diameter / 2, 0, math.pi, True)
                surface.stroke()

        # Spacing indicator along the first row
        indicator_y = -rows / 2 * row_spacing + diameter / 2
        surface.set_stroke(COLOR_SCHEME['guide'])
        surface.set_dash(DASH_SPACING)
        surface.set_line_width(LINE_WIDTH_GUIDE)
        surface.begin_path()
        surface.move_to(-cols / 2 * col_spacing, indicator_y)
        surface.line_to(cols / 2 * col_spacing, indicator_y)
        surface.stroke()

        surface.set_fill(COLOR_SCHEME['text'])
        surface.set_font(FONT_LABEL_LAYOUT, 'center')
        surface.fill_text(f"{format_measure(spacing)}m spacing", 0, indicator_y + 0.8)

        surface.restore()

        self._draw_layout_info(surface, design)

    def _draw_cross_section(self, surface: DrawingSurface, design: DesignResult,
                            view_state: ViewState, canvas_size: Tuple[int, int]) -> None:
        diameter = design.diameter
        radius = diameter / 2
        depth = design.depth
        bund_height = design.bund_height
        self._begin_local(surface, design, VIEW_CROSS_SECTION, view_state, canvas_size)

        # Ground level
        surface.set_stroke(COLOR_SCHEME['bund'])
        surface.set_line_width(LINE_WIDTH_BUND)
        surface.begin_path()
        surface.move_to(-diameter, 0)
        surface.line_to(diameter, 0)
        surface.stroke()

        surface.set_fill(COLOR_SCHEME['excavation'])
        surface.begin_path()
        surface.arc(0, 0, radius, 0, math.pi, True)
        surface.fill()

        # Trapezoidal bund profile
        spread = bund_height * BUND_WIDTH_RATIO
        surface.set_fill(COLOR_SCHEME['bund_section'])
        surface.begin_path()
        surface.move_to(-radius, 0)
        surface.line_to(-radius - spread, -bund_height)
        surface.line_to(radius + spread, -bund_height)
        surface.line_to(radius, 0)
        surface.close_path()
        surface.fill()

        # Water retention overlay
        surface.set_fill(COLOR_SCHEME['water'])
        surface.begin_path()
        surface.arc(0, 0, radius, 0, math.pi, True)
        surface.fill()

        surface.set_fill(COLOR_SCHEME['text'])
        surface.set_font(FONT_LABEL_SECTION, 'center')
        surface.fill_text(f"{format_measure(diameter)}m", 0, diameter / 4)

        draw_dimension_line(surface, -radius - DIMENSION_OFFSET_M, 0,
                            -radius - DIMENSION_OFFSET_M, -depth,
                            f"Depth: {format_measure(depth)}m")
        draw_dimension_line(surface, radius + DIMENSION_OFFSET_M, 0,
                            radius + DIMENSION_OFFSET_M, -bund_height,
                            f"Bund: {format_measure(bund_height)}m")

        surface.restore()

        self._draw_legend(surface, VIEW_CROSS_SECTION, title_gap=LEGEND_ROW_PX)

    def _draw_legend(self, surface: DrawingSurface, view_mode: str, title_gap: float) -> None:
        x = LEGEND_X_PX
        y = LEGEND_Y_PX

        surface.set_fill(COLOR_SCHEME['text'])
        surface.set_font(FONT_LEGEND_PX, 'left')
        surface.fill_text(VIEW_TITLES[view_mode], x, y)
        y += title_gap

        for color_key, label in VIEW_LEGENDS[view_mode]:
            surface.set_fill(COLOR_SCHEME[color_key])
            surface.fill_rect(x, y, LEGEND_SWATCH_PX, LEGEND_SWATCH_PX)
            surface.set_fill(COLOR_SCHEME['text'])
            surface.fill_text(label, x + LEGEND_ROW_PX, y + 12)
            y += LEGEND_ROW_PX

    def _draw_layout_info(self, surface: DrawingSurface, design: DesignResult) -> None:
        x = LEGEND_X_PX
        y = LEGEND_Y_PX

        surface.set_fill(COLOR_SCHEME['text'])
        surface.set_font(FONT_LEGEND_PX, 'left')
        surface.fill_text(VIEW_TITLES[VIEW_LAYOUT], x, y)
        y += LEGEND_ROW_PX

        info = [
            f"Structures per hectare: {design.structures_per_hectare}",
            f"Total structures: {design.total_structures}",
            f"Spacing: {format_measure(design.spacing_between)}m",
            "Layout: Staggered pattern",
        ]
        for line in info:
            surface.fill_text(line, x, y)
            y += INFO_ROW_PX

    def _draw_notice(self, surface: DrawingSurface, canvas_size: Tuple[int, int]) -> None:
        width, height = canvas_size
        surface.set_fill(COLOR_SCHEME['text'])
        surface.set_font(FONT_LEGEND_PX, 'center')
        surface.fill_text("No structure to display - check rainfall and site inputs", width / 2, height / 2)


def render_to_png(design: DesignResult, view_mode: str,
                  view_state: Optional[ViewState] = None,
                  canvas_size: Tuple[int, int] = DEFAULT_CANVAS_SIZE) -> bytes:
    """Render one view to PNG bytes (used for report bundling)"""
    surface = MatplotlibSurface(canvas_size[0], canvas_size[1], dpi=DEFAULT_DPI)
    SceneRenderer().render(design, view_mode, view_state, canvas_size, surface)
    return surface.to_png()
