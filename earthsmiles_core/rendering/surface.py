"""
Drawing surfaces for the scene renderer
A small canvas-2D style API (path building, save/restore transform stack,
dashed strokes, text) with a command recorder and a matplotlib raster backend
"""

import io
import math
import base64
import numpy as np
from typing import Any, List, Optional, Sequence, Tuple
import logging

from matplotlib.figure import Figure
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.path import Path as MplPath
from matplotlib.patches import PathPatch

from earthsmiles_core.config.settings import COLOR_SCHEME, DEFAULT_DPI

logger = logging.getLogger(__name__)

ARC_SEGMENTS_PER_TURN = 128
POINTS_PER_INCH = 72.0


class DrawingSurface:
    """
    Interface the renderer draws on

    Coordinates are in the current user space; translate/scale/rotate compose
    onto the current transform and save/restore push and pop it together with
    the style state.
    """

    def clear(self, width: float, height: float) -> None:
        raise NotImplementedError

    def save(self) -> None:
        raise NotImplementedError

    def restore(self) -> None:
        raise NotImplementedError

    def translate(self, x: float, y: float) -> None:
        raise NotImplementedError

    def scale(self, sx: float, sy: float) -> None:
        raise NotImplementedError

    def rotate(self, angle: float) -> None:
        raise NotImplementedError

    def set_fill(self, color: str) -> None:
        raise NotImplementedError

    def set_stroke(self, color: str) -> None:
        raise NotImplementedError

    def set_line_width(self, width: float) -> None:
        raise NotImplementedError

    def set_dash(self, pattern: Sequence[float]) -> None:
        raise NotImplementedError

    def set_font(self, size: float, align: str = 'left') -> None:
        raise NotImplementedError

    def begin_path(self) -> None:
        raise NotImplementedError

    def move_to(self, x: float, y: float) -> None:
        raise NotImplementedError

    def line_to(self, x: float, y: float) -> None:
        raise NotImplementedError

    def arc(self, cx: float, cy: float, radius: float,
            start: float, end: float, anticlockwise: bool = False) -> None:
        raise NotImplementedError

    def close_path(self) -> None:
        raise NotImplementedError

    def fill(self) -> None:
        raise NotImplementedError

    def stroke(self) -> None:
        raise NotImplementedError

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        raise NotImplementedError

    def fill_text(self, text: str, x: float, y: float) -> None:
        raise NotImplementedError


def _recorder(op: str):
    def record(self, *args):
        self.commands.append((op, args))
    record.__name__ = op
    return record


class RecordingSurface(DrawingSurface):
    """Keeps the ordered list of draw calls as (op, args) tuples"""

    def __init__(self):
        self.commands: List[Tuple[str, Tuple[Any, ...]]] = []

    def clear(self, width: float, height: float) -> None:
        # A clear wipes everything drawn before it
        self.commands = [('clear', (width, height))]

    save = _recorder('save')
    restore = _recorder('restore')
    translate = _recorder('translate')
    scale = _recorder('scale')
    rotate = _recorder('rotate')
    set_fill = _recorder('set_fill')
    set_stroke = _recorder('set_stroke')
    set_line_width = _recorder('set_line_width')
    begin_path = _recorder('begin_path')
    move_to = _recorder('move_to')
    line_to = _recorder('line_to')
    close_path = _recorder('close_path')
    fill = _recorder('fill')
    stroke = _recorder('stroke')
    fill_rect = _recorder('fill_rect')
    fill_text = _recorder('fill_text')

    def set_dash(self, pattern: Sequence[float]) -> None:
        self.commands.append(('set_dash', (tuple(pattern),)))

    def set_font(self, size: float, align: str = 'left') -> None:
        self.commands.append(('set_font', (size, align)))

    def arc(self, cx: float, cy: float, radius: float,
            start: float, end: float, anticlockwise: bool = False) -> None:
        self.commands.append(('arc', (cx, cy, radius, start, end, anticlockwise)))

    def ops(self) -> List[str]:
        return [op for op, _ in self.commands]

    def calls(self, op: str) -> List[Tuple[Any, ...]]:
        return [args for name, args in self.commands if name == op]

    def texts(self) -> List[str]:
        return [args[0] for args in self.calls('fill_text')]


def arc_angles(start: float, end: float, anticlockwise: bool,
               segments_per_turn: int = ARC_SEGMENTS_PER_TURN) -> np.ndarray:
    """Sample angles along an arc with canvas sweep-direction rules"""
    sweep = end - start
    full_turn = 2 * math.pi

    if anticlockwise:
        if sweep > 0:
            sweep = sweep % full_turn - full_turn if sweep % full_turn else -full_turn
    elif sweep < 0:
        sweep = sweep % full_turn if sweep % full_turn else full_turn

    n = max(2, int(math.ceil(abs(sweep) / full_turn * segments_per_turn)) + 1)
    return np.linspace(start, start + sweep, n)


class MatplotlibSurface(DrawingSurface):
    """
    Raster surface backed by a matplotlib Figure (Agg)

    The axes span the canvas in device pixels with y pointing down, so the
    renderer's coordinates map one-to-one onto the output image.
    """

    def __init__(self, width: int, height: int, dpi: int = DEFAULT_DPI):
        self.logger = logging.getLogger(__name__)
        self.width = width
        self.height = height
        self.dpi = dpi

        self.figure = Figure(figsize=(width / dpi, height / dpi), dpi=dpi)
        FigureCanvasAgg(self.figure)
        self.ax = self.figure.add_axes([0, 0, 1, 1])

        self._state = self._default_state()
        self._stack: List[dict] = []
        self._zorder = 0
        self._reset_path()
        self._setup_axes()

    @staticmethod
    def _default_state() -> dict:
        return {
            'matrix': np.eye(3),
            'fill': COLOR_SCHEME['text'],
            'stroke': COLOR_SCHEME['text'],
            'line_width': 1.0,
            'dash': (),
            'font_size': 10.0,
            'align': 'left',
        }

    def _setup_axes(self) -> None:
        self.ax.set_xlim(0, self.width)
        self.ax.set_ylim(self.height, 0)
        self.ax.set_axis_off()
        self.figure.set_facecolor(COLOR_SCHEME['background'])

    def _reset_path(self) -> None:
        self._vertices: List[Tuple[float, float]] = []
        self._codes: List[int] = []
        self._subpath_start: Optional[Tuple[float, float]] = None

    def _next_zorder(self) -> int:
        self._zorder += 1
        return self._zorder

    # -- transform -------------------------------------------------------

    def _apply(self, points) -> np.ndarray:
        pts = np.atleast_2d(np.asarray(points, dtype=float))
        homogeneous = np.column_stack([pts, np.ones(len(pts))])
        return (homogeneous @ self._state['matrix'].T)[:, :2]

    def _unit_scale(self) -> float:
        """Device pixels per user unit under the current transform"""
        return math.sqrt(abs(np.linalg.det(self._state['matrix'][:2, :2])))

    def _px_to_points(self, px: float) -> float:
        return px * POINTS_PER_INCH / self.dpi

    def save(self) -> None:
        state = dict(self._state)
        state['matrix'] = self._state['matrix'].copy()
        self._stack.append(state)

    def restore(self) -> None:
        if self._stack:
            self._state = self._stack.pop()

    def translate(self, x: float, y: float) -> None:
        t = np.array([[1, 0, x], [0, 1, y], [0, 0, 1]], dtype=float)
        self._state['matrix'] = self._state['matrix'] @ t

    def scale(self, sx: float, sy: float) -> None:
        s = np.array([[sx, 0, 0], [0, sy, 0], [0, 0, 1]], dtype=float)
        self._state['matrix'] = self._state['matrix'] @ s

    def rotate(self, angle: float) -> None:
        c, s = math.cos(angle), math.sin(angle)
        r = np.array([[c, -s, 0], [s, c, 0], [0, 0, 1]], dtype=float)
        self._state['matrix'] = self._state['matrix'] @ r

    # -- style -----------------------------------------------------------

    def set_fill(self, color: str) -> None:
        self._state['fill'] = color

    def set_stroke(self, color: str) -> None:
        self._state['stroke'] = color

    def set_line_width(self, width: float) -> None:
        self._state['line_width'] = width

    def set_dash(self, pattern: Sequence[float]) -> None:
        self._state['dash'] = tuple(pattern)

    def set_font(self, size: float, align: str = 'left') -> None:
        self._state['font_size'] = size
        self._state['align'] = align

    # -- paths -----------------------------------------------------------

    def clear(self, width: float, height: float) -> None:
        """Wipe the figure and resize it to width x height pixels"""
        if (width, height) != (self.width, self.height):
            self.width = width
            self.height = height
            self.figure.set_size_inches(width / self.dpi, height / self.dpi)
        self.ax.clear()
        self._setup_axes()
        self._zorder = 0
        self._reset_path()

    def begin_path(self) -> None:
        self._reset_path()

    def _add_point(self, point, move: bool) -> None:
        x, y = float(point[0]), float(point[1])
        if move or not self._vertices:
            self._vertices.append((x, y))
            self._codes.append(MplPath.MOVETO)
            self._subpath_start = (x, y)
        else:
            self._vertices.append((x, y))
            self._codes.append(MplPath.LINETO)

    def move_to(self, x: float, y: float) -> None:
        self._add_point(self._apply((x, y))[0], move=True)

    def line_to(self, x: float, y: float) -> None:
        self._add_point(self._apply((x, y))[0], move=False)

    def arc(self, cx: float, cy: float, radius: float,
            start: float, end: float, anticlockwise: bool = False) -> None:
        angles = arc_angles(start, end, anticlockwise)
        local = np.column_stack([cx + radius * np.cos(angles), cy + radius * np.sin(angles)])
        for point in self._apply(local):
            self._add_point(point, move=False)

    def close_path(self) -> None:
        if self._subpath_start is not None:
            self._vertices.append(self._subpath_start)
            self._codes.append(MplPath.CLOSEPOLY)

    def _current_path(self) -> Optional[MplPath]:
        if len(self._vertices) < 2:
            return None
        return MplPath(np.asarray(self._vertices), list(self._codes))

    def fill(self) -> None:
        path = self._current_path()
        if path is None:
            return
        self.ax.add_patch(PathPatch(
            path, facecolor=self._state['fill'], edgecolor='none',
            linewidth=0, zorder=self._next_zorder()
        ))

    def stroke(self) -> None:
        path = self._current_path()
        if path is None:
            return

        unit = self._unit_scale()
        width_pt = self._px_to_points(self._state['line_width'] * unit)
        linestyle = 'solid'
        if self._state['dash'] and width_pt > 0:
            # matplotlib scales dash lengths by the line width
            dashes = [self._px_to_points(d * unit) / width_pt for d in self._state['dash']]
            linestyle = (0, tuple(dashes))

        self.ax.add_patch(PathPatch(
            path, facecolor='none', edgecolor=self._state['stroke'],
            linewidth=width_pt, linestyle=linestyle, zorder=self._next_zorder()
        ))

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        corners = self._apply([(x, y), (x + width, y), (x + width, y + height), (x, y + height), (x, y)])
        codes = [MplPath.MOVETO] + [MplPath.LINETO] * 3 + [MplPath.CLOSEPOLY]
        self.ax.add_patch(PathPatch(
            MplPath(corners, codes), facecolor=self._state['fill'],
            edgecolor='none', linewidth=0, zorder=self._next_zorder()
        ))

    def fill_text(self, text: str, x: float, y: float) -> None:
        px, py = self._apply((x, y))[0]
        size_pt = self._px_to_points(self._state['font_size'] * self._unit_scale())
        if size_pt <= 0:
            return
        self.ax.text(
            px, py, text, fontsize=size_pt, color=self._state['fill'],
            ha=self._state['align'], va='baseline', zorder=self._next_zorder()
        )

    # -- export ----------------------------------------------------------

    def to_png(self) -> bytes:
        """Snapshot the surface as PNG bytes"""
        buffer = io.BytesIO()
        self.figure.savefig(buffer, format='png', dpi=self.dpi,
                            facecolor=self.figure.get_facecolor())
        return buffer.getvalue()

    def to_data_uri(self) -> str:
        encoded = base64.b64encode(self.to_png()).decode('ascii')
        return f"data:image/png;base64,{encoded}"
