"""
Rendering module initialization - drawing surfaces and scene renderer
"""

from .surface import DrawingSurface, RecordingSurface, MatplotlibSurface
from .scene import SceneRenderer, draw_dimension_line, render_to_png

__all__ = [
    'DrawingSurface',
    'RecordingSurface',
    'MatplotlibSurface',
    'SceneRenderer',
    'draw_dimension_line',
    'render_to_png'
]
