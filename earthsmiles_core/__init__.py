"""
Package initialization file for Earth Smiles Core
"""

__version__ = "1.0.0"
__description__ = "Earth Smiles - semicircular bund design, layout and visualization"

from earthsmiles_core.models.design import (
    SiteInput, DesignResult, EarthSmileDesignModel, compute_design
)
from earthsmiles_core.models.viewport import ViewState, InteractionController
from earthsmiles_core.rendering.scene import SceneRenderer, render_to_png
from earthsmiles_core.rendering.surface import RecordingSurface, MatplotlibSurface
from earthsmiles_core.reports.html_generator import HtmlReportGenerator
from earthsmiles_core.session import AppState

from earthsmiles_core.utils.core import (
    DesignReport, DataValidator, ReportExporter
)
from earthsmiles_core.utils.geo_processor import GeoProcessor

__all__ = [
    'SiteInput',
    'DesignResult',
    'EarthSmileDesignModel',
    'compute_design',
    'ViewState',
    'InteractionController',
    'SceneRenderer',
    'render_to_png',
    'RecordingSurface',
    'MatplotlibSurface',
    'HtmlReportGenerator',
    'AppState',
    'DesignReport',
    'DataValidator',
    'ReportExporter',
    'GeoProcessor'
]
