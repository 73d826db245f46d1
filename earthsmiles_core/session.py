"""
Application state for one design session
Owns the site input, current design, view mode and view transform; handlers
receive it explicitly instead of reaching for shared globals
"""

import math
from typing import Any, List, Optional, Sequence, Tuple
from dataclasses import dataclass, field
import logging

from earthsmiles_core.models.design import SiteInput, DesignResult, EarthSmileDesignModel
from earthsmiles_core.models.viewport import InteractionController, ViewState
from earthsmiles_core.rendering.scene import SceneRenderer
from earthsmiles_core.rendering.surface import DrawingSurface, MatplotlibSurface
from earthsmiles_core.utils.core import (
    DesignReport, DataValidator, summarize_design, get_timestamp
)
from earthsmiles_core.utils.geo_processor import GeoProcessor
from earthsmiles_core.config.settings import (
    VIEW_SINGLE, VIEW_MODES, DEFAULT_CANVAS_SIZE, DEFAULT_DPI, MIN_POLYGON_VERTICES,
    REPORT_PROJECT_NAME, DEFAULT_LOCATION_NAME, RECOMMENDATIONS, MODEL_VERSION
)

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Single owned state for the site -> design -> view workflow"""
    area: Optional[float] = None
    slope: Optional[float] = None
    site_input: Optional[SiteInput] = None
    design_result: Optional[DesignResult] = None
    view_mode: str = VIEW_SINGLE
    controller: InteractionController = field(default_factory=InteractionController)
    model: EarthSmileDesignModel = field(default_factory=EarthSmileDesignModel, repr=False)
    renderer: SceneRenderer = field(default_factory=SceneRenderer, repr=False)

    @property
    def view_state(self) -> ViewState:
        return self.controller.view_state

    # -- step 1: site geometry -------------------------------------------

    def set_site_from_polygon(self, latlngs: Sequence[Tuple[float, float]]) -> Tuple[bool, str]:
        """Area and slope from a map polygon given as (lat, lng) vertices"""
        valid, message = DataValidator.validate_polygon(latlngs)
        if not valid:
            return False, message

        self.area = GeoProcessor.polygon_area_hectares(latlngs)
        lat_span, lng_span = GeoProcessor.bounds_of(latlngs)
        self.slope = GeoProcessor.slope_from_bounds(lat_span, lng_span)

        logger.info(f"Site from polygon: {self.area:.2f} ha, slope ~{self.slope:.1f}% "
                    f"({GeoProcessor.classify_slope(self.slope)})")
        return True, f"Area {self.area:.2f} ha, slope {self.slope:.1f}%"

    def set_site_from_coordinates(self, pairs: Sequence[Tuple[Any, Any]]) -> Tuple[bool, str]:
        """Area and slope from typed-in (lat, lng) pairs; unparseable pairs are dropped"""
        if pairs is None or len(pairs) < MIN_POLYGON_VERTICES:
            return False, f"Please enter at least {MIN_POLYGON_VERTICES} coordinate pairs."

        latlngs: List[Tuple[float, float]] = []
        for pair in pairs:
            try:
                lat, lng = pair
                lat_value, lng_value = float(lat), float(lng)
            except (TypeError, ValueError):
                continue
            if math.isfinite(lat_value) and math.isfinite(lng_value):
                latlngs.append((lat_value, lng_value))

        if len(latlngs) < MIN_POLYGON_VERTICES:
            return False, f"Please enter valid coordinates for at least {MIN_POLYGON_VERTICES} points."

        self.area = GeoProcessor.polygon_area_hectares(latlngs)
        self.slope = GeoProcessor.slope_from_coordinates(latlngs)

        logger.info(f"Site from {len(latlngs)} coordinates: {self.area:.2f} ha, slope ~{self.slope:.1f}%")
        return True, f"Area {self.area:.2f} ha, slope {self.slope:.1f}%"

    def set_site(self, area: float, slope: float) -> None:
        """Direct entry of area (ha) and slope (%)"""
        self.area = area
        self.slope = slope

    # -- step 2: design --------------------------------------------------

    def calculate(self, rainfall: float, soil_type: str, land_use: str) -> Tuple[bool, str]:
        """Validate inputs, replace the design and reset the view"""
        if self.area is None or self.slope is None:
            return False, "Define the site area and slope first."

        valid, message = DataValidator.validate_site_input(
            self.area, self.slope, rainfall, soil_type, land_use
        )
        if not valid:
            logger.warning(f"Rejected site input: {message}")
            return False, message

        site = SiteInput(
            area=float(self.area),
            slope=float(self.slope),
            rainfall=float(rainfall),
            soil_type=soil_type,
            land_use=land_use,
        )
        self.site_input = site
        self.design_result = self.model.design(site)
        self.controller.reset()
        return True, "Design calculated"

    # -- step 3: visualization -------------------------------------------

    def set_view_mode(self, view_mode: str) -> Tuple[bool, str]:
        valid, message = DataValidator.validate_view_mode(view_mode)
        if not valid:
            return False, message

        self.view_mode = view_mode
        self.controller.reset()
        return True, message

    def handle_event(self, event) -> bool:
        """Feed an input event to the controller; True means redraw"""
        return self.controller.handle_event(event)

    def render(self, surface: DrawingSurface,
               canvas_size: Tuple[int, int] = DEFAULT_CANVAS_SIZE) -> bool:
        """Redraw the current view; False when there is nothing to draw yet"""
        if self.design_result is None:
            return False
        self.renderer.render(self.design_result, self.view_mode, self.view_state, canvas_size, surface)
        return True

    # -- step 4: report --------------------------------------------------

    def build_report(self, location_name: str = DEFAULT_LOCATION_NAME,
                     include_images: bool = True,
                     canvas_size: Tuple[int, int] = DEFAULT_CANVAS_SIZE) -> Optional[DesignReport]:
        """Report for the current design, or None before a calculation"""
        if self.site_input is None or self.design_result is None:
            return None

        visualization = {}
        if include_images:
            for mode in VIEW_MODES:
                surface = MatplotlibSurface(canvas_size[0], canvas_size[1], dpi=DEFAULT_DPI)
                self.renderer.render(self.design_result, mode, ViewState(), canvas_size, surface)
                visualization[mode] = surface.to_data_uri()

        return DesignReport(
            project=REPORT_PROJECT_NAME,
            location_name=location_name,
            timestamp=get_timestamp(),
            site_input=self.site_input.to_dict(),
            design=self.design_result.to_dict(),
            summary=summarize_design(self.site_input, self.design_result),
            recommendations={key: list(items) for key, items in RECOMMENDATIONS.items()},
            equations=self.model.get_equations(),
            model_version=MODEL_VERSION,
            visualization=visualization,
        )

    def reset(self) -> None:
        """Start over with an empty session"""
        self.area = None
        self.slope = None
        self.site_input = None
        self.design_result = None
        self.view_mode = VIEW_SINGLE
        self.controller.reset()
