"""
Geographic Processing Utilities
Planar polygon area, degree-to-hectare conversion and coarse slope heuristics
for site boundaries drawn on a map or typed in as coordinates
"""

import numpy as np
from typing import Sequence, Tuple
import logging

from earthsmiles_core.config.settings import (
    DEGREE_SCALE, MIN_AREA_HECTARES, MIN_POLYGON_VERTICES,
    SLOPE_BOUNDS_SCALE, SLOPE_COORD_ELEVATION_SCALE, SLOPE_COORD_RUN_M,
    SLOPE_ESTIMATE_MIN_PERCENT, SLOPE_ESTIMATE_MAX_PERCENT,
    SLOPE_CLASSES, SLOPE_CLASS_DEFAULT, M2_PER_HECTARE
)

logger = logging.getLogger(__name__)


class GeoProcessor:
    """Site geometry calculations"""

    @staticmethod
    def polygon_area(vertices: Sequence[Tuple[float, float]]) -> float:
        """
        Planar polygon area using the shoelace formula

        Args:
            vertices: Ordered ring of (lng, lat) pairs. The ring is closed
                implicitly (last vertex wraps to the first).

        Returns:
            Absolute area in squared input units (degrees² for lng/lat)

        Raises:
            ValueError: If fewer than 3 vertices are given
        """
        if len(vertices) < MIN_POLYGON_VERTICES:
            raise ValueError(
                f"Polygon needs at least {MIN_POLYGON_VERTICES} vertices, got {len(vertices)}"
            )

        ring = np.asarray(vertices, dtype=float)
        x = ring[:, 0]
        y = ring[:, 1]
        x_next = np.roll(x, -1)
        y_next = np.roll(y, -1)

        return float(abs(np.sum(x * y_next - x_next * y)) / 2.0)

    @staticmethod
    def degrees_to_hectares(raw_area: float) -> float:
        """
        Convert a degrees² area to hectares (rough planar conversion)
        Never returns less than MIN_AREA_HECTARES
        """
        hectares = raw_area * M2_PER_HECTARE / (DEGREE_SCALE * DEGREE_SCALE)
        return max(hectares, MIN_AREA_HECTARES)

    @staticmethod
    def polygon_area_hectares(latlngs: Sequence[Tuple[float, float]]) -> float:
        """Area in hectares of a (lat, lng) ring as supplied by the map"""
        lnglat = [(lng, lat) for lat, lng in latlngs]
        raw_area = GeoProcessor.polygon_area(lnglat)
        hectares = GeoProcessor.degrees_to_hectares(raw_area)
        logger.debug(f"Polygon area: {raw_area:.3e} deg² -> {hectares:.2f} ha")
        return hectares

    @staticmethod
    def bounds_of(latlngs: Sequence[Tuple[float, float]]) -> Tuple[float, float]:
        """(lat_span, lng_span) of a (lat, lng) ring"""
        ring = np.asarray(latlngs, dtype=float)
        lat_span = float(ring[:, 0].max() - ring[:, 0].min())
        lng_span = float(ring[:, 1].max() - ring[:, 1].min())
        return lat_span, lng_span

    @staticmethod
    def slope_from_bounds(lat_span: float, lng_span: float) -> float:
        """
        Estimate slope (%) from the size of the polygon's bounding box

        Low fidelity: averages the two spans, scales by a constant and clamps
        to [1, 30] %. It is a placeholder until real DEM data is wired in.
        """
        avg_span = (lat_span + lng_span) / 2.0
        return float(np.clip(avg_span * SLOPE_BOUNDS_SCALE,
                             SLOPE_ESTIMATE_MIN_PERCENT, SLOPE_ESTIMATE_MAX_PERCENT))

    @staticmethod
    def slope_from_coordinates(latlngs: Sequence[Tuple[float, float]]) -> float:
        """
        Estimate slope (%) from typed-in coordinates

        Uses latitude as a pseudo-elevation (lat * 1000) over a fixed 100 m run.
        Same [1, 30] % clamp and the same low fidelity as slope_from_bounds.
        """
        elevations = np.asarray([lat for lat, _ in latlngs], dtype=float) * SLOPE_COORD_ELEVATION_SCALE
        rise = elevations.max() - elevations.min()
        slope = (rise / SLOPE_COORD_RUN_M) * 100
        return float(np.clip(slope, SLOPE_ESTIMATE_MIN_PERCENT, SLOPE_ESTIMATE_MAX_PERCENT))

    @staticmethod
    def classify_slope(slope_percent: float) -> str:
        """Terrain class for a slope; the highest class exceeded wins"""
        slope_class = SLOPE_CLASS_DEFAULT
        for threshold, label in SLOPE_CLASSES:
            if slope_percent > threshold:
                slope_class = label
        return slope_class
