"""
EARTH SMILE DESIGN MODEL
Sizing of semicircular bunds from site conditions
Factor-based scaling of a WOCAT base design: slope, rainfall, soil and land use
each apply a bounded multiplicative correction to the base diameter
"""

import math
import json
import numpy as np
from typing import Dict, List
from dataclasses import dataclass, asdict
import logging

from earthsmiles_core.config.settings import (
    BASE_DIAMETER_M, BASE_DEPTH_M, BASE_SPACING_M,
    REFERENCE_RAINFALL_MM, RAINFALL_FACTOR_CAP, DEPTH_RAINFALL_DIVISOR_MM,
    BUND_HEIGHT_BASE_M, BUND_HEIGHT_SLOPE_COEFF, BUND_HEIGHT_MAX_M,
    BUND_SIDE_ANGLE_RAD, SPACING_OVERLAP_FRACTION, M2_PER_HECTARE,
    SLOPE_FACTOR_THRESHOLDS, SLOPE_FACTOR_DEFAULT,
    SOIL_FACTORS, SOIL_FACTOR_DEFAULT, LAND_USE_FACTORS, LAND_USE_FACTOR_DEFAULT,
    DIMENSION_DECIMALS, SPACING_DECIMALS, FACTOR_DECIMALS,
    EQUATION_REFERENCES
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SiteInput:
    """Site conditions for one calculation"""
    area: float          # hectares
    slope: float         # percent
    rainfall: float      # mm/year
    soil_type: str       # loamy | sandy | clay
    land_use: str        # orchard | pasture | cropland

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class DesignResult:
    """Rounded structure design; replaced wholesale on every recalculation"""
    diameter: float                 # m
    depth: float                    # m
    bund_height: float              # m, within [0.3, 0.7]
    spacing_between: float          # m
    structures_per_hectare: int
    total_structures: int
    catchment_area: float           # m², one semicircle
    earthwork_volume: float         # m³, bund material for one structure
    slope_factor: float
    rainfall_factor: float
    soil_factor: float
    land_use_factor: float

    @property
    def is_degenerate(self) -> bool:
        """True when there is no drawable structure (zero, negative or NaN diameter)"""
        return not (math.isfinite(self.diameter) and self.diameter > 0)

    def to_dict(self) -> Dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, default=str)


def round_half_away(value: float, decimals: int) -> float:
    """
    Round half away from zero at the given number of decimals
    Non-finite values pass through unchanged
    """
    if not math.isfinite(value):
        return value
    factor = 10 ** decimals
    return math.copysign(math.floor(abs(value) * factor + 0.5) / factor, value)


def slope_factor(slope: float) -> float:
    """Step factor; the highest threshold exceeded overwrites the lower ones"""
    factor = SLOPE_FACTOR_DEFAULT
    for threshold, step_factor in SLOPE_FACTOR_THRESHOLDS:
        if slope > threshold:
            factor = step_factor
    return factor


def rainfall_factor(rainfall: float) -> float:
    """Linear in rainfall relative to the Benin reference, capped at 1.2"""
    return float(np.minimum(rainfall / REFERENCE_RAINFALL_MM, RAINFALL_FACTOR_CAP))


def soil_factor(soil_type: str) -> float:
    return SOIL_FACTORS.get(soil_type, SOIL_FACTOR_DEFAULT)


def land_use_factor(land_use: str) -> float:
    return LAND_USE_FACTORS.get(land_use, LAND_USE_FACTOR_DEFAULT)


def bund_height(slope: float) -> float:
    """Bund height grows with slope, clamped to [0.3, 0.7] m"""
    return float(np.clip(BUND_HEIGHT_BASE_M + slope * BUND_HEIGHT_SLOPE_COEFF,
                         BUND_HEIGHT_BASE_M, BUND_HEIGHT_MAX_M))


def _floor_count(value: float) -> int:
    # Counts are never negative or undefined
    if not math.isfinite(value) or value < 0:
        return 0
    return int(math.floor(value))


def compute_design(area: float, slope: float, rainfall: float,
                   soil_type: str, land_use: str) -> DesignResult:
    """
    Compute the earth smile design for a site

    Total over numeric input: degenerate inputs (zero rainfall, NaN) give
    degenerate but defined results instead of raising.

    Args:
        area: Site area in hectares
        slope: Terrain slope in percent
        rainfall: Annual rainfall in mm
        soil_type: loamy | sandy | clay (other values use factor 1.0)
        land_use: orchard | pasture | cropland (other values use factor 1.0)
    """
    s_factor = slope_factor(slope)
    r_factor = rainfall_factor(rainfall)
    soil_f = soil_factor(soil_type)
    land_f = land_use_factor(land_use)

    diameter = BASE_DIAMETER_M * s_factor * r_factor * soil_f * land_f
    depth = BASE_DEPTH_M * (1 + rainfall / DEPTH_RAINFALL_DIVISOR_MM)
    height = bund_height(slope)

    # Half circle basin plus its share of the spacing strip
    semicircle_area = math.pi * (diameter / 2) ** 2 / 2
    effective_area = semicircle_area + BASE_SPACING_M * diameter * SPACING_OVERLAP_FRACTION

    if math.isfinite(effective_area) and effective_area > 0:
        per_hectare = _floor_count(M2_PER_HECTARE / effective_area)
    else:
        per_hectare = 0
    total = _floor_count(area * per_hectare)

    # Triangular bund section swept along the semicircle perimeter
    bund_length = math.pi * diameter / 2
    cross_section = 0.5 * height * (height / math.tan(BUND_SIDE_ANGLE_RAD))
    earthwork = bund_length * cross_section

    return DesignResult(
        diameter=round_half_away(diameter, DIMENSION_DECIMALS),
        depth=round_half_away(depth, DIMENSION_DECIMALS),
        bund_height=round_half_away(height, DIMENSION_DECIMALS),
        spacing_between=round_half_away(BASE_SPACING_M, SPACING_DECIMALS),
        structures_per_hectare=per_hectare,
        total_structures=total,
        catchment_area=round_half_away(semicircle_area, DIMENSION_DECIMALS),
        earthwork_volume=round_half_away(earthwork, DIMENSION_DECIMALS),
        slope_factor=round_half_away(s_factor, FACTOR_DECIMALS),
        rainfall_factor=round_half_away(r_factor, FACTOR_DECIMALS),
        soil_factor=round_half_away(soil_f, FACTOR_DECIMALS),
        land_use_factor=round_half_away(land_f, FACTOR_DECIMALS),
    )


class EarthSmileDesignModel:
    """
    Semicircular bund design following the WOCAT Benin base case:
    - Step slope factor (smaller structures on steeper ground)
    - Capped linear rainfall factor
    - Soil texture and land-use corrections
    - Bund earthwork from a triangular cross-section
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def design(self, site: SiteInput) -> DesignResult:
        """Run the calculator for a validated site"""
        result = compute_design(site.area, site.slope, site.rainfall,
                                site.soil_type, site.land_use)

        self.logger.info(
            f"Design for {site.area:.2f} ha @ {site.slope:.1f}% / {site.rainfall:.0f} mm "
            f"({site.soil_type}, {site.land_use}): D={result.diameter} m, "
            f"{result.structures_per_hectare}/ha, {result.total_structures} total"
        )
        if result.is_degenerate:
            self.logger.warning("Design is degenerate (no usable diameter) - check rainfall input")

        return result

    @staticmethod
    def get_equations() -> List[Dict[str, str]]:
        """Equation references used by the calculator"""
        return [dict(eq) for eq in EQUATION_REFERENCES]
