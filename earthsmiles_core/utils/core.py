"""
Core utility functions for the Earth Smiles design platform
"""

import json
import math
import pandas as pd
from pathlib import Path
from typing import Dict, List, Tuple, Optional, Any, Sequence
from dataclasses import dataclass, asdict, field
from datetime import datetime
import logging

from earthsmiles_core.models.design import SiteInput, DesignResult, round_half_away
from earthsmiles_core.utils.geo_processor import GeoProcessor
from earthsmiles_core.config.settings import (
    SOIL_TYPES, LAND_USES, VIEW_MODES, MIN_POLYGON_VERTICES,
    RUNOFF_EFFICIENCY_RANGE, LAYOUT_PATTERN
)

logger = logging.getLogger(__name__)


@dataclass
class DesignReport:
    """Report container: input echo, design, derived summary and guidance"""
    project: str
    location_name: str
    timestamp: str
    site_input: Dict[str, Any]
    design: Dict[str, Any]
    summary: Dict[str, Any]
    recommendations: Dict[str, List[str]]
    equations: List[Dict[str, str]]
    model_version: str
    visualization: Dict[str, str] = field(default_factory=dict)  # view mode -> PNG data URI

    def to_dict(self) -> Dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, default=str)

    def validate(self) -> Tuple[bool, List[str]]:
        """Validate report before serialization"""
        errors = []

        if not self.project:
            errors.append("Missing project name")

        if not self.site_input:
            errors.append("Missing site input")

        required = ('diameter', 'depth', 'bund_height', 'structures_per_hectare', 'total_structures')
        missing = [key for key in required if key not in self.design]
        if missing:
            errors.append(f"Design missing fields: {missing}")

        for mode in self.visualization:
            if mode not in VIEW_MODES:
                errors.append(f"Invalid view mode in visualization: {mode}")

        try:
            datetime.fromisoformat(self.timestamp)
        except ValueError:
            errors.append(f"Invalid timestamp format: {self.timestamp}")

        return (len(errors) == 0, errors)


class DataValidator:
    """Boundary checks for user input; failures come back as plain messages"""

    @staticmethod
    def _as_number(value: Any, name: str) -> Tuple[Optional[float], str]:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None, f"{name} must be a number"
        if not math.isfinite(number):
            return None, f"{name} must be a finite number"
        return number, ""

    @staticmethod
    def validate_site_input(area: Any, slope: Any, rainfall: Any,
                            soil_type: str, land_use: str) -> Tuple[bool, str]:
        """Validate site conditions before running the calculator"""
        area_value, message = DataValidator._as_number(area, "Area")
        if area_value is None:
            return False, message
        if area_value <= 0:
            return False, f"Area must be greater than 0 ha (got {area_value})"

        slope_value, message = DataValidator._as_number(slope, "Slope")
        if slope_value is None:
            return False, message
        if slope_value < 0:
            return False, f"Slope cannot be negative (got {slope_value}%)"

        rainfall_value, message = DataValidator._as_number(rainfall, "Rainfall")
        if rainfall_value is None:
            return False, message
        if rainfall_value < 0:
            return False, f"Rainfall cannot be negative (got {rainfall_value} mm)"

        if soil_type not in SOIL_TYPES:
            return False, f"Unknown soil type '{soil_type}' (choose from {', '.join(SOIL_TYPES)})"

        if land_use not in LAND_USES:
            return False, f"Unknown land use '{land_use}' (choose from {', '.join(LAND_USES)})"

        return True, "Valid site input"

    @staticmethod
    def validate_polygon(latlngs: Sequence) -> Tuple[bool, str]:
        """A site boundary needs at least 3 finite (lat, lng) vertices"""
        if latlngs is None or len(latlngs) < MIN_POLYGON_VERTICES:
            return False, f"Please draw a polygon with at least {MIN_POLYGON_VERTICES} points on the map."

        for vertex in latlngs:
            try:
                lat, lng = vertex
                lat_value, lng_value = float(lat), float(lng)
            except (TypeError, ValueError):
                return False, "Polygon points must be latitude/longitude pairs."
            if not (math.isfinite(lat_value) and math.isfinite(lng_value)):
                return False, "Polygon points must have finite coordinates."

        return True, "Valid polygon"

    @staticmethod
    def validate_view_mode(view_mode: str) -> Tuple[bool, str]:
        if view_mode not in VIEW_MODES:
            return False, f"Unknown view '{view_mode}' (choose from {', '.join(VIEW_MODES)})"
        return True, "Valid view mode"


def _whole(value: float):
    # NaN totals from a degenerate design stay NaN
    if not math.isfinite(value):
        return value
    return int(round_half_away(value, 0))


def summarize_design(site: SiteInput, design: DesignResult) -> Dict[str, Any]:
    """Site-level totals derived from a design"""
    total_catchment = design.catchment_area * design.total_structures
    potential_runoff = total_catchment * site.rainfall / 1000
    low, high = RUNOFF_EFFICIENCY_RANGE

    return {
        'slope_class': GeoProcessor.classify_slope(site.slope),
        'total_catchment_m2': _whole(total_catchment),
        'potential_runoff_m3_year': _whole(potential_runoff),
        'runoff_efficiency': f"{low * 100:.0f}-{high * 100:.0f}%",
        'layout_pattern': LAYOUT_PATTERN,
        'total_earthwork_m3': round_half_away(design.earthwork_volume * design.total_structures, 2),
    }


DESIGN_UNITS = {
    'diameter': 'm',
    'depth': 'm',
    'bund_height': 'm',
    'spacing_between': 'm',
    'structures_per_hectare': 'per ha',
    'total_structures': 'count',
    'catchment_area': 'm²',
    'earthwork_volume': 'm³',
    'slope_factor': '-',
    'rainfall_factor': '-',
    'soil_factor': '-',
    'land_use_factor': '-',
}


class ReportExporter:
    """Export design reports in multiple formats"""

    @staticmethod
    def to_json(report: DesignReport, output_path: Path) -> None:
        """Export report to JSON"""
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(report.to_json())

        logger.info(f"JSON report exported to {output_path}")

    @staticmethod
    def to_dataframe(report: DesignReport) -> pd.DataFrame:
        """Parameter/value/unit table of inputs, design and summary"""
        rows = []
        for key, value in report.site_input.items():
            rows.append({'section': 'input', 'parameter': key, 'value': value, 'unit': ''})
        for key, value in report.design.items():
            rows.append({'section': 'design', 'parameter': key, 'value': value,
                         'unit': DESIGN_UNITS.get(key, '')})
        for key, value in report.summary.items():
            rows.append({'section': 'summary', 'parameter': key, 'value': value, 'unit': ''})
        return pd.DataFrame(rows, columns=['section', 'parameter', 'value', 'unit'])

    @staticmethod
    def to_csv(report: DesignReport, output_path: Path) -> None:
        """Export report table to CSV"""
        output_path.parent.mkdir(parents=True, exist_ok=True)

        ReportExporter.to_dataframe(report).to_csv(output_path, index=False)
        logger.info(f"CSV report exported to {output_path}")

    @staticmethod
    def to_png(png_bytes: bytes, output_path: Path) -> None:
        """Write a rendered view to disk"""
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'wb') as f:
            f.write(png_bytes)

        logger.info(f"Image exported to {output_path}")


def get_timestamp() -> str:
    """Get current timestamp in ISO format"""
    return datetime.now().isoformat()
