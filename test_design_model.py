"""
TEST FILE: EARTH SMILE DESIGN MODEL
Factor functions, rounding and the full design calculation

Reference site: 1 ha, 3% slope, 1025 mm/year, loamy soil, orchard
(the WOCAT Benin base case, so every factor except slope is 1.0)
"""

import math
import logging

import pytest

from earthsmiles_core.models.design import (
    SiteInput, DesignResult, EarthSmileDesignModel, compute_design,
    round_half_away, slope_factor, rainfall_factor, soil_factor,
    land_use_factor, bund_height
)

logging.basicConfig(
    level=logging.INFO,
    format='%(levelname)s:%(name)s:%(message)s'
)


@pytest.fixture
def reference_design():
    return compute_design(1, 3, 1025, 'loamy', 'orchard')


@pytest.mark.parametrize("slope, expected", [
    (0, 1.0),
    (2, 1.0),
    (2.1, 0.95),
    (5, 0.95),
    (7, 0.9),
    (12, 0.85),
    (20, 0.75),
    (25, 0.75),
    (30, 0.6),
])
def test_slope_factor_steps(slope, expected):
    assert slope_factor(slope) == expected


def test_slope_factor_never_increases_with_slope():
    factors = [slope_factor(s / 2) for s in range(0, 120)]
    assert all(a >= b for a, b in zip(factors, factors[1:]))


def test_rainfall_factor_is_linear_then_capped():
    assert rainfall_factor(1025) == pytest.approx(1.0)
    assert rainfall_factor(512.5) == pytest.approx(0.5)
    assert rainfall_factor(1230) == pytest.approx(1.2)
    assert rainfall_factor(5000) == pytest.approx(1.2)


def test_soil_and_land_use_factors():
    assert soil_factor('sandy') == 1.1
    assert soil_factor('clay') == 0.9
    assert soil_factor('loamy') == 1.0
    assert soil_factor('peat') == 1.0

    assert land_use_factor('pasture') == 1.2
    assert land_use_factor('cropland') == 0.9
    assert land_use_factor('orchard') == 1.0
    assert land_use_factor('forest') == 1.0


def test_bund_height_stays_within_limits():
    assert bund_height(0) == pytest.approx(0.3)
    assert bund_height(10) == pytest.approx(0.38)
    assert bund_height(50) == pytest.approx(0.7)
    assert bund_height(1000) == pytest.approx(0.7)


def test_bund_height_never_decreases_with_slope():
    heights = [bund_height(s / 2) for s in range(0, 200)]
    assert all(a <= b for a, b in zip(heights, heights[1:]))


def test_round_half_away_from_zero():
    assert round_half_away(2.675, 1) == 2.7
    assert round_half_away(0.125, 2) == 0.13
    assert round_half_away(-0.125, 2) == -0.13
    assert math.isnan(round_half_away(float('nan'), 2))


def test_reference_site_design(reference_design):
    d = reference_design
    assert d.diameter == 3.8
    assert d.depth == 0.23
    assert d.bund_height == 0.32
    assert d.spacing_between == 4.0
    assert d.catchment_area == 5.67
    assert d.earthwork_volume == 0.37
    assert d.structures_per_hectare == 753
    assert d.total_structures == 753


def test_reference_site_factors(reference_design):
    d = reference_design
    assert (d.slope_factor, d.rainfall_factor, d.soil_factor, d.land_use_factor) == (0.95, 1.0, 1.0, 1.0)


def test_total_structures_scales_with_area():
    d = compute_design(2.5, 3, 1025, 'loamy', 'orchard')
    assert d.structures_per_hectare == 753
    assert d.total_structures == math.floor(2.5 * 753)


def test_steep_dry_sandy_pasture():
    d = compute_design(1, 30, 300, 'sandy', 'pasture')
    expected = 4 * 0.6 * (300 / 1025) * 1.1 * 1.2
    assert d.diameter == round_half_away(expected, 2)
    assert d.slope_factor == 0.6
    assert d.rainfall_factor == round_half_away(300 / 1025, 3)
    assert d.bund_height == 0.54


def test_design_is_deterministic():
    first = compute_design(3.2, 7.5, 640, 'clay', 'cropland')
    second = compute_design(3.2, 7.5, 640, 'clay', 'cropland')
    assert first == second


def test_diameter_shrinks_on_steeper_ground():
    gentle = compute_design(1, 1, 800, 'loamy', 'orchard')
    steep = compute_design(1, 28, 800, 'loamy', 'orchard')
    assert steep.diameter < gentle.diameter
    assert steep.structures_per_hectare > gentle.structures_per_hectare


def test_zero_rainfall_gives_degenerate_design():
    d = compute_design(1, 3, 0, 'loamy', 'orchard')
    assert d.diameter == 0
    assert d.is_degenerate
    assert d.structures_per_hectare == 0
    assert d.total_structures == 0
    assert d.depth == 0.15


def test_nan_input_does_not_raise():
    d = compute_design(1, 3, float('nan'), 'loamy', 'orchard')
    assert d.is_degenerate
    assert d.structures_per_hectare == 0
    assert d.total_structures == 0


def test_design_result_serializes(reference_design):
    data = reference_design.to_dict()
    assert set(data) == {f for f in DesignResult.__dataclass_fields__}
    assert '"structures_per_hectare": 753' in reference_design.to_json()


def test_model_design_matches_calculator():
    model = EarthSmileDesignModel()
    site = SiteInput(area=1, slope=3, rainfall=1025, soil_type='loamy', land_use='orchard')
    assert model.design(site) == compute_design(1, 3, 1025, 'loamy', 'orchard')


def test_equations_are_copies():
    equations = EarthSmileDesignModel.get_equations()
    assert equations
    assert all({'parameter', 'equation', 'description', 'source'} <= set(eq) for eq in equations)
    equations[0]['parameter'] = 'changed'
    assert EarthSmileDesignModel.get_equations()[0]['parameter'] != 'changed'
