"""
TEST FILE: SITE GEOMETRY
Shoelace area, degree-to-hectare conversion and the coarse slope heuristics
"""

import pytest

from earthsmiles_core.utils.geo_processor import GeoProcessor


UNIT_SQUARE = [(0, 0), (1, 0), (1, 1), (0, 1)]


def test_unit_square_area():
    assert GeoProcessor.polygon_area(UNIT_SQUARE) == pytest.approx(1.0)


def test_area_ignores_winding_direction():
    assert GeoProcessor.polygon_area(list(reversed(UNIT_SQUARE))) == pytest.approx(1.0)


def test_right_triangle_area():
    assert GeoProcessor.polygon_area([(0, 0), (4, 0), (0, 3)]) == pytest.approx(6.0)


def test_polygon_needs_three_vertices():
    with pytest.raises(ValueError):
        GeoProcessor.polygon_area([(0, 0), (1, 1)])


def test_small_polygon_is_floored_to_minimum_area():
    assert GeoProcessor.degrees_to_hectares(0.0) == 0.1
    assert GeoProcessor.degrees_to_hectares(1e-12) == 0.1


def test_degrees_to_hectares_conversion():
    # 0.01 deg x 0.01 deg at the planar scale
    raw = 0.01 * 0.01
    expected = raw * 111320.0 ** 2 / 10000
    assert GeoProcessor.degrees_to_hectares(raw) == pytest.approx(expected)


def test_polygon_area_hectares_takes_lat_lng():
    latlngs = [(32.34, 36.20), (32.34, 36.21), (32.35, 36.21), (32.35, 36.20)]
    expected = 0.0001 * 111320.0 ** 2 / 10000
    assert GeoProcessor.polygon_area_hectares(latlngs) == pytest.approx(expected, rel=1e-6)


def test_bounds_of():
    lat_span, lng_span = GeoProcessor.bounds_of([(10.0, 20.0), (10.5, 20.2), (10.2, 21.0)])
    assert lat_span == pytest.approx(0.5)
    assert lng_span == pytest.approx(1.0)


def test_slope_from_bounds_is_clamped():
    assert GeoProcessor.slope_from_bounds(0.0, 0.0) == 1.0
    assert GeoProcessor.slope_from_bounds(0.004, 0.006) == pytest.approx(5.0)
    assert GeoProcessor.slope_from_bounds(1.0, 1.0) == 30.0


def test_slope_from_coordinates():
    # 0.001 deg latitude span -> 1 m pseudo-rise over 100 m
    pairs = [(32.000, 36.0), (32.001, 36.0), (32.0005, 36.001)]
    assert GeoProcessor.slope_from_coordinates(pairs) == pytest.approx(1.0)

    pairs = [(32.00, 36.0), (32.01, 36.0), (32.005, 36.001)]
    assert GeoProcessor.slope_from_coordinates(pairs) == pytest.approx(10.0)

    pairs = [(32.0, 36.0), (33.0, 36.0), (32.5, 36.1)]
    assert GeoProcessor.slope_from_coordinates(pairs) == 30.0


@pytest.mark.parametrize("slope, label", [
    (1, 'Flat'),
    (3, 'Gentle'),
    (8, 'Moderate'),
    (12, 'Rolling'),
    (20, 'Hilly'),
    (45, 'Steep'),
])
def test_classify_slope(slope, label):
    assert GeoProcessor.classify_slope(slope) == label
