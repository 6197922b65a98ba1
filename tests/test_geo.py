from __future__ import annotations

import warnings

import pytest
from shapely.geometry import MultiPolygon, Polygon, box

from globemap.geo import centroid, ease_cubic_in_out, interpolate_number, interpolate_rotation


def test_centroid_of_symmetric_box_is_its_center():
    assert centroid(box(-10, -10, 10, 10)) == pytest.approx((0.0, 0.0), abs=1e-6)


def test_centroid_of_mid_latitude_box():
    lon, lat = centroid(box(6, 47, 15, 55))
    assert lon == pytest.approx(10.5, abs=1e-6)
    assert 50.5 < lat < 51.2


def test_centroid_across_antimeridian():
    geometry = MultiPolygon([box(170, -10, 180, 10), box(-180, -10, -170, 10)])
    lon, lat = centroid(geometry)
    assert abs(abs(lon) - 180.0) < 1e-6
    assert lat == pytest.approx(0.0, abs=1e-6)


def test_centroid_of_empty_geometry_raises():
    with pytest.raises(ValueError):
        centroid(Polygon())


def test_interpolate_rotation_endpoints_are_exact():
    interpolate = interpolate_rotation((12.5, -3.0), (-40.0, 25.0))
    assert interpolate(0.0) == (12.5, -3.0)
    assert interpolate(1.0) == (-40.0, 25.0)


def test_interpolate_rotation_follows_great_circle():
    interpolate = interpolate_rotation((0.0, 0.0), (90.0, 0.0))
    assert interpolate(0.5) == pytest.approx((45.0, 0.0))


def test_interpolate_rotation_identical_points():
    interpolate = interpolate_rotation((5.0, 5.0), (5.0, 5.0))
    assert interpolate(0.3) == (5.0, 5.0)


def test_interpolate_number():
    interpolate = interpolate_number(100.0, 300.0)
    assert interpolate(0.0) == 100.0
    assert interpolate(0.25) == 150.0
    assert interpolate(1.0) == 300.0


def test_ease_cubic_in_out():
    assert ease_cubic_in_out(0.0) == 0.0
    assert ease_cubic_in_out(0.5) == 0.5
    assert ease_cubic_in_out(1.0) == 1.0
    assert ease_cubic_in_out(0.25) == pytest.approx(0.0625)
    samples = [ease_cubic_in_out(step / 20) for step in range(21)]
    assert samples == sorted(samples)


def test_centroid_emits_no_deprecation_warnings():
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        centroid(box(2.5, 49.5, 6.4, 51.5))
    assert not [warning for warning in caught if issubclass(warning.category, DeprecationWarning)]
