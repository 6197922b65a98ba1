from __future__ import annotations

import math

import pytest
from shapely.geometry import LineString, MultiPolygon, box

from globemap.geo import SPHERE
from globemap.models import Viewport
from globemap.projection import OrthographicProjection, ProjectionController


@pytest.fixture
def projection() -> OrthographicProjection:
    return OrthographicProjection().fit_extent(((0.0, 0.0), (400.0, 300.0)), SPHERE)


def test_fit_extent_sphere(projection):
    assert projection.scale == 150.0
    assert projection.translate == (200.0, 150.0)


def test_fit_extent_with_offset_extent():
    fitted = OrthographicProjection().fit_extent(((-100.0, -50.0), (300.0, 350.0)), SPHERE)
    assert fitted.scale == 200.0
    assert fitted.translate == (100.0, 150.0)


def test_fit_extent_rejects_empty_extent():
    with pytest.raises(ValueError):
        OrthographicProjection().fit_extent(((0.0, 0.0), (0.0, 100.0)), SPHERE)


def test_fit_extent_rejects_invisible_geometry():
    with pytest.raises(ValueError):
        OrthographicProjection().fit_extent(((0.0, 0.0), (100.0, 100.0)), box(170, -5, 175, 5))


def test_project_center_and_limbs(projection):
    assert projection.project(0, 0) == pytest.approx((200.0, 150.0))
    assert projection.project(90, 0) == pytest.approx((350.0, 150.0))
    assert projection.project(0, 90) == pytest.approx((200.0, 0.0))
    assert projection.project(180, 0) is None
    assert projection.project(120, 10) is None


def test_rotation_brings_point_to_center(projection):
    projection.rotation = (-10.0, -50.0)
    assert projection.project(10, 50) == pytest.approx((200.0, 150.0))


def test_visible_polygon_path_is_unclipped(projection):
    path = projection.path(box(-10, -10, 10, 10))
    assert len(path.segments) == 1
    assert path.closed == (True,)
    assert len(path.segments[0]) == 4


def test_far_side_polygon_has_empty_path(projection):
    assert projection.path(box(150, -10, 170, 10)).is_empty


def test_polygon_clipped_at_horizon(projection):
    path = projection.path(box(60, -20, 120, 20))
    assert len(path.segments) == 1
    xs = [x for x, _ in path.segments[0]]
    assert max(xs) == pytest.approx(350.0)
    assert min(xs) == pytest.approx(200.0 + 150.0 * math.cos(math.radians(20)) * math.sin(math.radians(60)))
    for x, y in path.segments[0]:
        assert (x - 200.0) ** 2 + (y - 150.0) ** 2 <= 150.0**2 + 1e-6


def test_multipolygon_yields_one_ring_per_visible_part(projection):
    geometry = MultiPolygon([box(0, 0, 5, 5), box(20, 20, 25, 25), box(160, 0, 170, 5)])
    path = projection.path(geometry)
    assert len(path.segments) == 2


def test_line_clipped_at_horizon(projection):
    path = projection.path(LineString([(0, 0), (170, 0)]))
    assert path.closed == (False,)
    start, end = path.segments[0][0], path.segments[0][-1]
    assert start == pytest.approx((200.0, 150.0))
    assert end == pytest.approx((350.0, 150.0))


def test_sphere_path_is_circle(projection):
    path = projection.path(SPHERE)
    assert path.closed == (True,)
    for x, y in path.segments[0]:
        assert (x - 200.0) ** 2 + (y - 150.0) ** 2 == pytest.approx(150.0**2)


def test_controller_configure_caches_base_scale_and_keeps_rotation():
    controller = ProjectionController()
    controller.rotate((20.0, -30.0))
    assert controller.configure(Viewport(600, 400)) is True
    assert controller.base_scale == 200.0
    assert controller.scale == 200.0
    assert controller.rotation == (20.0, -30.0)
    assert controller.state.viewport_fit == (0.0, 0.0, 600.0, 400.0)


def test_controller_configure_applies_zoom():
    controller = ProjectionController()
    controller.zoom = 3
    controller.configure(Viewport(600, 400))
    assert controller.base_scale == 200.0
    assert controller.scale == 600.0
    assert controller.state.translate == pytest.approx((300.0, 200.0))


def test_controller_degenerate_viewport():
    controller = ProjectionController()
    assert controller.configure(Viewport(0, 400)) is False
    assert controller.base_scale is None
    assert not controller.ready


def test_controller_zoom_is_clamped():
    controller = ProjectionController()
    controller.zoom = 0.2
    assert controller.zoom == 1.0
