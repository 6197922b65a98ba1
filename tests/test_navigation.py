from __future__ import annotations

import pytest

from globemap.geo import centroid
from globemap.navigation import REGION_ZOOM_PRESETS, MacroRegion


def _target(globe, name, offset_x=0.0, offset_y=0.0):
    lon, lat = centroid(globe.dataset.find_country(name).geometry)
    return (-lon - offset_x, -lat - offset_y)


def test_zoom_on_country_lands_on_centroid_and_scale(globe):
    base = globe.projection.base_scale
    assert globe.zoom_on_country("Germany", 14) is True
    assert globe.navigation.animating
    globe.loop.run_until_idle()

    assert globe.projection.scale == base * 14
    assert globe.projection.rotation == pytest.approx(_target(globe, "germany"))
    assert globe.zoom == 14
    assert globe.navigation.zoomed_country == "germany"
    assert not globe.navigation.animating


def test_zoom_on_country_animates_over_duration(globe):
    start = globe.renderer.frames_rendered
    globe.zoom_on_country("france", 3)
    globe.loop.advance(600)
    mid_rotation = globe.projection.rotation
    assert mid_rotation != (0.0, 0.0)
    assert mid_rotation != pytest.approx(_target(globe, "france"))
    globe.loop.run_until_idle()
    assert globe.loop.now() >= 1250
    assert globe.renderer.frames_rendered - start > 10


def test_zoom_on_country_offsets_are_rotation_degrees(globe):
    globe.zoom_on_country("italy", 2, offset_x=5, offset_y=-3)
    globe.loop.run_until_idle()
    assert globe.projection.rotation == pytest.approx(_target(globe, "italy", 5, -3))


def test_zoom_on_unknown_country_leaves_state_untouched(globe):
    before = (globe.projection.rotation, globe.projection.scale, globe.zoom)
    assert globe.zoom_on_country("atlantis", 4) is False
    assert globe.navigation.session is None
    assert globe.navigation.zoomed_country is None
    assert globe.loop.idle
    assert (globe.projection.rotation, globe.projection.scale, globe.zoom) == before


def test_new_navigation_supersedes_in_flight_one(globe):
    base = globe.projection.base_scale
    globe.zoom_on_country("germany", 14)
    globe.loop.advance(300)
    assert globe.zoom_on_country("france", 3) is True
    globe.loop.run_until_idle()

    assert globe.navigation.generation == 2
    assert globe.projection.rotation == pytest.approx(_target(globe, "france"))
    assert globe.projection.scale == base * 3
    assert globe.navigation.zoomed_country == "france"


def test_auto_zoom_uses_predefined_fill_zoom(globe):
    globe.zoom_on_country("germany")
    globe.loop.run_until_idle()
    assert globe.zoom == 14


def test_auto_zoom_fit_is_never_below_one(globe):
    france = globe.dataset.find_country("france")
    level = globe.navigation.auto_zoom_level(france)
    assert level >= 1.0
    globe.zoom_on_country("france", "auto")
    globe.loop.run_until_idle()
    assert globe.zoom == pytest.approx(level)


def test_center_on_country_keeps_current_zoom(globe):
    globe.set_zoom(3)
    globe.loop.run_until_idle()
    assert globe.center_on_country("spain") is True
    globe.loop.run_until_idle()
    assert globe.zoom == 3
    assert globe.projection.rotation == pytest.approx(_target(globe, "spain"))


def test_set_zoom_keeps_rotation(globe):
    base = globe.projection.base_scale
    globe.zoom_on_country("italy", 2)
    globe.loop.run_until_idle()
    rotation = globe.projection.rotation
    assert globe.set_zoom(5) is True
    globe.loop.run_until_idle()
    assert globe.projection.rotation == rotation
    assert globe.projection.scale == base * 5


def test_set_zoom_rejects_non_numbers_and_same_factor(globe):
    assert globe.set_zoom("large") is False
    assert globe.set_zoom(None) is False
    assert globe.set_zoom(True) is False
    assert globe.set_zoom(1) is False
    assert globe.navigation.session is None


def test_set_zoom_clamps_to_one(globe):
    base = globe.projection.base_scale
    globe.set_zoom(4)
    globe.loop.run_until_idle()
    assert globe.set_zoom(0.25) is True
    globe.loop.run_until_idle()
    assert globe.zoom == 1
    assert globe.projection.scale == base


def test_reset_zoom_restores_base_scale(globe):
    base = globe.projection.base_scale
    globe.zoom_on_country("germany", 14)
    globe.loop.run_until_idle()
    assert globe.reset_zoom() is True
    globe.loop.run_until_idle()
    assert globe.projection.scale == base
    assert globe.zoom == 1


def test_region_shortcut_uses_preset(globe):
    base = globe.projection.base_scale
    preset = REGION_ZOOM_PRESETS[MacroRegion.WESTERN_EUROPE]
    assert globe.zoom_on_western_europe() is True
    globe.loop.run_until_idle()
    assert globe.navigation.zoomed_country == preset.anchor_country
    assert globe.projection.scale == pytest.approx(base * preset.zoom)
    assert globe.projection.rotation == pytest.approx(_target(globe, preset.anchor_country))


def test_region_shortcut_applies_preset_offsets(globe):
    globe.zoom_on_southern_europe()
    globe.loop.run_until_idle()
    assert globe.zoom == 4.4
    assert globe.projection.rotation == pytest.approx(_target(globe, "italy", -8.0, 0.0))


def test_region_shortcut_caller_values_replace_preset(globe):
    base = globe.projection.base_scale
    globe.zoom_on_southern_europe(zoom=2, offset_x=1, offset_y=2)
    globe.loop.run_until_idle()
    assert globe.projection.scale == base * 2
    assert globe.projection.rotation == pytest.approx(_target(globe, "italy", 1.0, 2.0))


def test_region_with_missing_anchor_returns_false(globe):
    assert globe.zoom_on_africa() is False
    assert globe.navigation.session is None


def test_zoom_on_accepts_region_or_country_names(globe):
    assert globe.zoom_on("Europe") is True
    globe.loop.run_until_idle()
    assert globe.navigation.zoomed_country == "germany"
    assert globe.zoom == 2.8
    assert globe.zoom_on("belgium", 6) is True
    globe.loop.run_until_idle()
    assert globe.navigation.zoomed_country == "belgium"


def test_every_region_has_a_shortcut(globe):
    for region in MacroRegion:
        assert region in REGION_ZOOM_PRESETS
        assert callable(getattr(globe, "zoom_on_" + region.value.replace(" ", "_")))


def test_navigation_on_degenerate_viewport_rotates_only(make_globe):
    globe = make_globe(width=0, height=300)
    assert not globe.projection.ready
    assert globe.zoom_on_country("germany", 3) is True
    globe.loop.run_until_idle()
    assert globe.projection.rotation == pytest.approx(_target(globe, "germany"))
    assert globe.zoom == 3
    assert globe.set_zoom(5) is True
    assert globe.navigation.session is None
