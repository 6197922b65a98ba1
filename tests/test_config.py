from __future__ import annotations

from pathlib import Path

import pytest

from globemap.config import DEFAULT_SETTINGS, GlobeConfig, load_config, merge_settings


def test_defaults():
    cfg = GlobeConfig.from_mapping()
    assert cfg.highlight_color == "#F90"
    assert cfg.land.fill_style == "#CCC"
    assert cfg.land.stroke_width == 0
    assert cfg.borders.stroke_style == "#FFF"
    assert cfg.globe.fill_style is None
    assert cfg.globe.stroke_width == 1.5
    assert cfg.animation.duration_ms == 1250
    assert cfg.animation.resize_debounce_ms == 200
    assert cfg.highlighted_countries == ()
    assert cfg.data is None


def test_merge_settings_is_deep_and_leaves_defaults_alone():
    merged = merge_settings(DEFAULT_SETTINGS, {"land": {"fill_style": "#EEE"}, "highlight_color": "red"})
    assert merged["land"] == {"fill_style": "#EEE", "stroke_style": "#000", "stroke_width": 0}
    assert merged["highlight_color"] == "red"
    assert DEFAULT_SETTINGS["land"]["fill_style"] == "#CCC"


def test_merge_settings_replaces_lists():
    merged = merge_settings({"items": [1, 2]}, {"items": [3]})
    assert merged == {"items": [3]}


def test_highlight_requests_parsed():
    cfg = GlobeConfig.from_mapping(
        {"highlighted_countries": [{"name": "Germany", "color": "#00F"}, {"name": "France"}]}
    )
    assert [(req.name, req.color) for req in cfg.highlighted_countries] == [
        ("Germany", "#00F"),
        ("France", None),
    ]


@pytest.mark.parametrize(
    "raw, message",
    [
        ({"highlighted_countries": "germany"}, "highlighted_countries"),
        ({"highlighted_regions": [{"color": "#F00"}]}, "highlighted_regions[0]"),
        ({"land": {"stroke_width": -1}}, "land.stroke_width"),
        ({"borders": {"stroke_style": ""}}, "borders.stroke_style"),
        ({"animation": {"frame_interval_ms": 0}}, "animation.frame_interval_ms"),
        ({"viewport": {"dpi": "high"}}, "viewport.dpi"),
        ({"highlight_color": None}, "highlight_color"),
    ],
)
def test_invalid_values_raise(raw, message):
    with pytest.raises(ValueError, match=message.replace("[", r"\[").replace("]", r"\]")):
        GlobeConfig.from_mapping(raw)


def test_load_config_resolves_data_paths_relative_to_file(tmp_path: Path):
    cfg_path = tmp_path / "conf" / "globe.yaml"
    cfg_path.parent.mkdir()
    cfg_path.write_text(
        "data:\n"
        "  countries: ../data/world.geojson\n"
        "  regions: regions.yaml\n"
        "globe:\n"
        "  fill_style: '#036'\n",
        encoding="utf-8",
    )
    cfg = load_config(cfg_path)
    assert cfg.source_path == cfg_path.resolve()
    assert cfg.data is not None
    assert cfg.data.countries == cfg_path.parent.resolve() / "../data/world.geojson"
    assert cfg.data.regions == cfg_path.parent.resolve() / "regions.yaml"
    assert cfg.globe.fill_style == "#036"


def test_load_config_empty_file_gives_defaults(tmp_path: Path):
    cfg_path = tmp_path / "globe.yaml"
    cfg_path.write_text("", encoding="utf-8")
    assert load_config(cfg_path).highlight_color == "#F90"


def test_load_config_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")


def test_load_config_requires_mapping(tmp_path: Path):
    cfg_path = tmp_path / "globe.yaml"
    cfg_path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(cfg_path)
