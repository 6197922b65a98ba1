"""Typed configuration loader for globe settings."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, cast

import yaml

from .models import HighlightRequest


DEFAULT_SETTINGS: dict[str, Any] = {
    "highlighted_countries": [],
    "highlighted_regions": [],
    "highlight_color": "#F90",
    "land": {
        "fill_style": "#CCC",
        "stroke_style": "#000",
        "stroke_width": 0,
    },
    "borders": {
        "stroke_style": "#FFF",
        "stroke_width": 1,
    },
    "globe": {
        "fill_style": None,
        "stroke_style": "#CCC",
        "stroke_width": 1.5,
    },
    "animation": {
        "duration_ms": 1250,
        "frame_interval_ms": 1000.0 / 60.0,
        "resize_debounce_ms": 200,
    },
    "viewport": {
        "width": 800,
        "height": 800,
        "dpi": 100,
    },
}


def merge_settings(defaults: Mapping[str, Any], custom: Mapping[str, Any] | None) -> dict[str, Any]:
    """Recursively merge `custom` over `defaults`; user values win, lists are replaced."""
    merged = copy.deepcopy(dict(defaults))
    if not custom:
        return merged
    for key, value in custom.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_settings(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _mapping(value: Any, field_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"Expected mapping for '{field_name}'")
    return cast(Mapping[str, Any], value)


def _str(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Expected non-empty string for '{field_name}'")
    return value.strip()


def _optional_str(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    return _str(value, field_name)


def _float(value: Any, field_name: str) -> float:
    if isinstance(value, bool):
        raise ValueError(f"Expected float for '{field_name}'")
    if isinstance(value, (int, float)):
        return float(value)
    raise ValueError(f"Expected float for '{field_name}'")


def _non_negative(value: float, field_name: str) -> float:
    if value < 0:
        raise ValueError(f"{field_name} must be >= 0")
    return value


def _highlight_list(value: Any, field_name: str) -> tuple[HighlightRequest, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Expected list for '{field_name}'")
    out: list[HighlightRequest] = []
    for idx, item in enumerate(value):
        try:
            out.append(HighlightRequest.from_mapping(_mapping(item, f"{field_name}[{idx}]")))
        except ValueError as exc:
            raise ValueError(f"Invalid {field_name}[{idx}]: {exc}") from exc
    return tuple(out)


def _path_from_cfg(value: Any, field_name: str, root_dir: Path) -> Path:
    raw = _str(value, field_name)
    p = Path(raw)
    return p if p.is_absolute() else root_dir / p


@dataclass(frozen=True, slots=True)
class LandStyle:
    fill_style: str
    stroke_style: str
    stroke_width: float

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> LandStyle:
        return cls(
            fill_style=_str(raw.get("fill_style"), "land.fill_style"),
            stroke_style=_str(raw.get("stroke_style"), "land.stroke_style"),
            stroke_width=_non_negative(_float(raw.get("stroke_width"), "land.stroke_width"), "land.stroke_width"),
        )


@dataclass(frozen=True, slots=True)
class BorderStyle:
    stroke_style: str
    stroke_width: float

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> BorderStyle:
        return cls(
            stroke_style=_str(raw.get("stroke_style"), "borders.stroke_style"),
            stroke_width=_non_negative(
                _float(raw.get("stroke_width"), "borders.stroke_width"), "borders.stroke_width"
            ),
        )


@dataclass(frozen=True, slots=True)
class GlobeStyle:
    fill_style: str | None
    stroke_style: str
    stroke_width: float

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> GlobeStyle:
        return cls(
            fill_style=_optional_str(raw.get("fill_style"), "globe.fill_style"),
            stroke_style=_str(raw.get("stroke_style"), "globe.stroke_style"),
            stroke_width=_non_negative(_float(raw.get("stroke_width"), "globe.stroke_width"), "globe.stroke_width"),
        )


@dataclass(frozen=True, slots=True)
class AnimationConfig:
    duration_ms: float
    frame_interval_ms: float
    resize_debounce_ms: float

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> AnimationConfig:
        duration_ms = _float(raw.get("duration_ms"), "animation.duration_ms")
        frame_interval_ms = _float(raw.get("frame_interval_ms"), "animation.frame_interval_ms")
        resize_debounce_ms = _float(raw.get("resize_debounce_ms"), "animation.resize_debounce_ms")
        if duration_ms < 0:
            raise ValueError("animation.duration_ms must be >= 0")
        if frame_interval_ms <= 0:
            raise ValueError("animation.frame_interval_ms must be > 0")
        if resize_debounce_ms < 0:
            raise ValueError("animation.resize_debounce_ms must be >= 0")
        return cls(
            duration_ms=duration_ms,
            frame_interval_ms=frame_interval_ms,
            resize_debounce_ms=resize_debounce_ms,
        )


@dataclass(frozen=True, slots=True)
class ViewportConfig:
    """Canvas size used when the globe is hosted headless (CLI)."""

    width: float
    height: float
    dpi: float

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> ViewportConfig:
        dpi = _float(raw.get("dpi"), "viewport.dpi")
        if dpi <= 0:
            raise ValueError("viewport.dpi must be > 0")
        return cls(
            width=_non_negative(_float(raw.get("width"), "viewport.width"), "viewport.width"),
            height=_non_negative(_float(raw.get("height"), "viewport.height"), "viewport.height"),
            dpi=dpi,
        )


@dataclass(frozen=True, slots=True)
class DataConfig:
    countries: Path
    regions: Path | None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], root_dir: Path) -> DataConfig:
        regions_raw = raw.get("regions")
        return cls(
            countries=_path_from_cfg(raw.get("countries"), "data.countries", root_dir),
            regions=(
                _path_from_cfg(regions_raw, "data.regions", root_dir)
                if regions_raw is not None
                else None
            ),
        )


@dataclass(frozen=True, slots=True)
class GlobeConfig:
    highlighted_countries: tuple[HighlightRequest, ...]
    highlighted_regions: tuple[HighlightRequest, ...]
    highlight_color: str
    land: LandStyle
    borders: BorderStyle
    globe: GlobeStyle
    animation: AnimationConfig
    viewport: ViewportConfig
    data: DataConfig | None = None
    source_path: Path | None = None

    @classmethod
    def from_mapping(
        cls,
        raw: Mapping[str, Any] | None = None,
        source_path: Path | None = None,
    ) -> GlobeConfig:
        """Build settings from user values deep-merged over `DEFAULT_SETTINGS`."""
        merged = merge_settings(DEFAULT_SETTINGS, raw)
        root_dir = source_path.parent.resolve() if source_path is not None else Path.cwd()
        data_raw = merged.get("data")
        return cls(
            highlighted_countries=_highlight_list(
                merged.get("highlighted_countries"), "highlighted_countries"
            ),
            highlighted_regions=_highlight_list(merged.get("highlighted_regions"), "highlighted_regions"),
            highlight_color=_str(merged.get("highlight_color"), "highlight_color"),
            land=LandStyle.from_mapping(_mapping(merged.get("land"), "land")),
            borders=BorderStyle.from_mapping(_mapping(merged.get("borders"), "borders")),
            globe=GlobeStyle.from_mapping(_mapping(merged.get("globe"), "globe")),
            animation=AnimationConfig.from_mapping(_mapping(merged.get("animation"), "animation")),
            viewport=ViewportConfig.from_mapping(_mapping(merged.get("viewport"), "viewport")),
            data=(
                DataConfig.from_mapping(_mapping(data_raw, "data"), root_dir)
                if data_raw is not None
                else None
            ),
            source_path=source_path.resolve() if source_path is not None else None,
        )


def load_config(path: str | Path) -> GlobeConfig:
    """Load and validate a YAML settings file into typed settings."""
    cfg_path = Path(path).resolve()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ValueError("Top-level config must be a YAML mapping")
    return GlobeConfig.from_mapping(cast(Mapping[str, Any], raw), cfg_path)
