"""Domain models shared across globe modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .util import normalize_name


def _require_str(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Expected non-empty string for '{field_name}'")
    return value.strip()


@dataclass(frozen=True, slots=True)
class Country:
    """One country feature from the world-boundary dataset."""

    id: str
    name: str
    geometry: Any

    @classmethod
    def create(cls, *, id: Any, name: Any, geometry: Any) -> Country:
        if id is None or not str(id).strip():
            raise ValueError("Expected non-empty country id")
        return cls(
            id=str(id).strip(),
            name=normalize_name(_require_str(name, "name")),
            geometry=geometry,
        )


@dataclass(frozen=True, slots=True)
class Region:
    """Named aggregate of countries, members kept in table order."""

    name: str
    members: tuple[str, ...]

    @classmethod
    def from_entry(cls, name: Any, members: Any) -> Region:
        region_name = normalize_name(_require_str(name, "region"))
        if not isinstance(members, list):
            raise ValueError(f"Expected list of country names for region '{region_name}'")
        out: list[str] = []
        for idx, item in enumerate(members):
            member = normalize_name(_require_str(item, f"{region_name}[{idx}]"))
            if member not in out:
                out.append(member)
        return cls(name=region_name, members=tuple(out))


@dataclass(frozen=True, slots=True)
class HighlightEntry:
    id: str
    name: str
    color: str
    geometry: Any


@dataclass(frozen=True, slots=True)
class Viewport:
    """Host surface size in device pixels."""

    width: float
    height: float

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(slots=True)
class ProjectionState:
    """Mutable view state of one globe. Never shared between globes."""

    rotation: tuple[float, float] = (0.0, 0.0)
    scale: float = 0.0
    translate: tuple[float, float] = (0.0, 0.0)
    viewport_fit: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True, slots=True)
class NavigationSession:
    """One in-flight animated navigation.

    `generation` identifies the session; a step whose generation no longer
    matches the engine's current one belongs to a superseded session.
    """

    generation: int
    start_time: float
    start_rotation: tuple[float, float]
    start_scale: float
    target_rotation: tuple[float, float] | None = None
    target_scale: float | None = None
    target_country: str | None = None
    zoom_factor: float | None = None
    offset: tuple[float, float] = (0.0, 0.0)


@dataclass(frozen=True, slots=True)
class HighlightRequest:
    """`{name, color}` pair from `highlighted_countries` / `highlighted_regions`."""

    name: str
    color: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> HighlightRequest:
        name = _require_str(data.get("name"), "name")
        color_raw = data.get("color")
        color = _require_str(color_raw, "color") if color_raw is not None else None
        return cls(name=name, color=color)


@dataclass(slots=True)
class DatasetReport:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    infos: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)

    def add_info(self, msg: str) -> None:
        self.infos.append(msg)
