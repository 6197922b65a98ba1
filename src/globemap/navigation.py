"""Animated rotate-and-zoom navigation to countries and macro-regions."""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable

from .dataset import GeoDataset
from .geo import centroid, ease_cubic_in_out, interpolate_number, interpolate_rotation
from .models import Country, NavigationSession
from .projection import OrthographicProjection, ProjectionController
from .scheduler import FrameLoop
from .util import normalize_name

_LOGGER = logging.getLogger("globemap.navigation")

AUTO_ZOOM = "auto"
DEFAULT_DURATION_MS = 1250.0

# Raw fits come out systematically too tight.
AUTO_ZOOM_CORRECTION = 0.65

# Hand-tuned fill zooms for countries whose bounding fit is unusable.
PREDEFINED_FILL_ZOOM: dict[str, float] = {
    "australia": 2.5,
    "germany": 14.0,
    "ireland": 20.0,
    "mexico": 3.8,
    "sweden": 8.0,
    "united states": 2.0,
}


class MacroRegion(enum.Enum):
    AFRICA = "africa"
    ANTARCTICA = "antarctica"
    ASIA = "asia"
    AUSTRALIA_AND_NEW_ZEALAND = "australia and new zealand"
    EUROPE = "europe"
    MIDDLE_EAST = "middle east"
    NORTHERN_AFRICA = "northern africa"
    CARIBBEAN = "caribbean"
    CENTRAL_ASIA = "central asia"
    CENTRAL_AMERICA = "central america"
    EASTERN_ASIA = "eastern asia"
    EASTERN_EUROPE = "eastern europe"
    NORTH_AMERICA = "north america"
    NORTHERN_EUROPE = "northern europe"
    SOUTHERN_AFRICA = "southern africa"
    SOUTHERN_ASIA = "southern asia"
    SOUTH_AMERICA = "south america"
    SOUTHERN_EUROPE = "southern europe"
    SOUTHEASTERN_ASIA = "southeastern asia"
    WESTERN_AFRICA = "western africa"
    WESTERN_EUROPE = "western europe"

    @classmethod
    def from_name(cls, name: str) -> MacroRegion | None:
        try:
            return cls(normalize_name(name))
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class RegionZoomPreset:
    anchor_country: str
    zoom: float
    offset_x: float = 0.0
    offset_y: float = 0.0


REGION_ZOOM_PRESETS: dict[MacroRegion, RegionZoomPreset] = {
    MacroRegion.AFRICA: RegionZoomPreset("central african republic", 1.5, 0.0, -2.0),
    MacroRegion.ANTARCTICA: RegionZoomPreset("antarctica", 2.1),
    MacroRegion.ASIA: RegionZoomPreset("india", 1.2),
    MacroRegion.AUSTRALIA_AND_NEW_ZEALAND: RegionZoomPreset("australia", 1.8, 10.0, 0.0),
    MacroRegion.EUROPE: RegionZoomPreset("germany", 2.8),
    MacroRegion.MIDDLE_EAST: RegionZoomPreset("iraq", 2.4),
    MacroRegion.NORTHERN_AFRICA: RegionZoomPreset("niger", 2.4),
    MacroRegion.CARIBBEAN: RegionZoomPreset("cuba", 3.5),
    MacroRegion.CENTRAL_ASIA: RegionZoomPreset("uzbekistan", 3.5),
    MacroRegion.CENTRAL_AMERICA: RegionZoomPreset("honduras", 3.5),
    MacroRegion.EASTERN_ASIA: RegionZoomPreset("china", 2.0),
    MacroRegion.EASTERN_EUROPE: RegionZoomPreset("romania", 5.4),
    MacroRegion.NORTH_AMERICA: RegionZoomPreset("united states", 1.4),
    MacroRegion.NORTHERN_EUROPE: RegionZoomPreset("sweden", 4.4),
    MacroRegion.SOUTHERN_AFRICA: RegionZoomPreset("botswana", 2.4),
    MacroRegion.SOUTHERN_ASIA: RegionZoomPreset("pakistan", 2.4),
    MacroRegion.SOUTH_AMERICA: RegionZoomPreset("bolivia", 1.6, 0.0, -3.5),
    MacroRegion.SOUTHERN_EUROPE: RegionZoomPreset("italy", 4.4, -8.0, 0.0),
    MacroRegion.SOUTHEASTERN_ASIA: RegionZoomPreset("indonesia", 2.0, -2.0, 0.0),
    MacroRegion.WESTERN_AFRICA: RegionZoomPreset("burkina faso", 2.4, 5.0, 0.0),
    MacroRegion.WESTERN_EUROPE: RegionZoomPreset("belgium", 4.4),
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


class NavigationEngine:
    """Drives rotation/scale tweens on one globe's projection.

    Only the most recent session may touch the projection: every frame step
    checks its generation against the engine's and drops out when a newer
    request has superseded it.
    """

    def __init__(
        self,
        dataset: GeoDataset,
        controller: ProjectionController,
        loop: FrameLoop,
        *,
        render: Callable[[], None],
        duration_ms: float = DEFAULT_DURATION_MS,
        easing: Callable[[float], float] = ease_cubic_in_out,
    ) -> None:
        self.dataset = dataset
        self.controller = controller
        self.loop = loop
        self.render = render
        self.duration_ms = float(duration_ms)
        self.easing = easing
        self.zoomed_country: str | None = None
        self.session: NavigationSession | None = None
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def animating(self) -> bool:
        return self.session is not None

    def cancel(self) -> None:
        """Supersede the in-flight session, if any, without starting a new one."""
        if self.session is not None:
            _LOGGER.debug("Navigation session %d cancelled", self.session.generation)
        self._generation += 1
        self.session = None

    def zoom_on(
        self,
        name: str,
        zoom: float | str | None = None,
        offset_x: float | None = None,
        offset_y: float | None = None,
    ) -> bool:
        region = MacroRegion.from_name(name)
        if region is not None:
            return self.zoom_on_region(region, zoom, offset_x, offset_y)
        return self.zoom_on_country(
            name,
            zoom,
            offset_x if offset_x is not None else 0.0,
            offset_y if offset_y is not None else 0.0,
        )

    def zoom_on_region(
        self,
        region: MacroRegion,
        zoom: float | str | None = None,
        offset_x: float | None = None,
        offset_y: float | None = None,
    ) -> bool:
        """Navigate to a region's anchor country; caller values replace the preset ones."""
        preset = REGION_ZOOM_PRESETS[region]
        return self.zoom_on_country(
            preset.anchor_country,
            zoom if zoom is not None else preset.zoom,
            offset_x if offset_x is not None else preset.offset_x,
            offset_y if offset_y is not None else preset.offset_y,
        )

    def center_on_country(self, name: str) -> bool:
        return self.zoom_on(name, self.controller.zoom)

    def zoom_on_country(
        self,
        name: str,
        zoom: float | str | None = AUTO_ZOOM,
        offset_x: float = 0.0,
        offset_y: float = 0.0,
    ) -> bool:
        """Rotate onto a country's centroid and zoom, animated.

        Offsets are in rotation degrees, not pixels. Returns False when the
        country is unknown; the projection is then left untouched.
        """
        country = self.dataset.find_country(name)
        if country is None:
            _LOGGER.warning("No country named '%s' was found, so it cannot be zoomed on.", name)
            return False

        self.zoomed_country = country.name
        if zoom is None or zoom == AUTO_ZOOM:
            zoom = self.auto_zoom_level(country)

        lon, lat = centroid(country.geometry)
        target_rotation = (-lon - float(offset_x), -lat - float(offset_y))

        target_scale: float | None = None
        if _is_number(zoom):
            self.controller.zoom = float(zoom)
            if self.controller.base_scale is not None:
                target_scale = self.controller.base_scale * self.controller.zoom
        else:
            _LOGGER.warning("Ignoring non-numeric zoom %r for '%s'; rotating only.", zoom, name)

        self._start_session(
            target_rotation=target_rotation,
            target_scale=target_scale,
            target_country=country.name,
            offset=(float(offset_x), float(offset_y)),
        )
        return True

    def set_zoom(self, factor: Any) -> bool:
        """Animate scale only to `base_scale * factor`; rotation is held."""
        if not _is_number(factor):
            return False
        factor = max(float(factor), 1.0)
        if factor == self.controller.zoom:
            return False
        self.controller.zoom = factor
        if self.controller.base_scale is None:
            return True
        self._start_session(
            target_rotation=None,
            target_scale=self.controller.base_scale * factor,
            target_country=None,
            offset=(0.0, 0.0),
        )
        return True

    def reset_zoom(self) -> bool:
        return self.set_zoom(1)

    def auto_zoom_level(self, country: Country) -> float:
        """Zoom factor at which `country` fills the viewport, never below 1."""
        preset = PREDEFINED_FILL_ZOOM.get(country.name)
        if preset is not None:
            level = preset
        else:
            viewport = self.controller.viewport
            base_scale = self.controller.base_scale
            if viewport is None or base_scale is None:
                return 1.0
            lon, lat = centroid(country.geometry)
            fitted = OrthographicProjection(rotation=(-lon, -lat))
            try:
                fitted.fit_extent(((0.0, 0.0), (viewport.width, viewport.height)), country.geometry)
            except ValueError as exc:
                _LOGGER.warning("Auto zoom fit failed for '%s': %s", country.name, exc)
                return 1.0
            level = (fitted.scale / base_scale) * AUTO_ZOOM_CORRECTION
        return max(level, 1.0)

    def _start_session(
        self,
        *,
        target_rotation: tuple[float, float] | None,
        target_scale: float | None,
        target_country: str | None,
        offset: tuple[float, float],
    ) -> None:
        if self.session is not None:
            _LOGGER.debug("Navigation session %d superseded", self.session.generation)
        self._generation += 1
        session = NavigationSession(
            generation=self._generation,
            start_time=self.loop.now(),
            start_rotation=self.controller.rotation,
            start_scale=self.controller.scale,
            target_rotation=target_rotation,
            target_scale=target_scale,
            target_country=target_country,
            zoom_factor=self.controller.zoom,
            offset=offset,
        )
        self.session = session

        rotate = (
            interpolate_rotation(session.start_rotation, target_rotation)
            if target_rotation is not None
            else None
        )
        scale = (
            interpolate_number(session.start_scale, target_scale)
            if target_scale is not None
            else None
        )

        def step(now: float) -> None:
            if session.generation != self._generation:
                return
            if self.duration_ms <= 0:
                t = 1.0
            else:
                t = min(max((now - session.start_time) / self.duration_ms, 0.0), 1.0)
            eased = 1.0 if t >= 1.0 else self.easing(t)
            if rotate is not None:
                self.controller.rotate(rotate(eased))
            if scale is not None:
                self.controller.set_scale(scale(eased))
            self.render()
            if t < 1.0:
                self.loop.request_frame(step)
            else:
                self.session = None

        self.loop.request_frame(step)
