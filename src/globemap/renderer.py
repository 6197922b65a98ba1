"""Per-frame globe rendering into a drawing surface."""

from __future__ import annotations

import logging
from typing import Any

from .config import GlobeConfig
from .dataset import GeoDataset
from .geo import SPHERE, is_valid_geometry
from .highlight import HighlightStore
from .projection import ProjectionController
from .surface import DrawingSurface

_LOGGER = logging.getLogger("globemap.renderer")


class Renderer:
    """Paints sphere, land, highlights and borders, in that order.

    Highlights sit above land and below the border mesh; later highlights
    cover earlier overlapping ones.
    """

    def __init__(
        self,
        *,
        dataset: GeoDataset,
        controller: ProjectionController,
        highlights: HighlightStore,
        surface: DrawingSurface,
        settings: GlobeConfig,
    ) -> None:
        self.dataset = dataset
        self.controller = controller
        self.highlights = highlights
        self.surface = surface
        self.settings = settings
        self.frames_rendered = 0

    def render(self) -> bool:
        if not self.controller.ready:
            _LOGGER.debug("Skipping render: projection is not configured for a drawable viewport.")
            return False

        surface = self.surface
        projection = self.controller.projection
        surface.clear()

        globe = self.settings.globe
        surface.begin_path()
        projection.path(SPHERE).trace(surface)
        surface.stroke(globe.stroke_style, globe.stroke_width)
        if globe.fill_style is not None:
            surface.fill(globe.fill_style)

        land = self.settings.land
        if is_valid_geometry(self.dataset.land):
            surface.begin_path()
            projection.path(self.dataset.land).trace(surface)
            surface.fill(land.fill_style)
            if land.stroke_width > 0:
                surface.stroke(land.stroke_style, land.stroke_width)

        for entry in self.highlights.entries:
            self._fill_geometry(projection, entry.geometry, entry.color)

        borders = self.settings.borders
        if is_valid_geometry(self.dataset.borders):
            surface.begin_path()
            projection.path(self.dataset.borders).trace(surface)
            surface.stroke(borders.stroke_style, borders.stroke_width)

        self.frames_rendered += 1
        return True

    def _fill_geometry(self, projection: Any, geometry: Any, color: str) -> None:
        self.surface.begin_path()
        projection.path(geometry).trace(self.surface)
        self.surface.fill(color)
