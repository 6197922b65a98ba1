"""Host resize handling for one globe."""

from __future__ import annotations

import logging
from typing import Callable

from .dataset import GeoDataset
from .geo import centroid
from .models import Viewport
from .navigation import NavigationEngine
from .projection import ProjectionController
from .scheduler import Debouncer, FrameLoop
from .surface import DrawingSurface, Holder

_LOGGER = logging.getLogger("globemap.viewport")


class ViewportController:
    def __init__(
        self,
        *,
        holder: Holder,
        surface: DrawingSurface,
        controller: ProjectionController,
        navigation: NavigationEngine,
        dataset: GeoDataset,
        loop: FrameLoop,
        render: Callable[[], None],
        debounce_ms: float = 200.0,
    ) -> None:
        self.holder = holder
        self.surface = surface
        self.controller = controller
        self.navigation = navigation
        self.dataset = dataset
        self.render = render
        self.resize_count = 0
        self.viewport: Viewport | None = None
        self._debounced_resize = Debouncer(loop, debounce_ms, self.resize)

    def notify_resize(self) -> None:
        """Resize-event entry point; bursts collapse into one `resize`."""
        self._debounced_resize()

    def setup(self) -> bool:
        """Size the surface to the holder and fit the projection to it."""
        viewport = self.holder.bounding_box()
        self.viewport = viewport
        self.surface.resize(viewport.width, viewport.height)
        return self.controller.configure(viewport)

    def resize(self) -> None:
        """Refit to the holder and snap back onto the zoomed country, without animating."""
        self.resize_count += 1
        self.navigation.cancel()
        configured = self.setup()
        _LOGGER.debug("Resized to %.0fx%.0f", self.viewport.width, self.viewport.height)

        zoomed = self.navigation.zoomed_country
        if zoomed is not None:
            country = self.dataset.find_country(zoomed)
            if country is not None:
                lon, lat = centroid(country.geometry)
                self.controller.rotate((-lon, -lat))
                if configured and self.controller.base_scale is not None:
                    self.controller.set_scale(self.controller.base_scale * self.controller.zoom)

        self.render()
