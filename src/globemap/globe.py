"""Public globe widget: highlight, navigate and render one globe instance.

All names of regions and countries are handled in lowercase internally.
"""

from __future__ import annotations

import logging
from typing import Any

from .config import GlobeConfig
from .dataset import GeoDataset
from .highlight import HighlightStore
from .navigation import AUTO_ZOOM, MacroRegion, NavigationEngine
from .projection import ProjectionController
from .renderer import Renderer
from .scheduler import FrameLoop
from .surface import DrawingSurface, Holder
from .viewport import ViewportController

_LOGGER = logging.getLogger("globemap.globe")


class GlobeMap:
    """One rotatable globe bound to one drawing surface.

    Every instance owns its projection state and highlight set; nothing is
    shared between globes.
    """

    def __init__(
        self,
        dataset: GeoDataset,
        surface: DrawingSurface,
        holder: Holder,
        *,
        settings: GlobeConfig | None = None,
        loop: FrameLoop | None = None,
    ) -> None:
        self.settings = settings if settings is not None else GlobeConfig.from_mapping()
        self.dataset = dataset
        self.surface = surface
        self.holder = holder
        self.loop = loop if loop is not None else FrameLoop(self.settings.animation.frame_interval_ms)
        self.initialized = False

        self.projection = ProjectionController()
        self.highlights = HighlightStore(
            dataset,
            default_color=self.settings.highlight_color,
            on_change=self.render,
        )
        self.renderer = Renderer(
            dataset=dataset,
            controller=self.projection,
            highlights=self.highlights,
            surface=surface,
            settings=self.settings,
        )
        self.navigation = NavigationEngine(
            dataset,
            self.projection,
            self.loop,
            render=self.render,
            duration_ms=self.settings.animation.duration_ms,
        )
        self.viewport = ViewportController(
            holder=holder,
            surface=surface,
            controller=self.projection,
            navigation=self.navigation,
            dataset=dataset,
            loop=self.loop,
            render=self.render,
            debounce_ms=self.settings.animation.resize_debounce_ms,
        )

        for request in self.settings.highlighted_countries:
            self.highlight_country(request.name, request.color)
        for request in self.settings.highlighted_regions:
            self.highlight_region(request.name, request.color)

    def init(self) -> None:
        self.viewport.setup()
        self.render()
        self.holder.add_resize_listener(self.viewport.notify_resize)
        self.initialized = True
        _LOGGER.debug("Globe initialized with %d highlighted countries", len(self.highlights))

    def render(self) -> bool:
        return self.renderer.render()

    @property
    def zoom(self) -> float:
        return self.projection.zoom

    # Highlighting

    def highlight(self, name: str, color: str | None = None) -> bool:
        return self.highlights.highlight(name, color)

    def unhighlight(self, name: str) -> bool:
        return self.highlights.unhighlight(name)

    def highlight_country(self, name: str, color: str | None = None, render: bool = True) -> bool:
        return self.highlights.highlight_country(name, color, render=render)

    def unhighlight_country(self, name: str, render: bool = True) -> bool:
        return self.highlights.unhighlight_country(name, render=render)

    def highlight_region(self, name: str, color: str | None = None) -> bool:
        return self.highlights.highlight_region(name, color)

    def unhighlight_region(self, name: str) -> bool:
        return self.highlights.unhighlight_region(name)

    def is_country_highlighted(self, name: str) -> bool:
        return self.highlights.is_highlighted(name)

    # Navigation

    def center_on_country(self, name: str) -> bool:
        return self.navigation.center_on_country(name)

    def zoom_on(
        self,
        name: str,
        zoom: float | str | None = None,
        offset_x: float | None = None,
        offset_y: float | None = None,
    ) -> bool:
        return self.navigation.zoom_on(name, zoom, offset_x, offset_y)

    def zoom_on_country(
        self,
        name: str,
        zoom: float | str | None = AUTO_ZOOM,
        offset_x: float = 0.0,
        offset_y: float = 0.0,
    ) -> bool:
        return self.navigation.zoom_on_country(name, zoom, offset_x, offset_y)

    def set_zoom(self, factor: Any) -> bool:
        return self.navigation.set_zoom(factor)

    def reset_zoom(self) -> bool:
        return self.navigation.reset_zoom()

    def resize(self) -> None:
        self.viewport.resize()

    def zoom_on_region(
        self,
        region: MacroRegion,
        zoom: float | None = None,
        offset_x: float | None = None,
        offset_y: float | None = None,
    ) -> bool:
        return self.navigation.zoom_on_region(region, zoom, offset_x, offset_y)

    def zoom_on_africa(self, zoom: float | None = None, offset_x: float | None = None, offset_y: float | None = None) -> bool:
        return self.zoom_on_region(MacroRegion.AFRICA, zoom, offset_x, offset_y)

    def zoom_on_antarctica(self, zoom: float | None = None, offset_x: float | None = None, offset_y: float | None = None) -> bool:
        return self.zoom_on_region(MacroRegion.ANTARCTICA, zoom, offset_x, offset_y)

    def zoom_on_asia(self, zoom: float | None = None, offset_x: float | None = None, offset_y: float | None = None) -> bool:
        return self.zoom_on_region(MacroRegion.ASIA, zoom, offset_x, offset_y)

    def zoom_on_australia_and_new_zealand(
        self, zoom: float | None = None, offset_x: float | None = None, offset_y: float | None = None
    ) -> bool:
        return self.zoom_on_region(MacroRegion.AUSTRALIA_AND_NEW_ZEALAND, zoom, offset_x, offset_y)

    def zoom_on_europe(self, zoom: float | None = None, offset_x: float | None = None, offset_y: float | None = None) -> bool:
        return self.zoom_on_region(MacroRegion.EUROPE, zoom, offset_x, offset_y)

    def zoom_on_middle_east(self, zoom: float | None = None, offset_x: float | None = None, offset_y: float | None = None) -> bool:
        return self.zoom_on_region(MacroRegion.MIDDLE_EAST, zoom, offset_x, offset_y)

    def zoom_on_northern_africa(
        self, zoom: float | None = None, offset_x: float | None = None, offset_y: float | None = None
    ) -> bool:
        return self.zoom_on_region(MacroRegion.NORTHERN_AFRICA, zoom, offset_x, offset_y)

    def zoom_on_caribbean(self, zoom: float | None = None, offset_x: float | None = None, offset_y: float | None = None) -> bool:
        return self.zoom_on_region(MacroRegion.CARIBBEAN, zoom, offset_x, offset_y)

    def zoom_on_central_asia(self, zoom: float | None = None, offset_x: float | None = None, offset_y: float | None = None) -> bool:
        return self.zoom_on_region(MacroRegion.CENTRAL_ASIA, zoom, offset_x, offset_y)

    def zoom_on_central_america(
        self, zoom: float | None = None, offset_x: float | None = None, offset_y: float | None = None
    ) -> bool:
        return self.zoom_on_region(MacroRegion.CENTRAL_AMERICA, zoom, offset_x, offset_y)

    def zoom_on_eastern_asia(self, zoom: float | None = None, offset_x: float | None = None, offset_y: float | None = None) -> bool:
        return self.zoom_on_region(MacroRegion.EASTERN_ASIA, zoom, offset_x, offset_y)

    def zoom_on_eastern_europe(
        self, zoom: float | None = None, offset_x: float | None = None, offset_y: float | None = None
    ) -> bool:
        return self.zoom_on_region(MacroRegion.EASTERN_EUROPE, zoom, offset_x, offset_y)

    def zoom_on_north_america(
        self, zoom: float | None = None, offset_x: float | None = None, offset_y: float | None = None
    ) -> bool:
        return self.zoom_on_region(MacroRegion.NORTH_AMERICA, zoom, offset_x, offset_y)

    def zoom_on_northern_europe(
        self, zoom: float | None = None, offset_x: float | None = None, offset_y: float | None = None
    ) -> bool:
        return self.zoom_on_region(MacroRegion.NORTHERN_EUROPE, zoom, offset_x, offset_y)

    def zoom_on_southern_africa(
        self, zoom: float | None = None, offset_x: float | None = None, offset_y: float | None = None
    ) -> bool:
        return self.zoom_on_region(MacroRegion.SOUTHERN_AFRICA, zoom, offset_x, offset_y)

    def zoom_on_southern_asia(
        self, zoom: float | None = None, offset_x: float | None = None, offset_y: float | None = None
    ) -> bool:
        return self.zoom_on_region(MacroRegion.SOUTHERN_ASIA, zoom, offset_x, offset_y)

    def zoom_on_south_america(
        self, zoom: float | None = None, offset_x: float | None = None, offset_y: float | None = None
    ) -> bool:
        return self.zoom_on_region(MacroRegion.SOUTH_AMERICA, zoom, offset_x, offset_y)

    def zoom_on_southern_europe(
        self, zoom: float | None = None, offset_x: float | None = None, offset_y: float | None = None
    ) -> bool:
        return self.zoom_on_region(MacroRegion.SOUTHERN_EUROPE, zoom, offset_x, offset_y)

    def zoom_on_southeastern_asia(
        self, zoom: float | None = None, offset_x: float | None = None, offset_y: float | None = None
    ) -> bool:
        return self.zoom_on_region(MacroRegion.SOUTHEASTERN_ASIA, zoom, offset_x, offset_y)

    def zoom_on_western_africa(
        self, zoom: float | None = None, offset_x: float | None = None, offset_y: float | None = None
    ) -> bool:
        return self.zoom_on_region(MacroRegion.WESTERN_AFRICA, zoom, offset_x, offset_y)

    def zoom_on_western_europe(
        self, zoom: float | None = None, offset_x: float | None = None, offset_y: float | None = None
    ) -> bool:
        return self.zoom_on_region(MacroRegion.WESTERN_EUROPE, zoom, offset_x, offset_y)
