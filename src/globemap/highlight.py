"""Highlighted-country state with region fan-out."""

from __future__ import annotations

import logging
from typing import Callable

from .dataset import GeoDataset
from .models import HighlightEntry
from .util import normalize_name

_LOGGER = logging.getLogger("globemap.highlight")


class HighlightStore:
    """Ordered set of highlighted countries, at most one entry per country id.

    Every mutation that changes the set calls `on_change` (the globe's
    render) before returning, unless `render=False` is passed.
    """

    def __init__(
        self,
        dataset: GeoDataset,
        *,
        default_color: str,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self.dataset = dataset
        self.default_color = default_color
        self.on_change = on_change
        self._entries: list[HighlightEntry] = []

    @property
    def entries(self) -> tuple[HighlightEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def highlight(self, name: str, color: str | None = None) -> bool:
        if self.dataset.find_region(name) is not None:
            return self.highlight_region(name, color)
        return self.highlight_country(name, color)

    def unhighlight(self, name: str) -> bool:
        if self.dataset.find_region(name) is not None:
            return self.unhighlight_region(name)
        return self.unhighlight_country(name)

    def highlight_country(self, name: str, color: str | None = None, render: bool = True) -> bool:
        country = self.dataset.find_country(name)
        if country is None:
            _LOGGER.warning("No country named '%s' was found, so it cannot be highlighted.", name)
            return False
        if self._index_of_id(country.id) is not None:
            return False
        self._entries.append(
            HighlightEntry(
                id=country.id,
                name=country.name,
                color=color or self.default_color,
                geometry=country.geometry,
            )
        )
        if render:
            self._notify()
        return True

    def unhighlight_country(self, name: str, render: bool = True) -> bool:
        key = normalize_name(name)
        for idx, entry in enumerate(self._entries):
            if entry.name == key:
                del self._entries[idx]
                if render:
                    self._notify()
                return True
        return False

    def highlight_region(self, name: str, color: str | None = None) -> bool:
        region = self.dataset.find_region(name)
        if region is None:
            _LOGGER.warning("The region '%s' was not found in the region table.", name)
            return False
        changed = False
        for member in region.members:
            changed = self.highlight_country(member, color, render=False) or changed
        self._notify()
        return changed

    def unhighlight_region(self, name: str) -> bool:
        region = self.dataset.find_region(name)
        if region is None:
            _LOGGER.warning("The region '%s' was not found in the region table.", name)
            return False
        changed = False
        for member in region.members:
            changed = self.unhighlight_country(member, render=False) or changed
        self._notify()
        return changed

    def is_highlighted(self, name: str) -> bool:
        """Unknown names count as not highlighted."""
        country = self.dataset.find_country(name)
        if country is None:
            return False
        return self._index_of_id(country.id) is not None

    def color_of(self, name: str) -> str | None:
        country = self.dataset.find_country(name)
        if country is None:
            return None
        idx = self._index_of_id(country.id)
        return self._entries[idx].color if idx is not None else None

    def _index_of_id(self, country_id: str) -> int | None:
        for idx, entry in enumerate(self._entries):
            if entry.id == country_id:
                return idx
        return None

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()
