from __future__ import annotations

from typing import Callable

import pytest
from shapely.geometry import box

from globemap.config import GlobeConfig
from globemap.dataset import GeoDataset
from globemap.globe import GlobeMap
from globemap.models import Country, Region
from globemap.scheduler import FrameLoop
from globemap.surface import Holder, RecordingSurface

# Coarse lon/lat boxes; good enough to exercise every code path.
COUNTRY_BOXES = {
    "Germany": ("DEU", (6.0, 47.0, 15.0, 55.0)),
    "France": ("FRA", (-5.0, 42.0, 8.0, 51.0)),
    "Belgium": ("BEL", (2.5, 49.5, 6.4, 51.5)),
    "Italy": ("ITA", (7.0, 37.0, 18.0, 47.0)),
    "Spain": ("ESP", (-9.0, 36.0, 3.0, 43.5)),
}


@pytest.fixture
def countries() -> list[Country]:
    return [
        Country.create(id=iso, name=name, geometry=box(*bounds))
        for name, (iso, bounds) in COUNTRY_BOXES.items()
    ]


@pytest.fixture
def dataset(countries: list[Country]) -> GeoDataset:
    regions = [
        Region.from_entry("Western Europe", ["France", "Germany", "Belgium"]),
        Region.from_entry("Southern Europe", ["Italy", "Spain", "Portugal"]),
    ]
    return GeoDataset.from_countries(countries, regions)


@pytest.fixture
def make_globe(dataset: GeoDataset) -> Callable[..., GlobeMap]:
    def factory(
        width: float = 400.0,
        height: float = 300.0,
        settings: GlobeConfig | None = None,
        init: bool = True,
    ) -> GlobeMap:
        globe = GlobeMap(
            dataset,
            RecordingSurface(),
            Holder(width, height),
            settings=settings,
            loop=FrameLoop(),
        )
        if init:
            globe.init()
        return globe

    return factory


@pytest.fixture
def globe(make_globe: Callable[..., GlobeMap]) -> GlobeMap:
    return make_globe()
