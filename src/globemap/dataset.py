"""World-boundary dataset loading and name indexing."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

import yaml

from .geo import is_valid_geometry
from .models import Country, Region
from .util import normalize_name

_LOGGER = logging.getLogger("globemap.dataset")


def _first_existing_column(columns: Iterable[str], candidates: Sequence[str]) -> str | None:
    existing = {col.lower(): col for col in columns}
    for candidate in candidates:
        match = existing.get(candidate.lower())
        if match:
            return match
    return None


@dataclass(frozen=True, slots=True)
class GeoDataset:
    """Immutable boundary data for one globe: countries, land, borders, regions."""

    countries: tuple[Country, ...]
    regions: Mapping[str, Region]
    land: Any
    borders: Any
    _name_index: Mapping[str, int] = field(default_factory=dict, repr=False)

    @classmethod
    def from_countries(
        cls,
        countries: Iterable[Country],
        regions: Iterable[Region] = (),
    ) -> GeoDataset:
        """Derive land outline, border mesh and the name index from country features."""
        ordered = tuple(countries)
        name_index: dict[str, int] = {}
        for idx, country in enumerate(ordered):
            if country.name in name_index:
                _LOGGER.debug("Duplicate country name '%s'; keeping first occurrence.", country.name)
                continue
            name_index[country.name] = idx

        geometries = [country.geometry for country in ordered if is_valid_geometry(country.geometry)]
        unary_union = _require_shapely_unary_union()
        land = unary_union(geometries) if geometries else None
        borders = unary_union([geometry.boundary for geometry in geometries]) if geometries else None

        region_map = {region.name: region for region in regions}
        return cls(
            countries=ordered,
            regions=region_map,
            land=land,
            borders=borders,
            _name_index=name_index,
        )

    def find_country(self, name: str) -> Country | None:
        """Case-insensitive exact name lookup; first match in dataset order."""
        idx = self._name_index.get(normalize_name(name))
        if idx is None:
            return None
        return self.countries[idx]

    def find_region(self, name: str) -> Region | None:
        return self.regions.get(normalize_name(name))

    def unresolved_region_members(self) -> dict[str, tuple[str, ...]]:
        """Region members that do not name a country in this dataset."""
        out: dict[str, tuple[str, ...]] = {}
        for region in self.regions.values():
            missing = tuple(name for name in region.members if name not in self._name_index)
            if missing:
                out[region.name] = missing
        return out


class WorldRepository:
    """File access for country features and the region membership table."""

    ID_COLUMNS = (
        "id",
        "ISO_A3",
        "ISO_A3_EH",
        "ADM0_A3",
        "ISO3",
        "A3",
        "ISO_N3",
        "FID",
    )
    NAME_COLUMNS = (
        "name",
        "NAME",
        "ADMIN",
        "NAME_EN",
        "NAME_LONG",
        "SOVEREIGNT",
        "country",
    )

    def __init__(self, countries_path: Path, regions_path: Path | None = None) -> None:
        self.countries_path = countries_path
        self.regions_path = regions_path

    def load(self) -> GeoDataset:
        countries = self.load_countries()
        regions = self.load_regions()
        dataset = GeoDataset.from_countries(countries, regions)
        _LOGGER.info(
            "Loaded %d countries and %d regions from %s",
            len(dataset.countries),
            len(dataset.regions),
            self.countries_path,
        )
        return dataset

    def load_countries(self) -> list[Country]:
        """Load country polygons via GeoPandas."""
        if not self.countries_path.exists():
            raise FileNotFoundError(f"Countries dataset not found: {self.countries_path}")
        gpd = self._require_geopandas()
        frame = gpd.read_file(self.countries_path)
        if frame.crs is not None and not frame.crs.is_geographic:
            frame = frame.to_crs("EPSG:4326")
        return self.countries_from_frame(frame)

    def countries_from_frame(self, frame: Any) -> list[Country]:
        columns = [str(col) for col in frame.columns]
        name_col = _first_existing_column(columns, self.NAME_COLUMNS)
        if name_col is None:
            raise ValueError(
                "Could not detect country name column. Available columns: " + ", ".join(columns)
            )
        id_col = _first_existing_column(columns, self.ID_COLUMNS)

        countries: list[Country] = []
        skipped = 0
        for idx, row in enumerate(frame.itertuples(index=False)):
            row_dict = row._asdict()
            geometry = row_dict.get("geometry")
            name = row_dict.get(name_col)
            if not is_valid_geometry(geometry) or not isinstance(name, str) or not name.strip():
                skipped += 1
                continue
            raw_id = row_dict.get(id_col) if id_col is not None else None
            if raw_id is None or not str(raw_id).strip() or str(raw_id).strip() in {"-99", "nan"}:
                raw_id = f"feature-{idx}"
            countries.append(Country.create(id=raw_id, name=name, geometry=geometry))
        if skipped:
            _LOGGER.warning("Skipped %d features without geometry or name", skipped)
        return countries

    def load_regions(self) -> list[Region]:
        """Load the region table; YAML or JSON mapping of region -> country names."""
        if self.regions_path is None:
            return []
        if not self.regions_path.exists():
            raise FileNotFoundError(f"Region table not found: {self.regions_path}")
        with self.regions_path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        if raw is None:
            return []
        if not isinstance(raw, dict):
            raise ValueError(f"Expected mapping in {self.regions_path}")
        return [Region.from_entry(name, members) for name, members in raw.items()]

    @staticmethod
    def _require_geopandas() -> Any:
        try:
            import geopandas as gpd
        except ImportError as exc:  # pragma: no cover
            raise RuntimeError("geopandas is required for world dataset loading") from exc
        return gpd


def _require_shapely_unary_union() -> Any:
    try:
        from shapely.ops import unary_union
    except ImportError as exc:  # pragma: no cover
        raise RuntimeError("shapely is required for land and border geometry") from exc
    return unary_union
