"""Validation of settings and the world dataset before a globe is built."""

from __future__ import annotations

from typing import Sequence

from .config import GlobeConfig
from .dataset import GeoDataset, WorldRepository
from .models import DatasetReport
from .navigation import PREDEFINED_FILL_ZOOM, REGION_ZOOM_PRESETS
from .util import format_name_list


class Validator:
    """Checks the configured dataset against everything the globe looks up by name."""

    def __init__(self, cfg: GlobeConfig) -> None:
        self.cfg = cfg

    def run(self) -> tuple[DatasetReport, GeoDataset | None]:
        report = DatasetReport()
        dataset = self._load_dataset(report)
        if dataset is None:
            return report, None
        self._validate_regions(report, dataset)
        self._validate_navigation_anchors(report, dataset)
        self._validate_configured_highlights(report, dataset)
        return report, dataset

    def _load_dataset(self, report: DatasetReport) -> GeoDataset | None:
        if self.cfg.data is None:
            report.add_error("No 'data' section configured; cannot locate the world dataset.")
            return None
        repo = WorldRepository(self.cfg.data.countries, self.cfg.data.regions)
        try:
            dataset = repo.load()
        except Exception as exc:
            report.add_error(f"Failed loading world dataset: {exc}")
            return None
        if not dataset.countries:
            report.add_error(f"World dataset has no usable country features: {self.cfg.data.countries}")
            return None
        report.add_info(f"Loaded {len(dataset.countries)} countries from {self.cfg.data.countries}")
        report.add_info(f"Loaded {len(dataset.regions)} regions")

        names = [country.name for country in dataset.countries]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            report.add_warning(
                "Duplicate country names (first occurrence wins): " + format_name_list(duplicates)
            )
        return dataset

    def _validate_regions(self, report: DatasetReport, dataset: GeoDataset) -> None:
        for region, missing in sorted(dataset.unresolved_region_members().items()):
            report.add_warning(
                f"Region '{region}' lists unknown countries: " + format_name_list(list(missing))
            )

    def _validate_navigation_anchors(self, report: DatasetReport, dataset: GeoDataset) -> None:
        missing_anchors = sorted(
            {
                preset.anchor_country
                for preset in REGION_ZOOM_PRESETS.values()
                if dataset.find_country(preset.anchor_country) is None
            }
        )
        if missing_anchors:
            report.add_warning(
                "Region zoom anchors missing from dataset: " + format_name_list(missing_anchors)
            )
        missing_fill = sorted(name for name in PREDEFINED_FILL_ZOOM if dataset.find_country(name) is None)
        if missing_fill:
            report.add_info("Predefined fill zooms without a country: " + format_name_list(missing_fill))

    def _validate_configured_highlights(self, report: DatasetReport, dataset: GeoDataset) -> None:
        for request in self.cfg.highlighted_countries:
            if dataset.find_country(request.name) is None:
                report.add_warning(f"highlighted_countries names unknown country '{request.name}'")
        for request in self.cfg.highlighted_regions:
            if dataset.find_region(request.name) is None:
                report.add_warning(f"highlighted_regions names unknown region '{request.name}'")


def format_report_lines(report: DatasetReport) -> Sequence[str]:
    lines: list[str] = []
    lines.extend(f"[INFO] {msg}" for msg in report.infos)
    lines.extend(f"[WARN] {msg}" for msg in report.warnings)
    lines.extend(f"[ERROR] {msg}" for msg in report.errors)
    if report.ok:
        lines.append("[OK] Dataset validation completed with no errors.")
    return lines
