"""CLI entrypoint for headless globe rendering."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from .config import GlobeConfig, load_config
from .dataset import GeoDataset
from .globe import GlobeMap
from .navigation import AUTO_ZOOM
from .surface import Holder, MatplotlibSurface
from .util import setup_logging
from .validate import Validator, format_report_lines

LOGGER = logging.getLogger("globemap.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="globemap",
        description="Render an orthographic globe with highlighted countries.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--config", default="globe.yaml", help="Path to YAML config.")
        p.add_argument("--verbose", action="store_true", help="Enable debug logs.")
        p.add_argument("--log-file", default=None, help="Also write logs to this file.")

    def add_view(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--highlight",
            action="append",
            default=[],
            metavar="NAME[=COLOR]",
            help="Country or region to highlight. Can be repeated.",
        )
        p.add_argument("--zoom-on", default=None, help="Country or macro-region to navigate to.")
        p.add_argument(
            "--zoom",
            default=None,
            help="Zoom factor (number or 'auto'). Without --zoom-on, sets the zoom only.",
        )
        p.add_argument("--offset-x", type=float, default=None, help="Rotation offset in degrees.")
        p.add_argument("--offset-y", type=float, default=None, help="Rotation offset in degrees.")

    validate_p = subparsers.add_parser("validate", help="Validate config and world dataset.")
    add_common(validate_p)

    render_p = subparsers.add_parser("render", help="Render the final frame to a PNG.")
    add_common(render_p)
    add_view(render_p)
    render_p.add_argument("--output", default="globe.png", help="PNG output path.")

    animate_p = subparsers.add_parser("animate", help="Render every animation frame to PNGs.")
    add_common(animate_p)
    add_view(animate_p)
    animate_p.add_argument("--frames-dir", default="frames", help="Directory for frame_NNNN.png files.")

    return parser


def _parse_zoom(raw: str | None) -> float | str | None:
    if raw is None:
        return None
    if raw.strip().lower() == AUTO_ZOOM:
        return AUTO_ZOOM
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"--zoom must be a number or '{AUTO_ZOOM}', got '{raw}'") from exc


def _load_dataset(cfg: GlobeConfig) -> GeoDataset | None:
    report, dataset = Validator(cfg).run()
    for line in format_report_lines(report):
        LOGGER.info(line)
    return dataset if report.ok else None


def _build_globe(cfg: GlobeConfig, dataset: GeoDataset) -> tuple[GlobeMap, MatplotlibSurface]:
    surface = MatplotlibSurface(cfg.viewport.width, cfg.viewport.height, dpi=cfg.viewport.dpi)
    holder = Holder(cfg.viewport.width, cfg.viewport.height)
    globe = GlobeMap(dataset, surface, holder, settings=cfg)
    globe.init()
    return globe, surface


def _apply_view(globe: GlobeMap, args: argparse.Namespace) -> None:
    for item in args.highlight:
        name, _, color = str(item).partition("=")
        globe.highlight(name, color.strip() or None)
    zoom = _parse_zoom(args.zoom)
    if args.zoom_on:
        globe.zoom_on(args.zoom_on, zoom, args.offset_x, args.offset_y)
    elif zoom is not None and zoom != AUTO_ZOOM:
        globe.set_zoom(zoom)


def _run_validate(cfg: GlobeConfig) -> int:
    return 0 if _load_dataset(cfg) is not None else 1


def _run_render(cfg: GlobeConfig, args: argparse.Namespace) -> int:
    dataset = _load_dataset(cfg)
    if dataset is None:
        return 1
    globe, surface = _build_globe(cfg, dataset)
    _apply_view(globe, args)
    globe.loop.run_until_idle()
    output = surface.save(Path(args.output))
    LOGGER.info("Globe rendered to %s", output)
    return 0


def _run_animate(cfg: GlobeConfig, args: argparse.Namespace) -> int:
    dataset = _load_dataset(cfg)
    if dataset is None:
        return 1
    globe, surface = _build_globe(cfg, dataset)
    frames_dir = Path(args.frames_dir)
    frames_dir.mkdir(parents=True, exist_ok=True)
    for stale in frames_dir.glob("frame_*.png"):
        stale.unlink()

    written = 0
    surface.save(frames_dir / f"frame_{written:04d}.png")
    written += 1
    _apply_view(globe, args)
    last_frame = globe.renderer.frames_rendered
    while not globe.loop.idle:
        globe.loop.advance(globe.loop.frame_interval_ms)
        if globe.renderer.frames_rendered != last_frame:
            last_frame = globe.renderer.frames_rendered
            surface.save(frames_dir / f"frame_{written:04d}.png")
            written += 1
    LOGGER.info("Wrote %d frames to %s", written, frames_dir)
    return 0


def _dispatch(args: argparse.Namespace) -> int:
    setup_logging(Path(args.log_file) if args.log_file else None, verbose=args.verbose)
    try:
        cfg = load_config(args.config)
    except (FileNotFoundError, ValueError) as exc:
        LOGGER.error("Failed loading config: %s", exc)
        return 1

    command = str(args.command)
    try:
        if command == "validate":
            return _run_validate(cfg)
        if command == "render":
            return _run_render(cfg, args)
        if command == "animate":
            return _run_animate(cfg, args)
    except ValueError as exc:
        LOGGER.error("%s", exc)
        return 1
    raise ValueError(f"Unknown command: {command}")


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    return _dispatch(args)


if __name__ == "__main__":
    raise SystemExit(main())
