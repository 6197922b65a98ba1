"""Orthographic projection, horizon clipping and the per-globe projection controller."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np

from .geo import SPHERE, iter_lines, iter_polygons, to_unit_vectors
from .models import ProjectionState, Viewport

_LOGGER = logging.getLogger("globemap.projection")

_Point = tuple[float, float]
_Extent = tuple[_Point, _Point]

# Angular step used to close clipped rings along the horizon.
_HORIZON_ARC_STEP = math.radians(4.0)
_SPHERE_SEGMENTS = 128


@dataclass(frozen=True, slots=True)
class ProjectedPath:
    """Screen-space subpaths ready to be traced into a drawing surface."""

    segments: tuple[tuple[_Point, ...], ...]
    closed: tuple[bool, ...]

    @property
    def is_empty(self) -> bool:
        return not self.segments

    def trace(self, surface: Any) -> None:
        for points, closed in zip(self.segments, self.closed):
            if len(points) < 2:
                continue
            surface.move_to(*points[0])
            for x, y in points[1:]:
                surface.line_to(x, y)
            if closed:
                surface.close_path()


class OrthographicProjection:
    """View of the sphere from infinite distance.

    `rotation` follows the (λ, φ) convention where rotating by the negated
    coordinates of a point brings that point to the centre of the disc.
    """

    def __init__(
        self,
        *,
        rotation: Sequence[float] = (0.0, 0.0),
        scale: float = 1.0,
        translate: Sequence[float] = (0.0, 0.0),
    ) -> None:
        self.rotation = (float(rotation[0]), float(rotation[1]))
        self.scale = float(scale)
        self.translate = (float(translate[0]), float(translate[1]))

    @classmethod
    def from_state(cls, state: ProjectionState) -> OrthographicProjection:
        return cls(rotation=state.rotation, scale=state.scale, translate=state.translate)

    def project(self, lon: float, lat: float) -> _Point | None:
        """Screen position of one point, or None when it lies beyond the horizon."""
        vectors = self._rotate(np.array([float(lon)]), np.array([float(lat)]))
        x, y, z = vectors[0].tolist()
        if x < 0.0:
            return None
        return self._to_screen(y, z)

    def path(self, geometry: Any) -> ProjectedPath:
        segments: list[tuple[_Point, ...]] = []
        closed: list[bool] = []
        for points, is_closed in self._unit_segments(geometry):
            segments.append(tuple(self._to_screen(u, v) for u, v in points))
            closed.append(is_closed)
        return ProjectedPath(segments=tuple(segments), closed=tuple(closed))

    def fit_extent(self, extent: _Extent, geometry: Any) -> OrthographicProjection:
        """Set scale and translate so the visible geometry fills `extent`.

        Raises ValueError when the extent has no area or nothing of the
        geometry is visible from the current rotation.
        """
        (x0, y0), (x1, y1) = extent
        width = float(x1) - float(x0)
        height = float(y1) - float(y0)
        if width <= 0 or height <= 0:
            raise ValueError(f"Cannot fit projection into empty extent {extent}")

        bounds = self._unit_bounds(geometry)
        if bounds is None:
            raise ValueError("Geometry has no visible extent from the current rotation")
        bx0, by0, bx1, by1 = bounds
        span_x = bx1 - bx0
        span_y = by1 - by0
        candidates = [dim / span for dim, span in ((width, span_x), (height, span_y)) if span > 1e-12]
        if not candidates:
            raise ValueError("Geometry collapses to a single point; cannot fit")
        k = min(candidates)
        self.scale = k
        self.translate = (
            float(x0) + (width - k * (bx1 + bx0)) / 2.0,
            float(y0) + (height - k * (by1 + by0)) / 2.0,
        )
        return self

    def _unit_bounds(self, geometry: Any) -> tuple[float, float, float, float] | None:
        if geometry is SPHERE:
            return (-1.0, -1.0, 1.0, 1.0)
        xs: list[float] = []
        ys: list[float] = []
        for points, _ in self._unit_segments(geometry):
            for u, v in points:
                xs.append(u)
                ys.append(-v)
        if not xs:
            return None
        return (min(xs), min(ys), max(xs), max(ys))

    def _to_screen(self, u: float, v: float) -> _Point:
        tx, ty = self.translate
        return (tx + self.scale * u, ty - self.scale * v)

    def _rotate(self, lon: np.ndarray, lat: np.ndarray) -> np.ndarray:
        """Rotate lon/lat arrays; column 0 > 0 marks the visible hemisphere."""
        d_lambda, d_phi = self.rotation
        vectors = to_unit_vectors(lon + d_lambda, lat)
        cos_phi = math.cos(math.radians(d_phi))
        sin_phi = math.sin(math.radians(d_phi))
        x = vectors[:, 0] * cos_phi - vectors[:, 2] * sin_phi
        z = vectors[:, 2] * cos_phi + vectors[:, 0] * sin_phi
        return np.column_stack((x, vectors[:, 1], z))

    def _unit_segments(self, geometry: Any) -> list[tuple[list[_Point], bool]]:
        if geometry is SPHERE:
            return [(_circle_points(_SPHERE_SEGMENTS), True)]

        out: list[tuple[list[_Point], bool]] = []
        for polygon in iter_polygons(geometry):
            for ring in (polygon.exterior, *polygon.interiors):
                coords = np.asarray(ring.coords, dtype=float)
                if len(coords) < 3:
                    continue
                clipped = _clip_ring(self._rotate(coords[:, 0], coords[:, 1]))
                if len(clipped) >= 3:
                    out.append((clipped, True))
        for line in iter_lines(geometry):
            coords = np.asarray(line, dtype=float)
            if len(coords) < 2:
                continue
            for run in _clip_line(self._rotate(coords[:, 0], coords[:, 1])):
                if len(run) >= 2:
                    out.append((run, False))
        return out


def _circle_points(count: int) -> list[_Point]:
    return [
        (math.cos(2.0 * math.pi * idx / count), math.sin(2.0 * math.pi * idx / count))
        for idx in range(count)
    ]


def _horizon_crossing(p: np.ndarray, q: np.ndarray) -> _Point:
    t = p[0] / (p[0] - q[0])
    y = p[1] + t * (q[1] - p[1])
    z = p[2] + t * (q[2] - p[2])
    norm = math.hypot(y, z)
    if norm < 1e-12:
        norm = math.hypot(p[1], p[2]) or 1.0
        return (float(p[1]) / norm, float(p[2]) / norm)
    return (float(y) / norm, float(z) / norm)


def _horizon_arc(start: _Point, end: _Point) -> list[_Point]:
    """Points strictly between `start` and `end` along the shorter horizon arc."""
    a0 = math.atan2(start[1], start[0])
    a1 = math.atan2(end[1], end[0])
    delta = (a1 - a0 + math.pi) % (2.0 * math.pi) - math.pi
    steps = int(abs(delta) / _HORIZON_ARC_STEP)
    return [
        (math.cos(a0 + delta * idx / (steps + 1)), math.sin(a0 + delta * idx / (steps + 1)))
        for idx in range(1, steps + 1)
    ]


def _clip_ring(vectors: np.ndarray) -> list[_Point]:
    """Clip a closed ring to the visible hemisphere, closing gaps along the horizon."""
    if len(vectors) > 1 and np.allclose(vectors[0], vectors[-1]):
        vectors = vectors[:-1]
    visible = vectors[:, 0] >= 0.0
    if visible.all():
        return [(float(y), float(z)) for y, z in vectors[:, 1:3]]
    if not visible.any():
        return []

    start = int(np.argmax(visible))
    vectors = np.roll(vectors, -start, axis=0)
    visible = np.roll(visible, -start)
    count = len(vectors)

    out: list[_Point] = []
    exit_point: _Point | None = None
    for idx in range(1, count + 1):
        p = vectors[idx - 1]
        q = vectors[idx % count]
        p_in = bool(visible[idx - 1])
        q_in = bool(visible[idx % count])
        if p_in and q_in:
            out.append((float(q[1]), float(q[2])))
        elif p_in:
            exit_point = _horizon_crossing(p, q)
            out.append(exit_point)
        elif q_in:
            entry_point = _horizon_crossing(q, p)
            if exit_point is not None:
                out.extend(_horizon_arc(exit_point, entry_point))
                exit_point = None
            out.append(entry_point)
            out.append((float(q[1]), float(q[2])))
    return out


def _clip_line(vectors: np.ndarray) -> list[list[_Point]]:
    visible = vectors[:, 0] >= 0.0
    if visible.all():
        return [[(float(y), float(z)) for y, z in vectors[:, 1:3]]]
    runs: list[list[_Point]] = []
    current: list[_Point] = []
    if visible[0]:
        current.append((float(vectors[0][1]), float(vectors[0][2])))
    for idx in range(1, len(vectors)):
        p = vectors[idx - 1]
        q = vectors[idx]
        p_in = bool(visible[idx - 1])
        q_in = bool(visible[idx])
        if p_in and q_in:
            current.append((float(q[1]), float(q[2])))
        elif p_in:
            current.append(_horizon_crossing(p, q))
            runs.append(current)
            current = []
        elif q_in:
            current = [_horizon_crossing(q, p), (float(q[1]), float(q[2]))]
    if current:
        runs.append(current)
    return runs


class ProjectionController:
    """Owns the projection state of one globe and its viewport fit."""

    def __init__(self, state: ProjectionState | None = None) -> None:
        self.state = state if state is not None else ProjectionState()
        self.base_scale: float | None = None
        self.viewport: Viewport | None = None
        self._zoom = 1.0

    @property
    def ready(self) -> bool:
        return self.base_scale is not None

    @property
    def zoom(self) -> float:
        return self._zoom

    @zoom.setter
    def zoom(self, value: float) -> None:
        self._zoom = max(float(value), 1.0)

    @property
    def rotation(self) -> tuple[float, float]:
        return self.state.rotation

    @property
    def scale(self) -> float:
        return self.state.scale

    @property
    def projection(self) -> OrthographicProjection:
        return OrthographicProjection.from_state(self.state)

    def configure(self, viewport: Viewport) -> bool:
        """Fit the sphere to `viewport` at the current zoom and cache the base scale.

        Rotation carries over. Returns False (projection not ready) for a
        zero-area viewport.
        """
        self.viewport = viewport
        if viewport.is_degenerate:
            _LOGGER.warning(
                "Viewport %.0fx%.0f has no area; projection left unconfigured.",
                viewport.width,
                viewport.height,
            )
            self.base_scale = None
            return False

        width = float(viewport.width)
        height = float(viewport.height)
        zoom = self._zoom
        left = width - width * zoom
        top = height - height * zoom
        extent = ((left, top), (width * zoom, height * zoom))
        zoomed = OrthographicProjection(rotation=self.state.rotation).fit_extent(extent, SPHERE)
        base = OrthographicProjection().fit_extent(((0.0, 0.0), (width, height)), SPHERE)

        self.base_scale = base.scale
        self.state.translate = zoomed.translate
        self.state.scale = self.base_scale * zoom
        self.state.viewport_fit = (left, top, width * zoom, height * zoom)
        return True

    def rotate(self, rotation: Sequence[float]) -> None:
        self.state.rotation = (float(rotation[0]), float(rotation[1]))

    def set_scale(self, scale: float) -> None:
        self.state.scale = float(scale)

    def path_for(self, geometry: Any) -> ProjectedPath:
        return self.projection.path(geometry)
