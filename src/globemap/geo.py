"""Spherical geometry primitives: centroid, rotation interpolation, easing."""

from __future__ import annotations

import math
from functools import lru_cache
from typing import Any, Callable, Iterator, Sequence

import numpy as np


EARTH_RADIUS_M = 6_371_008.8


class _Sphere:
    """Sentinel geometry standing for the whole globe."""

    geom_type = "Sphere"
    is_empty = False

    def __repr__(self) -> str:
        return "SPHERE"


SPHERE = _Sphere()

Interpolator = Callable[[float], Any]


def is_valid_geometry(geometry: Any) -> bool:
    if geometry is None:
        return False
    if hasattr(geometry, "is_empty") and bool(geometry.is_empty):
        return False
    return True


def iter_polygons(geometry: Any) -> Iterator[Any]:
    geom_type = getattr(geometry, "geom_type", "")
    if geom_type == "Polygon":
        if not geometry.is_empty:
            yield geometry
    elif geom_type in ("MultiPolygon", "GeometryCollection"):
        for part in geometry.geoms:
            yield from iter_polygons(part)


def iter_lines(geometry: Any) -> Iterator[Sequence[tuple[float, float]]]:
    """Yield coordinate sequences of every line-like part (rings excluded)."""
    geom_type = getattr(geometry, "geom_type", "")
    if geom_type in ("LineString", "LinearRing"):
        if not geometry.is_empty:
            yield list(geometry.coords)
    elif geom_type in ("MultiLineString", "GeometryCollection"):
        for part in geometry.geoms:
            yield from iter_lines(part)


def to_unit_vectors(lon: np.ndarray, lat: np.ndarray) -> np.ndarray:
    """Convert degree arrays to an (N, 3) array of unit vectors."""
    lam = np.radians(lon)
    phi = np.radians(lat)
    cos_phi = np.cos(phi)
    return np.column_stack((cos_phi * np.cos(lam), cos_phi * np.sin(lam), np.sin(phi)))


def _mean_direction(geometry: Any) -> tuple[float, float] | None:
    chunks: list[np.ndarray] = []
    for polygon in iter_polygons(geometry):
        coords = np.asarray(polygon.exterior.coords, dtype=float)[:-1]
        if len(coords):
            chunks.append(to_unit_vectors(coords[:, 0], coords[:, 1]))
    for line in iter_lines(geometry):
        coords = np.asarray(line, dtype=float)
        if len(coords):
            chunks.append(to_unit_vectors(coords[:, 0], coords[:, 1]))
    if not chunks:
        return None
    total = np.concatenate(chunks).sum(axis=0)
    norm = float(np.linalg.norm(total))
    if norm < 1e-12:
        return None
    x, y, z = (total / norm).tolist()
    return (math.degrees(math.atan2(y, x)), math.degrees(math.asin(max(-1.0, min(1.0, z)))))


@lru_cache(maxsize=256)
def _equal_area_transformer(lon_0: float, lat_0: float) -> Any:
    pyproj = _require_pyproj()
    source = pyproj.CRS.from_dict({"proj": "longlat", "R": EARTH_RADIUS_M})
    target = pyproj.CRS.from_dict(
        {"proj": "laea", "lat_0": lat_0, "lon_0": lon_0, "R": EARTH_RADIUS_M, "units": "m"}
    )
    return pyproj.Transformer.from_crs(source, target, always_xy=True)


def centroid(geometry: Any) -> tuple[float, float]:
    """Area centroid of a lon/lat geometry on the sphere, as (lon, lat) degrees.

    The geometry is projected into a Lambert azimuthal equal-area plane
    centred on its mean vertex direction, so the planar centroid there is
    area-weighted like the spherical one and antimeridian-split parts stay
    contiguous.
    """
    if not is_valid_geometry(geometry):
        raise ValueError("Cannot compute the centroid of an empty geometry")
    center = _mean_direction(geometry)
    if center is None:
        point = geometry.centroid
        return (float(point.x), float(point.y))

    lon_0, lat_0 = round(center[0], 6), round(center[1], 6)
    transformer = _equal_area_transformer(lon_0, lat_0)
    shapely_transform = _require_shapely_transform()
    projected = shapely_transform(
        geometry, lambda xy: np.column_stack(transformer.transform(xy[:, 0], xy[:, 1]))
    )
    point = projected.centroid
    if point.is_empty or not math.isfinite(point.x) or not math.isfinite(point.y):
        return (lon_0, lat_0)
    lon, lat = transformer.transform(point.x, point.y, direction="INVERSE")
    return (float(lon), float(lat))


def interpolate_rotation(
    start: Sequence[float],
    end: Sequence[float],
) -> Callable[[float], tuple[float, float]]:
    """Great-circle interpolation between two (λ, φ) pairs in degrees."""
    x0, y0 = math.radians(float(start[0])), math.radians(float(start[1]))
    x1, y1 = math.radians(float(end[0])), math.radians(float(end[1]))
    cy0, sy0 = math.cos(y0), math.sin(y0)
    cy1, sy1 = math.cos(y1), math.sin(y1)
    kx0, ky0 = cy0 * math.cos(x0), cy0 * math.sin(x0)
    kx1, ky1 = cy1 * math.cos(x1), cy1 * math.sin(x1)
    d = 2.0 * math.asin(
        min(1.0, math.sqrt(_haversin(y1 - y0) + cy0 * cy1 * _haversin(x1 - x0)))
    )
    k = math.sin(d)
    start_point = (float(start[0]), float(start[1]))
    end_point = (float(end[0]), float(end[1]))

    if d < 1e-12 or abs(k) < 1e-12:
        return lambda t: end_point if t >= 1.0 else start_point

    def interpolate(t: float) -> tuple[float, float]:
        if t <= 0.0:
            return start_point
        if t >= 1.0:
            return end_point
        td = t * d
        b = math.sin(td) / k
        a = math.sin(d - td) / k
        x = a * kx0 + b * kx1
        y = a * ky0 + b * ky1
        z = a * sy0 + b * sy1
        return (math.degrees(math.atan2(y, x)), math.degrees(math.atan2(z, math.hypot(x, y))))

    return interpolate


def interpolate_number(start: float, end: float) -> Callable[[float], float]:
    a, b = float(start), float(end)

    def interpolate(t: float) -> float:
        if t >= 1.0:
            return b
        return a * (1.0 - t) + b * t

    return interpolate


def ease_cubic_in_out(t: float) -> float:
    t = max(0.0, min(1.0, t))
    t *= 2.0
    if t <= 1.0:
        return t * t * t / 2.0
    t -= 2.0
    return (t * t * t + 2.0) / 2.0


def _haversin(x: float) -> float:
    s = math.sin(x / 2.0)
    return s * s


@lru_cache(maxsize=1)
def _require_pyproj() -> Any:
    try:
        import pyproj
    except ImportError as exc:  # pragma: no cover
        raise RuntimeError("pyproj is required for centroid computation") from exc
    return pyproj


def _require_shapely_transform() -> Any:
    try:
        from shapely import transform
    except ImportError as exc:  # pragma: no cover
        raise RuntimeError("shapely is required for geometry projection") from exc
    return transform
