"""Orientation, tolerance and extremal-point utilities.

These helpers are shared by the clipping adaptation layer, the area matcher,
the hull and the simplifier. All of them are pure functions; polygons are
returned as new shapely values and point sequences as new numpy arrays.
"""

from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
from shapely.geometry import Polygon
from shapely.geometry.polygon import orient

from .errors import ValidationError
from .types import Anchor, coerce_enum

PolygonLike = Union[Polygon, Sequence[Sequence[float]], np.ndarray]


def as_polygon(value: Optional[PolygonLike], name: str = 'polygon') -> Polygon:
    """Coerce a shapely Polygon or a vertex sequence into a Polygon.

    Args:
        value: Polygon or sequence of (x, y[, z]) vertices
        name: Argument name used in the error message

    Returns:
        Shapely Polygon

    Raises:
        ValidationError: If ``value`` is None or cannot form a polygon

    Examples:
        >>> as_polygon([(0, 0), (4, 0), (4, 4), (0, 4)]).area
        16.0
    """
    if value is None:
        raise ValidationError(f"{name} is required")
    if isinstance(value, Polygon):
        return value
    try:
        return Polygon(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{name} is not a valid vertex sequence: {exc}") from exc


def ring_coords(value: PolygonLike) -> np.ndarray:
    """Return exterior vertices as an (N, 2|3) array without the closing duplicate."""
    if isinstance(value, Polygon):
        coords = np.asarray(value.exterior.coords, dtype=float)
    else:
        coords = np.asarray(value, dtype=float)
    if len(coords) > 1 and np.array_equal(coords[0], coords[-1]):
        coords = coords[:-1]
    return coords


def signed_area(coords: PolygonLike) -> float:
    """Signed shoelace area of a vertex loop.

    Positive for counter-clockwise loops, negative for clockwise ones (Y-up).
    A closing duplicate vertex contributes nothing and may be present.

    Examples:
        >>> signed_area([(0, 0), (1, 0), (1, 1), (0, 1)])
        1.0
        >>> signed_area([(0, 0), (0, 1), (1, 1), (1, 0)])
        -1.0
    """
    pts = ring_coords(coords)
    if len(pts) < 3:
        return 0.0
    x = pts[:, 0]
    y = pts[:, 1]
    return float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y)) / 2.0


def is_clockwise(value: PolygonLike) -> bool:
    """True if the exterior loop winds clockwise."""
    return signed_area(value) < 0


def ensure_ccw(polygon: Polygon) -> Polygon:
    """Return ``polygon`` with a counter-clockwise exterior (holes clockwise)."""
    if polygon.is_empty:
        return polygon
    if not is_clockwise(polygon) and all(is_clockwise(ring.coords) for ring in polygon.interiors):
        return polygon
    return orient(polygon, sign=1.0)


def near_equal(this: float, that: float, tolerance: float = 1e-9) -> bool:
    """True if two values differ by no more than ``tolerance``."""
    return abs(this - that) <= tolerance


def points_near_equal(
    this: Sequence[float],
    that: Sequence[float],
    tolerance: float = 1e-9
) -> bool:
    """True if two points coincide in X and Y within ``tolerance``."""
    return near_equal(this[0], that[0], tolerance) and near_equal(this[1], that[1], tolerance)


def anchor_point(polygon: PolygonLike, anchor: Union[Anchor, str] = Anchor.C) -> Tuple[float, float]:
    """Return one of the nine reference positions on the bounding box.

    Args:
        polygon: Polygon or vertex sequence
        anchor: Anchor member (or its string value)

    Returns:
        (x, y) tuple

    Examples:
        >>> square = [(0, 0), (4, 0), (4, 2), (0, 2)]
        >>> anchor_point(square, Anchor.C)
        (2.0, 1.0)
        >>> anchor_point(square, Anchor.NE)
        (4.0, 2.0)
    """
    anchor = coerce_enum(anchor, Anchor)
    min_x, min_y, max_x, max_y = as_polygon(polygon).bounds
    mid_x = (min_x + max_x) / 2.0
    mid_y = (min_y + max_y) / 2.0
    positions = {
        Anchor.C: (mid_x, mid_y),
        Anchor.N: (mid_x, max_y),
        Anchor.NE: (max_x, max_y),
        Anchor.E: (max_x, mid_y),
        Anchor.SE: (max_x, min_y),
        Anchor.S: (mid_x, min_y),
        Anchor.SW: (min_x, min_y),
        Anchor.W: (min_x, mid_y),
        Anchor.NW: (min_x, max_y),
    }
    return positions[anchor]


def largest_polygon(polygons: Iterable[Polygon]) -> Optional[Polygon]:
    """Return the polygon with the largest area, or None for an empty input.

    Ties resolve to the first polygon encountered.
    """
    best: Optional[Polygon] = None
    for polygon in polygons:
        if best is None or polygon.area > best.area:
            best = polygon
    return best


# ============================================================================
# Extremal point folds
# ============================================================================

def _points_2d(points) -> np.ndarray:
    pts = np.asarray(points, dtype=float)
    if pts.ndim != 2 or len(pts) == 0:
        raise ValidationError("points must be a non-empty sequence of 2D or 3D points")
    return pts[:, :2]


def nearest_point(points, target: Sequence[float]) -> np.ndarray:
    """Return the point closest to ``target`` (first one wins on ties)."""
    pts = _points_2d(points)
    distances = np.sum((pts - np.asarray(target[:2], dtype=float)) ** 2, axis=1)
    return np.asarray(points, dtype=float)[int(np.argmin(distances))].copy()


def farthest_point(points, target: Sequence[float]) -> np.ndarray:
    """Return the point farthest from ``target`` (first one wins on ties)."""
    pts = _points_2d(points)
    distances = np.sum((pts - np.asarray(target[:2], dtype=float)) ** 2, axis=1)
    return np.asarray(points, dtype=float)[int(np.argmax(distances))].copy()


def min_corner(points) -> Tuple[float, float]:
    """Minimum X and minimum Y over ``points``."""
    pts = _points_2d(points)
    return float(pts[:, 0].min()), float(pts[:, 1].min())


def max_corner(points) -> Tuple[float, float]:
    """Maximum X and maximum Y over ``points``."""
    pts = _points_2d(points)
    return float(pts[:, 0].max()), float(pts[:, 1].max())


def dedupe_points(points: Iterable[Sequence[float]]) -> List[Tuple[float, ...]]:
    """Remove repeated points, keeping the first occurrence of each."""
    return list(dict.fromkeys(tuple(float(c) for c in p) for p in points))


__all__ = [
    'PolygonLike',
    'as_polygon',
    'ring_coords',
    'signed_area',
    'is_clockwise',
    'ensure_ccw',
    'near_equal',
    'points_near_equal',
    'anchor_point',
    'largest_polygon',
    'nearest_point',
    'farthest_point',
    'min_corner',
    'max_corner',
    'dedupe_points',
]
