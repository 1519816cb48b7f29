"""Convex hull of a planar point set (Andrew's monotone chain)."""

from typing import List, Sequence, Tuple

import numpy as np
from shapely.geometry import Polygon

from .core.errors import ValidationError
from .core.geometry_utils import PolygonLike, as_polygon, dedupe_points

Point2D = Tuple[float, float]


def _not_right_turn(r: Point2D, q: Point2D, p: Point2D) -> bool:
    """True when r -> q -> p turns left or runs straight."""
    return (q[0] - r[0]) * (p[1] - r[1]) >= (q[1] - r[1]) * (p[0] - r[0])


def _chain(points: Sequence[Point2D]) -> List[Point2D]:
    """One half of the hull, turning only right, without its final point."""
    chain: List[Point2D] = []
    for p in points:
        while len(chain) >= 2 and _not_right_turn(chain[-2], chain[-1], p):
            chain.pop()
        chain.append(p)
    chain.pop()
    return chain


def make_hull(points) -> np.ndarray:
    """Counter-clockwise convex hull of ``points``.

    Only X and Y are considered; a Z column is dropped. Collinear points on
    the hull boundary are excluded and duplicates removed. Inputs with zero
    or one point are returned unchanged.

    Args:
        points: (N, 2) or (N, 3) array-like of points, in any order

    Returns:
        (M, 2) array of hull vertices in counter-clockwise order

    Examples:
        >>> make_hull([(0, 0), (2, 0), (1, 1), (2, 2), (0, 2)]).tolist()
        [[2.0, 0.0], [2.0, 2.0], [0.0, 2.0], [0.0, 0.0]]
    """
    pts = np.asarray(points, dtype=float)
    if len(pts) <= 1:
        return pts.copy()
    if pts.ndim != 2 or pts.shape[1] < 2:
        raise ValidationError(f"points must be an (N, 2) or (N, 3) array, got shape {pts.shape}")

    ordered = sorted((float(x), float(y)) for x, y in pts[:, :2])
    upper = _chain(ordered)
    lower = _chain(ordered[::-1])

    # All points coincide: both chains hold the same single point.
    if len(upper) == 1 and upper == lower:
        hull = upper
    else:
        hull = upper + lower

    hull = dedupe_points(hull)
    hull.reverse()
    return np.array(hull, dtype=float).reshape(-1, 2)


def convex_hull_from_polygons(polygons: Sequence[PolygonLike]) -> Polygon:
    """Convex hull enclosing the exterior vertices of every polygon.

    Raises:
        ValidationError: If the vertices do not span a hull of at least
            three points
    """
    if not polygons:
        raise ValidationError("at least one polygon is required")
    vertices = np.vstack([
        np.asarray(as_polygon(p).exterior.coords, dtype=float)[:, :2] for p in polygons
    ])
    hull = make_hull(vertices)
    if len(hull) < 3:
        raise ValidationError(f"polygons span a degenerate hull of {len(hull)} point(s)")
    return Polygon(hull)


__all__ = ['make_hull', 'convex_hull_from_polygons']
