"""Vertex-count reduction for point sequences and geometries.

Two stages, each usable on its own:

- Radial distance: a single pass dropping points that sit within
  ``tolerance`` of the previously kept point
- Douglas-Peucker: keeps the point farthest from the chord between two kept
  points while that distance exceeds ``tolerance``

:func:`simplify` chains both (the radial pre-pass is skipped in highest
quality mode). :func:`simplify_geometry` applies the same routine to every
line and ring of a shapely geometry, so polylines and polygons share one
implementation.

Distances use X and Y only; a Z column, when present, is carried through.
"""

from typing import Union

import numpy as np
from shapely.geometry.base import BaseGeometry

from .core.errors import ValidationError
from .core.geometry_utils import points_near_equal
from .process import process_geometry

PointsLike = Union[np.ndarray, list, tuple]


# ============================================================================
# Private processing functions (work with numpy arrays)
# ============================================================================

def _as_points(points: PointsLike) -> np.ndarray:
    vertices = np.array(points, dtype=float)
    if vertices.size == 0:
        return vertices.reshape(0, 2)
    if vertices.ndim != 2 or vertices.shape[1] < 2:
        raise ValidationError(f"points must be an (N, 2) or (N, 3) array, got shape {vertices.shape}")
    return vertices


def _check_tolerance(tolerance: float) -> None:
    if tolerance < 0:
        raise ValidationError(f"tolerance must be non-negative, got {tolerance}")


def _sq_segment_distances(points: np.ndarray, start: np.ndarray, end: np.ndarray) -> np.ndarray:
    """Squared distances from each point to the segment ``start``-``end``."""
    delta = end - start
    length_sq = float(np.dot(delta, delta))
    if length_sq > 0:
        t = np.clip((points - start) @ delta / length_sq, 0.0, 1.0)
        nearest = start + t[:, None] * delta
    else:
        nearest = start
    return np.sum((points - nearest) ** 2, axis=1)


def _radial_distance_mask(xy: np.ndarray, sq_tolerance: float) -> np.ndarray:
    keep = np.zeros(len(xy), dtype=bool)
    keep[0] = True
    previous = 0
    for i in range(1, len(xy)):
        delta = xy[i] - xy[previous]
        if float(np.dot(delta, delta)) > sq_tolerance:
            keep[i] = True
            previous = i

    last = len(xy) - 1
    if not keep[last] and not points_near_equal(xy[previous], xy[last]):
        keep[last] = True
    return keep


def _douglas_peucker_mask(xy: np.ndarray, sq_tolerance: float) -> np.ndarray:
    """Keep-mask from Douglas-Peucker using an explicit stack of index ranges."""
    keep = np.zeros(len(xy), dtype=bool)
    keep[0] = True
    keep[-1] = True

    stack = [(0, len(xy) - 1)]
    while stack:
        first, last = stack.pop()
        if last - first < 2:
            continue
        distances = _sq_segment_distances(xy[first + 1:last], xy[first], xy[last])
        offset = int(np.argmax(distances))
        if distances[offset] <= sq_tolerance:
            continue
        index = first + 1 + offset
        keep[index] = True
        stack.append((first, index))
        stack.append((index, last))
    return keep


def _simplify_vertices(
    vertices: np.ndarray,
    tolerance: float,
    highest_quality: bool = False
) -> np.ndarray:
    """Internal function: both stages over an (N, 2|3) array."""
    if len(vertices) <= 2:
        return vertices.copy()

    sq_tolerance = tolerance * tolerance
    if not highest_quality:
        vertices = vertices[_radial_distance_mask(vertices[:, :2], sq_tolerance)]
        if len(vertices) <= 2:
            return vertices.copy()
    return vertices[_douglas_peucker_mask(vertices[:, :2], sq_tolerance)]


def _simplify_ring_or_line(
    vertices: np.ndarray,
    tolerance: float,
    highest_quality: bool = False
) -> np.ndarray:
    """Simplify a line or closed ring, refusing to collapse a ring."""
    result = _simplify_vertices(vertices, tolerance, highest_quality)
    is_closed = len(vertices) > 3 and np.array_equal(vertices[0], vertices[-1])
    if is_closed and len(result) < 4:
        return vertices.copy()
    return result


# ============================================================================
# Public API functions
# ============================================================================

def simplify_radial_distance(points: PointsLike, tolerance: float) -> np.ndarray:
    """Drop points closer than ``tolerance`` to the last kept point.

    The first point is always kept, and the last point is kept whenever it
    differs from the final retained point.

    Args:
        points: Ordered (N, 2) or (N, 3) points
        tolerance: Minimum spacing between kept points

    Returns:
        New array of kept points

    Examples:
        >>> simplify_radial_distance([(0, 0), (0.1, 0), (1, 0), (1.05, 0), (2, 0)], 0.5)
        array([[0., 0.],
               [1., 0.],
               [2., 0.]])
    """
    _check_tolerance(tolerance)
    vertices = _as_points(points)
    if len(vertices) <= 2:
        return vertices
    return vertices[_radial_distance_mask(vertices[:, :2], tolerance * tolerance)]


def simplify_douglas_peucker(points: PointsLike, tolerance: float) -> np.ndarray:
    """Reduce ``points`` with the Douglas-Peucker algorithm.

    First and last points are always kept. Between two kept points, the
    point with the largest perpendicular distance to the segment joining them
    is kept when that distance exceeds ``tolerance`` (ties go to the earlier
    point); otherwise the range collapses to its endpoints. A work stack
    replaces recursion, so very long inputs cannot exhaust the call stack.

    Args:
        points: Ordered (N, 2) or (N, 3) points
        tolerance: Maximum allowed deviation

    Returns:
        New array of kept points, in input order
    """
    _check_tolerance(tolerance)
    vertices = _as_points(points)
    if len(vertices) <= 2:
        return vertices
    return vertices[_douglas_peucker_mask(vertices[:, :2], tolerance * tolerance)]


def simplify(
    points: PointsLike,
    tolerance: float = 1.0,
    highest_quality: bool = False
) -> np.ndarray:
    """Simplify a point sequence with a radial pre-pass and Douglas-Peucker.

    Args:
        points: Ordered (N, 2) or (N, 3) points
        tolerance: Maximum allowed deviation (default: 1.0)
        highest_quality: Skip the radial distance pre-pass. Slower, but the
            result depends only on Douglas-Peucker.

    Returns:
        New array with at most as many points as the input; the first and
        last points are preserved. Inputs with two points or fewer are
        returned unchanged.

    Raises:
        ValidationError: If ``tolerance`` is negative or ``points`` is malformed

    Examples:
        >>> zigzag = [(0, 0), (5, 0), (7, 7), (10, 15), (15, 20), (10, 20), (5, 10)]
        >>> len(simplify(zigzag, tolerance=5.0))
        3
    """
    _check_tolerance(tolerance)
    return _simplify_vertices(_as_points(points), tolerance, highest_quality)


def simplify_geometry(
    geometry: BaseGeometry,
    tolerance: float,
    highest_quality: bool = False
) -> BaseGeometry:
    """Simplify every line and ring of a shapely geometry.

    Polygon rings never drop below three distinct vertices; a ring that
    would is kept as it was.

    Args:
        geometry: Shapely geometry (LineString, Polygon, Multi*, collections)
        tolerance: Maximum allowed deviation
        highest_quality: Skip the radial distance pre-pass

    Returns:
        New geometry of the same type

    Examples:
        >>> from shapely.geometry import LineString
        >>> line = LineString([(0, 0), (5, 0.01), (10, 0)])
        >>> len(simplify_geometry(line, 0.1).coords)
        2
    """
    _check_tolerance(tolerance)
    return process_geometry(
        geometry,
        _simplify_ring_or_line,
        tolerance=tolerance,
        highest_quality=highest_quality,
    )


__all__ = [
    'simplify',
    'simplify_radial_distance',
    'simplify_douglas_peucker',
    'simplify_geometry',
]
