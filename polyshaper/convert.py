"""Conversion between float polygons and fixed-point integer paths.

The clipping engine evaluates its predicates exactly on integer coordinates.
Polygons are scaled up by ``GeometryConfig.scale`` on the way in and scaled
back down on the way out, where fragments that collapsed or became
self-intersecting during the round trip are screened out.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from shapely.geometry import Polygon

from .core.config import resolve_config
from .core.geometry_utils import PolygonLike, dedupe_points, ring_coords
from .core.validation_utils import has_zero_length_segment, self_intersects

logger = logging.getLogger(__name__)

Path = List[Tuple[int, int]]


def to_fixed_path(polygon: PolygonLike, scale: Optional[float] = None) -> Path:
    """Convert a polygon exterior into an integer path.

    Each vertex's X and Y are multiplied by ``scale`` and rounded to the
    nearest integer; Z is dropped. Consecutive duplicates (including the
    closing vertex of a shapely ring) are removed.

    Args:
        polygon: Shapely Polygon or vertex sequence
        scale: Fixed-point scale (default: ``DEFAULT_CONFIG.scale``)

    Returns:
        List of (x, y) integer tuples

    Examples:
        >>> to_fixed_path([(0, 0), (1.5, 0), (1.5, 1)], scale=10)
        [(0, 0), (15, 0), (15, 10)]
    """
    if scale is None:
        scale = resolve_config(None).scale
    path: Path = []
    for vertex in ring_coords(polygon):
        point = (int(round(vertex[0] * scale)), int(round(vertex[1] * scale)))
        if not path or path[-1] != point:
            path.append(point)
    if len(path) > 1 and path[0] == path[-1]:
        path.pop()
    return path


def from_fixed_path(
    path: Iterable[Tuple[int, int]],
    scale: Optional[float] = None,
    epsilon: Optional[float] = None
) -> Optional[Polygon]:
    """Convert an integer path back into a float polygon.

    Coordinates are divided by ``scale`` and repeated points removed. The
    result is rejected (``None``) when fewer than three points remain, when
    any edge is zero-length, or when edges cross other than at shared
    endpoints. A ``None`` return means "this fragment degenerated" and is not
    an error.

    Args:
        path: Sequence of integer (x, y) points
        scale: Fixed-point scale used for the forward conversion
        epsilon: Zero-length edge tolerance

    Returns:
        Shapely Polygon with the path's winding, or None
    """
    config = resolve_config(None)
    if scale is None:
        scale = config.scale
    if epsilon is None:
        epsilon = config.epsilon

    points = dedupe_points((x / scale, y / scale) for x, y in path)
    if len(points) < 3:
        return None
    if has_zero_length_segment(points, epsilon) or self_intersects(points):
        return None
    try:
        polygon = Polygon(points)
    except ValueError:
        return None
    if polygon.is_empty or polygon.area <= 0:
        return None
    return polygon


def to_fixed_paths(polygons: Iterable[PolygonLike], scale: Optional[float] = None) -> List[Path]:
    """Convert several polygons, skipping any that collapse below three points."""
    paths = []
    for polygon in polygons:
        path = to_fixed_path(polygon, scale)
        if len(path) < 3:
            logger.debug("Skipping path with %d points after fixed-point conversion", len(path))
            continue
        paths.append(path)
    return paths


def from_fixed_paths(
    paths: Iterable[Iterable[Tuple[int, int]]],
    scale: Optional[float] = None,
    epsilon: Optional[float] = None
) -> List[Polygon]:
    """Convert several paths back, dropping degenerate results."""
    polygons = []
    for path in paths:
        polygon = from_fixed_path(path, scale, epsilon)
        if polygon is None:
            logger.debug("Dropped degenerate path from clipping result")
            continue
        polygons.append(polygon)
    return polygons


__all__ = [
    'Path',
    'to_fixed_path',
    'from_fixed_path',
    'to_fixed_paths',
    'from_fixed_paths',
]
