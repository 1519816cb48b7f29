"""Degeneracy checks for vertex loops coming back from the clipping engine.

A fragment is usable only when it has at least three distinct vertices, no
zero-length edge and no pair of edges meeting anywhere other than a shared
endpoint.
"""

from typing import List, Sequence, Tuple

import numpy as np
from shapely.geometry import LinearRing

Segment = Tuple[Tuple[float, float], Tuple[float, float]]


def segments_from_points(
    points: Sequence[Sequence[float]],
    close: bool = False
) -> List[Segment]:
    """Build consecutive (start, end) segments from a point sequence.

    Args:
        points: Ordered vertices
        close: If True, also add a segment from the last point back to the first

    Returns:
        List of ((x1, y1), (x2, y2)) tuples

    Examples:
        >>> segments_from_points([(0, 0), (1, 0), (1, 1)], close=True)
        [((0.0, 0.0), (1.0, 0.0)), ((1.0, 0.0), (1.0, 1.0)), ((1.0, 1.0), (0.0, 0.0))]
    """
    pts = [(float(p[0]), float(p[1])) for p in points]
    if not pts:
        return []
    segments = [(pts[i], pts[i + 1]) for i in range(len(pts) - 1)]
    if close and len(pts) > 1:
        segments.append((pts[-1], pts[0]))
    return segments


def has_zero_length_segment(
    points: Sequence[Sequence[float]],
    epsilon: float = 1e-9,
    close: bool = True
) -> bool:
    """True if any edge of the loop is no longer than ``epsilon``."""
    pts = np.asarray(points, dtype=float)
    if len(pts) < 2:
        return False
    pts = pts[:, :2]
    if close:
        pts = np.vstack([pts, pts[:1]])
    lengths = np.linalg.norm(np.diff(pts, axis=0), axis=1)
    return bool(np.any(lengths <= epsilon))


def self_intersects(points: Sequence[Sequence[float]]) -> bool:
    """True if edges of the closed loop meet anywhere but shared endpoints.

    An empty or too-short loop counts as self-intersecting, since it cannot
    form a simple ring.
    """
    pts = [(float(p[0]), float(p[1])) for p in points]
    if len(pts) < 3:
        return True
    return not LinearRing(pts).is_simple


__all__ = [
    'segments_from_points',
    'has_zero_length_segment',
    'self_intersects',
]
