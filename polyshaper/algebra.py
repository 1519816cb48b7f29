"""Polygon Boolean algebra built on an exact integer clipping engine.

Every operation follows the same adaptation pipeline:

1. Scale polygons into fixed-point integer paths (see :mod:`polyshaper.convert`)
2. Submit the paths to a :class:`~polyshaper.clipping.ClippingEngine`
3. Convert the resulting paths back, dropping degenerate fragments
4. Rebuild holes by containment and normalize exteriors to counter-clockwise

Fragments that collapse during the round trip, or whose area falls below the
caller's tolerance, are discarded silently. The fitting functions report "no
fit" as ``None`` rather than raising.
"""

import logging
from typing import List, Optional, Sequence, Union

import numpy as np
from shapely.geometry import Polygon
from shapely.geometry.polygon import orient
from shapely.strtree import STRtree

from .clipping import DEFAULT_ENGINE, ClippingEngine
from .convert import from_fixed_path, to_fixed_path
from .core.config import GeometryConfig, resolve_config
from .core.errors import ValidationError
from .core.geometry_utils import PolygonLike, as_polygon, ensure_ccw, largest_polygon
from .core.types import ClipOperation, FillRule, coerce_enum
from .simplify import simplify_geometry

logger = logging.getLogger(__name__)

PolygonInput = Union[PolygonLike, Sequence[PolygonLike]]


# ============================================================================
# Private clipping pipeline
# ============================================================================

def _polygon_list(value: Optional[PolygonInput], name: str) -> List[Polygon]:
    """Accept a single polygon (or vertex sequence) or a list of polygons."""
    if value is None:
        raise ValidationError(f"{name} is required")
    if isinstance(value, Polygon):
        return [value]
    try:
        coords = np.asarray(value, dtype=float)
    except (TypeError, ValueError):
        coords = None
    if coords is not None and coords.ndim == 2:
        return [as_polygon(value, name)]
    return [as_polygon(item, name) for item in value]


def _optional_polygon_list(value: Optional[Sequence[PolygonLike]], name: str) -> List[Polygon]:
    if value is None:
        return []
    return _polygon_list(value, name)


def _polygon_paths(polygons: Sequence[Polygon], scale: float) -> List[list]:
    """Fixed-point paths for exteriors (CCW) and holes (CW) of ``polygons``."""
    paths = []
    for polygon in polygons:
        if polygon.is_empty:
            continue
        polygon = ensure_ccw(polygon)
        for ring in [polygon.exterior, *polygon.interiors]:
            path = to_fixed_path(ring.coords, scale)
            if len(path) >= 3:
                paths.append(path)
            else:
                logger.debug("Skipping ring that collapsed to %d points", len(path))
    return paths


def _assemble(paths: Sequence[Sequence], config: GeometryConfig) -> List[Polygon]:
    """Turn engine output paths into polygons, nesting holes in their outers.

    Nesting is decided by containment rather than path orientation so that
    engines with either output winding convention are handled. A ring
    enclosed by an odd number of other rings is a hole of its innermost
    container.
    """
    rings = []
    for path in paths:
        ring = from_fixed_path(path, config.scale, config.epsilon)
        if ring is None:
            logger.debug("Dropped degenerate fragment of %d points", len(path))
            continue
        rings.append(ring)

    rings.sort(key=lambda r: r.area, reverse=True)
    parents: List[Optional[int]] = []
    depths: List[int] = []
    for i, ring in enumerate(rings):
        probe = ring.representative_point()
        parent = None
        depth = 0
        for j in range(i):
            if rings[j].contains(probe):
                depth += 1
                parent = j
        parents.append(parent)
        depths.append(depth)

    holes = {i: [] for i, depth in enumerate(depths) if depth % 2 == 0}
    for i, depth in enumerate(depths):
        if depth % 2 == 1 and parents[i] in holes:
            holes[parents[i]].append(rings[i].exterior.coords)

    polygons = []
    for i, hole_rings in holes.items():
        polygon = Polygon(rings[i].exterior.coords, holes=hole_rings)
        polygons.append(orient(polygon, sign=1.0))
    return polygons


def _clip(
    operation: ClipOperation,
    subjects: Sequence[Polygon],
    clips: Sequence[Polygon],
    fill_rule: FillRule,
    config: GeometryConfig,
    engine: ClippingEngine,
) -> List[Polygon]:
    subject_paths = _polygon_paths(subjects, config.scale)
    if not subject_paths:
        return []
    clip_paths = _polygon_paths(clips, config.scale)
    solution = engine.execute(operation, subject_paths, clip_paths, fill_rule)
    return _assemble(solution, config)


def _by_area(polygons: List[Polygon], tolerance: float) -> List[Polygon]:
    """Sort by descending area and drop fragments below ``tolerance``."""
    ordered = sorted(polygons, key=lambda p: p.area, reverse=True)
    kept = [p for p in ordered if p.area >= tolerance]
    if len(kept) < len(ordered):
        logger.debug("Discarded %d sliver(s) below area %g", len(ordered) - len(kept), tolerance)
    return kept


def _check_tolerance(tolerance: float) -> None:
    if tolerance < 0:
        raise ValidationError(f"tolerance must be non-negative, got {tolerance}")


def _covers(cover: Polygon, polygon: Polygon, epsilon: float) -> bool:
    if epsilon > 0:
        cover = cover.buffer(epsilon)
    return cover.covers(polygon)


# ============================================================================
# Public API
# ============================================================================

def merge(
    polygons: Optional[Sequence[PolygonLike]],
    fill_rule: Union[FillRule, str] = FillRule.NON_ZERO,
    tolerance: float = 0.0,
    config: Optional[GeometryConfig] = None,
    engine: Optional[ClippingEngine] = None,
) -> List[Polygon]:
    """Union a list of polygons into non-overlapping components.

    All polygons are submitted as both subject and clip paths of a single
    union, so each output is a maximal connected component. Merging an
    already-merged set returns the same set.

    Args:
        polygons: Polygons to combine
        fill_rule: Fill rule deciding which overlapping regions are inside
            (FillRule member or string value, default: NON_ZERO)
        tolerance: If positive, simplify each result with this tolerance
        config: Fixed-point precision (default: ``DEFAULT_CONFIG``)
        engine: Clipping engine (default: pyclipper)

    Returns:
        List of polygons with counter-clockwise exteriors

    Examples:
        >>> a = Polygon([(0, 0), (2, 0), (2, 2), (0, 2)])
        >>> b = Polygon([(1, 1), (3, 1), (3, 3), (1, 3)])
        >>> len(merge([a, b]))
        1
        >>> merge([a, b])[0].area
        7.0
    """
    _check_tolerance(tolerance)
    config = resolve_config(config)
    engine = engine or DEFAULT_ENGINE
    fill_rule = coerce_enum(fill_rule, FillRule)

    polys = _optional_polygon_list(polygons, 'polygons')
    paths = _polygon_paths(polys, config.scale)
    if not paths:
        return []
    merged = _assemble(engine.execute(ClipOperation.UNION, paths, paths, fill_rule), config)

    if tolerance == 0:
        return merged

    simplified = []
    for polygon in merged:
        candidate = simplify_geometry(polygon, tolerance)
        if candidate.is_valid and not candidate.is_empty:
            simplified.append(ensure_ccw(candidate))
        else:
            simplified.append(polygon)
    return simplified


def differences(
    polygons: PolygonInput,
    subtract: Optional[Sequence[PolygonLike]],
    tolerance: float = 0.01,
    config: Optional[GeometryConfig] = None,
    engine: Optional[ClippingEngine] = None,
) -> List[Polygon]:
    """Subtract a list of polygons from one polygon (or several).

    The subtract list is merged first so redundant overlaps do not reach the
    engine. The difference is evaluated with a non-zero fill rule; fragments
    with area below ``tolerance`` are discarded as slivers.

    Args:
        polygons: Subject polygon, or a list of subject polygons
        subtract: Polygons to remove from the subject
        tolerance: Minimum fragment area to keep (default: 0.01)
        config: Fixed-point precision
        engine: Clipping engine

    Returns:
        Fragments sorted by descending area, exteriors counter-clockwise

    Raises:
        ValidationError: If ``polygons`` is None or ``tolerance`` is negative

    Examples:
        >>> square = Polygon([(0, 0), (10, 0), (10, 10), (0, 10)])
        >>> bar = Polygon([(4, -1), (6, -1), (6, 11), (4, 11)])
        >>> [p.area for p in differences(square, [bar])]
        [40.0, 40.0]
    """
    _check_tolerance(tolerance)
    config = resolve_config(config)
    engine = engine or DEFAULT_ENGINE
    subjects = _polygon_list(polygons, 'polygons')
    clips = merge(_optional_polygon_list(subtract, 'subtract'), config=config, engine=engine)

    fragments = _clip(ClipOperation.DIFFERENCE, subjects, clips, FillRule.NON_ZERO, config, engine)
    return _by_area(fragments, tolerance)


def intersections(
    polygons: PolygonInput,
    clips: Optional[Sequence[PolygonLike]],
    tolerance: float = 0.01,
    config: Optional[GeometryConfig] = None,
    engine: Optional[ClippingEngine] = None,
) -> List[Polygon]:
    """Intersect polygons with a list of clipping polygons.

    Mirrors :func:`differences`: clips are merged first, slivers below
    ``tolerance`` dropped, results sorted by descending area. An empty clip
    list yields no fragments.
    """
    _check_tolerance(tolerance)
    config = resolve_config(config)
    engine = engine or DEFAULT_ENGINE
    subjects = _polygon_list(polygons, 'polygons')
    merged_clips = merge(_optional_polygon_list(clips, 'clips'), config=config, engine=engine)
    if not merged_clips:
        return []

    fragments = _clip(ClipOperation.INTERSECTION, subjects, merged_clips, FillRule.NON_ZERO, config, engine)
    return _by_area(fragments, tolerance)


def intersects(polygon: PolygonLike, candidates: Optional[Sequence[PolygonLike]]) -> bool:
    """True if ``polygon`` shares area with any candidate.

    Polygons that only touch along an edge or at a vertex do not intersect.
    Cheap compared to clipping; use it to skip Fit/Difference calls.

    Examples:
        >>> a = Polygon([(0, 0), (2, 0), (2, 2), (0, 2)])
        >>> b = Polygon([(2, 0), (4, 0), (4, 2), (2, 2)])
        >>> intersects(a, [b])
        False
    """
    polygon = as_polygon(polygon)
    if not candidates:
        return False
    polys = [as_polygon(c, 'candidate') for c in candidates]
    tree = STRtree(polys)
    for index in tree.query(polygon, predicate='intersects'):
        if not polygon.touches(polys[index]):
            return True
    return False


def fit_within(
    polygon: PolygonLike,
    within: PolygonLike,
    tolerance: float = 0.01,
    config: Optional[GeometryConfig] = None,
    engine: Optional[ClippingEngine] = None,
) -> List[Polygon]:
    """Return every fragment of ``polygon`` lying inside ``within``.

    Returns:
        Fragments sorted by descending area; empty if the two do not intersect
    """
    polygon = as_polygon(polygon)
    within = as_polygon(within, 'within')
    if not intersects(polygon, [within]):
        return []
    return intersections([polygon], [within], tolerance, config, engine)


def fit_most(
    polygon: PolygonLike,
    within: Optional[PolygonLike],
    tolerance: float = 0.01,
    config: Optional[GeometryConfig] = None,
    engine: Optional[ClippingEngine] = None,
) -> Optional[Polygon]:
    """Return the largest fragment of ``polygon`` inside ``within``.

    Returns:
        Counter-clockwise polygon, the polygon itself when ``within`` is None,
        or None when no part of ``polygon`` lies inside ``within``
    """
    polygon = as_polygon(polygon)
    if within is None:
        return ensure_ccw(polygon)
    fragments = fit_within(polygon, within, tolerance, config, engine)
    return largest_polygon(fragments)


def fit_among(
    polygon: PolygonLike,
    among: Optional[Sequence[PolygonLike]],
    tolerance: float = 0.01,
    config: Optional[GeometryConfig] = None,
    engine: Optional[ClippingEngine] = None,
) -> Optional[Polygon]:
    """Return the largest fragment of ``polygon`` outside every obstacle.

    Returns:
        Counter-clockwise polygon, the polygon itself when it does not
        intersect ``among``, or None when the obstacles cover it entirely
    """
    polygon = as_polygon(polygon)
    if not intersects(polygon, among):
        return ensure_ccw(polygon)
    fragments = differences([polygon], among, tolerance, config, engine)
    return largest_polygon(fragments)


def fit_to(
    polygon: PolygonLike,
    within: Optional[PolygonLike] = None,
    among: Optional[Sequence[PolygonLike]] = None,
    tolerance: float = 0.01,
    config: Optional[GeometryConfig] = None,
    engine: Optional[ClippingEngine] = None,
) -> Optional[Polygon]:
    """Fit ``polygon`` inside ``within`` and then outside ``among``.

    Equivalent to :func:`fit_most` followed by :func:`fit_among`.

    Returns:
        The largest surviving fragment, or None if no fit exists

    Examples:
        >>> poly = Polygon([(0, 0), (4, 0), (4, 4), (0, 4)])
        >>> within = Polygon([(1, 1), (8, 1), (8, 8), (1, 8)])
        >>> fit_to(poly, within).area
        9.0
    """
    fitted = fit_most(polygon, within, tolerance, config, engine)
    if fitted is None:
        return None
    return fit_among(fitted, among, tolerance, config, engine)


def fits(
    polygon: PolygonLike,
    within: Optional[PolygonLike] = None,
    among: Optional[Sequence[PolygonLike]] = None,
    config: Optional[GeometryConfig] = None,
) -> bool:
    """True if ``within`` covers ``polygon`` and no polygon in ``among`` intersects it."""
    polygon = as_polygon(polygon)
    if within is not None:
        epsilon = resolve_config(config).epsilon
        if not _covers(as_polygon(within, 'within'), polygon, epsilon):
            return False
    return not intersects(polygon, among)


def non_intersecting(
    placed: Optional[Sequence[PolygonLike]],
    polygons: Sequence[PolygonLike],
) -> List[Polygon]:
    """Return the polygons that do not intersect any already placed polygon."""
    placed_polys = _optional_polygon_list(placed, 'placed')
    return [
        polygon for polygon in (as_polygon(p) for p in polygons)
        if not intersects(polygon, placed_polys)
    ]


__all__ = [
    'merge',
    'differences',
    'intersections',
    'intersects',
    'fit_within',
    'fit_most',
    'fit_among',
    'fit_to',
    'fits',
    'non_intersecting',
]
