"""Area-matched scaling and rectangle construction."""

import logging
import math
import warnings
from typing import Optional, Sequence, Union

from shapely.affinity import scale
from shapely.geometry import Polygon, box

from .algebra import fit_among, fit_most, fits, intersects
from .clipping import ClippingEngine
from .core.config import GeometryConfig, resolve_config
from .core.errors import AreaMatchWarning, ValidationError
from .core.geometry_utils import PolygonLike, anchor_point, as_polygon, ensure_ccw, near_equal
from .core.types import Anchor, coerce_enum

logger = logging.getLogger(__name__)


def _area_matches(current: float, target: float, tolerance: float) -> bool:
    return abs(current - target) <= tolerance * target


def expand_to_area(
    polygon: PolygonLike,
    area: float,
    tolerance: float = 0.1,
    anchor: Union[Anchor, str] = Anchor.C,
    within: Optional[PolygonLike] = None,
    among: Optional[Sequence[PolygonLike]] = None,
    max_iterations: int = 100,
    config: Optional[GeometryConfig] = None,
    engine: Optional[ClippingEngine] = None,
) -> Optional[Polygon]:
    """Scale a polygon toward a target area while respecting a boundary and obstacles.

    Each iteration scales the candidate uniformly about ``anchor`` by
    ``sqrt(area / current)``, clips it to ``within`` when it spills over,
    subtracts ``among`` when it overlaps, and measures the new area. The loop
    ends when one of these holds:

    - ``|current - area| <= tolerance * area``
    - the area no longer changes between iterations (stalled against the
      boundary or obstacles; the stalled polygon is a valid result)
    - ``max_iterations`` is reached; the candidate closest to the target is
      returned and an :class:`AreaMatchWarning` is emitted

    The anchor point is taken once from the input's bounding box, so repeated
    calls with the same arguments are deterministic.

    Args:
        polygon: Polygon to expand (or shrink)
        area: Target area
        tolerance: Accepted deviation as a fraction of ``area`` (default: 0.1)
        anchor: Bounding-box position held fixed while scaling (default: center)
        within: Optional boundary the result must stay inside
        among: Optional obstacles the result must not overlap
        max_iterations: Iteration cap (default: 100)
        config: Fixed-point precision and stall epsilon
        engine: Clipping engine used by the fit steps

    Returns:
        Counter-clockwise polygon, or None if a fit step left nothing

    Raises:
        ValidationError: If ``polygon`` is None, ``area <= 0``,
            ``tolerance < 0`` or ``max_iterations < 1``

    Examples:
        >>> square = Polygon([(0, 0), (4, 0), (4, 4), (0, 4)])
        >>> round(expand_to_area(square, 20.0).area, 6)
        20.0
    """
    if polygon is None:
        raise ValidationError("polygon is required")
    if area <= 0:
        raise ValidationError(f"area must be positive, got {area}")
    if tolerance < 0:
        raise ValidationError(f"tolerance must be non-negative, got {tolerance}")
    if max_iterations < 1:
        raise ValidationError(f"max_iterations must be at least 1, got {max_iterations}")

    config = resolve_config(config)
    anchor = coerce_enum(anchor, Anchor)
    candidate = ensure_ccw(as_polygon(polygon))
    current = candidate.area
    if current <= 0:
        raise ValidationError("polygon has no area to scale")
    if _area_matches(current, area, tolerance):
        return candidate

    origin = anchor_point(candidate, anchor)
    best: Optional[Polygon] = None

    for iteration in range(1, max_iterations + 1):
        factor = math.sqrt(area / current)
        candidate = scale(candidate, xfact=factor, yfact=factor, origin=origin)

        if within is not None and not fits(candidate, within=within, config=config):
            candidate = fit_most(candidate, within, config=config, engine=engine)
            if candidate is None:
                logger.debug("Iteration %d: nothing left inside boundary", iteration)
                return None

        if intersects(candidate, among):
            candidate = fit_among(candidate, among, config=config, engine=engine)
            if candidate is None:
                logger.debug("Iteration %d: obstacles cover the candidate", iteration)
                return None

        previous, current = current, candidate.area
        logger.debug("Iteration %d: area %.6g (factor %.6g)", iteration, current, factor)

        if best is None or abs(current - area) < abs(best.area - area):
            best = candidate

        if _area_matches(current, area, tolerance):
            return candidate

        if near_equal(previous, current, config.epsilon * max(1.0, current)):
            logger.debug("Area stalled at %.6g after %d iteration(s)", current, iteration)
            return candidate

    message = "expand_to_area stopped at its iteration cap"
    logger.warning("%s: area %.6g, target %.6g", message, best.area, area)
    warnings.warn(AreaMatchWarning(message, best.area, area, max_iterations), stacklevel=2)
    return best


def rectangle_by_area(area: float = 1.0, ratio: float = 1.0) -> Polygon:
    """Rectangle of the given area with ``width / depth == ratio``.

    The southwest corner sits at the origin.

    Examples:
        >>> rectangle_by_area(8.0, 2.0).bounds
        (0.0, 0.0, 4.0, 2.0)
    """
    if area <= 0:
        raise ValidationError(f"area must be positive, got {area}")
    if ratio <= 0:
        raise ValidationError(f"ratio must be positive, got {ratio}")
    width = math.sqrt(area * ratio)
    return box(0.0, 0.0, width, area / width)


def rectangle_by_ratio(ratio: float = 1.0) -> Polygon:
    """Rectangle one unit wide and ``ratio`` units deep, southwest corner at the origin."""
    if ratio <= 0:
        raise ValidationError(f"ratio must be positive, got {ratio}")
    return box(0.0, 0.0, 1.0, ratio)


__all__ = [
    'expand_to_area',
    'rectangle_by_area',
    'rectangle_by_ratio',
]
