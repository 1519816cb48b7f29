"""Clipping engine interface and the default pyclipper-backed implementation.

polyshaper never evaluates Boolean predicates itself. Any object satisfying
:class:`ClippingEngine` can be passed to the algebra functions; by default the
Clipper library is used through pyclipper.
"""

import logging
from typing import List, Protocol, Sequence, Tuple

import pyclipper

from .core.errors import ClippingError
from .core.types import ClipOperation, FillRule, coerce_enum

logger = logging.getLogger(__name__)

IntPath = Sequence[Tuple[int, int]]

# Largest coordinate magnitude Clipper accepts (its hiRange).
MAX_COORDINATE = 0x3FFFFFFFFFFFFFFF


class ClippingEngine(Protocol):
    """Exact Boolean clipping over closed integer paths."""

    def execute(
        self,
        operation: ClipOperation,
        subject_paths: Sequence[IntPath],
        clip_paths: Sequence[IntPath],
        fill_rule: FillRule,
    ) -> List[List[Tuple[int, int]]]:
        ...


_CLIP_TYPES = {
    ClipOperation.UNION: pyclipper.CT_UNION,
    ClipOperation.DIFFERENCE: pyclipper.CT_DIFFERENCE,
    ClipOperation.INTERSECTION: pyclipper.CT_INTERSECTION,
}

_FILL_TYPES = {
    FillRule.EVEN_ODD: pyclipper.PFT_EVENODD,
    FillRule.NON_ZERO: pyclipper.PFT_NONZERO,
    FillRule.POSITIVE: pyclipper.PFT_POSITIVE,
    FillRule.NEGATIVE: pyclipper.PFT_NEGATIVE,
}


class PyclipperEngine:
    """ClippingEngine backed by pyclipper.

    A fresh ``pyclipper.Pyclipper`` is created per call. Paths Clipper
    refuses as closed polygons (collinear or too short) are skipped.
    The same fill rule is applied to subject and clip paths.

    Examples:
        >>> engine = PyclipperEngine()
        >>> square = [(0, 0), (10, 0), (10, 10), (0, 10)]
        >>> paths = engine.execute(ClipOperation.UNION, [square], [], FillRule.NON_ZERO)
        >>> len(paths)
        1
    """

    def execute(
        self,
        operation: ClipOperation,
        subject_paths: Sequence[IntPath],
        clip_paths: Sequence[IntPath],
        fill_rule: FillRule,
    ) -> List[List[Tuple[int, int]]]:
        operation = coerce_enum(operation, ClipOperation)
        fill_rule = coerce_enum(fill_rule, FillRule)

        _check_range(subject_paths)
        _check_range(clip_paths)

        clipper = pyclipper.Pyclipper()
        added = _add_paths(clipper, subject_paths, pyclipper.PT_SUBJECT)
        _add_paths(clipper, clip_paths, pyclipper.PT_CLIP)
        if not added:
            return []

        fill = _FILL_TYPES[fill_rule]
        try:
            solution = clipper.Execute(_CLIP_TYPES[operation], fill, fill)
        except pyclipper.ClipperException as exc:
            raise ClippingError(f"{operation.value} failed: {exc}") from exc

        return [[(int(x), int(y)) for x, y in path] for path in solution]


def _check_range(paths: Sequence[IntPath]) -> None:
    """Reject paths Clipper cannot represent.

    Clipper aborts the process instead of raising on out-of-range
    coordinates, so they are caught before AddPath.
    """
    for path in paths:
        for x, y in path:
            if abs(x) > MAX_COORDINATE or abs(y) > MAX_COORDINATE:
                raise ClippingError(
                    f"Fixed-point coordinate ({x}, {y}) exceeds the clipping range "
                    f"of {MAX_COORDINATE}; use a smaller GeometryConfig.scale"
                )


def _add_paths(clipper: 'pyclipper.Pyclipper', paths: Sequence[IntPath], poly_type: int) -> int:
    added = 0
    for path in paths:
        try:
            clipper.AddPath(list(path), poly_type, True)
        except pyclipper.ClipperException:
            logger.debug("Clipper rejected a degenerate path of %d points", len(path))
            continue
        added += 1
    return added


DEFAULT_ENGINE = PyclipperEngine()


__all__ = [
    'ClippingEngine',
    'PyclipperEngine',
    'DEFAULT_ENGINE',
    'MAX_COORDINATE',
]
