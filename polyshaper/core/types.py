"""Type definitions for polyshaper operations.

This module defines enums for the strategy-like parameters used throughout
the library, plus a helper for accepting either enum members or their
string values.
"""

from enum import Enum
from typing import Type, TypeVar, Union

E = TypeVar('E', bound=Enum)


class FillRule(Enum):
    """Rule deciding which regions count as inside when paths overlap.

    Attributes:
        EVEN_ODD: Regions covered an odd number of times are inside
        NON_ZERO: Regions with a non-zero winding number are inside (default)
        POSITIVE: Regions with a positive winding number are inside
        NEGATIVE: Regions with a negative winding number are inside

    Examples:
        >>> from polyshaper import merge, FillRule
        >>> result = merge(polygons, fill_rule=FillRule.EVEN_ODD)
    """
    EVEN_ODD = 'even_odd'
    NON_ZERO = 'non_zero'
    POSITIVE = 'positive'
    NEGATIVE = 'negative'


class ClipOperation(Enum):
    """Boolean operation submitted to a clipping engine.

    Attributes:
        UNION: Area covered by subject or clip paths
        DIFFERENCE: Area covered by subject paths but not clip paths
        INTERSECTION: Area covered by both subject and clip paths
    """
    UNION = 'union'
    DIFFERENCE = 'difference'
    INTERSECTION = 'intersection'


class Anchor(Enum):
    """Reference positions on a polygon's axis-aligned bounding box.

    Used as the fixed point when scaling a polygon uniformly.

    Attributes:
        C: Center of the box
        N: Midpoint of the top (maximum Y) side
        NE: Maximum X, maximum Y corner
        E: Midpoint of the right (maximum X) side
        SE: Maximum X, minimum Y corner
        S: Midpoint of the bottom (minimum Y) side
        SW: Minimum X, minimum Y corner
        W: Midpoint of the left (minimum X) side
        NW: Minimum X, maximum Y corner

    Examples:
        >>> from polyshaper import expand_to_area, Anchor
        >>> grown = expand_to_area(poly, area=20.0, anchor=Anchor.SW)
    """
    C = 'c'
    N = 'n'
    NE = 'ne'
    E = 'e'
    SE = 'se'
    S = 's'
    SW = 'sw'
    W = 'w'
    NW = 'nw'


def coerce_enum(value: Union[E, str], enum_type: Type[E]) -> E:
    """Return ``value`` as a member of ``enum_type``.

    Accepts an enum member or its string value (case-insensitive).

    Raises:
        ValueError: If ``value`` does not name a member of ``enum_type``
    """
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        lowered = value.lower()
        for member in enum_type:
            if member.value == lowered:
                return member
    choices = ', '.join(repr(m.value) for m in enum_type)
    raise ValueError(f"Unknown {enum_type.__name__}: {value!r} (expected one of {choices})")


__all__ = [
    'FillRule',
    'ClipOperation',
    'Anchor',
    'coerce_enum',
]
