"""Polyshaper - Polygon algebra and shaping library.

This library provides Boolean set operations over polygons (backed by an exact
integer clipping engine), area-matched scaling, convex hulls and vertex
simplification, using Shapely geometries.
"""

import logging

# Polygon algebra
from .algebra import (
    merge,
    differences,
    intersections,
    intersects,
    fit_within,
    fit_most,
    fit_among,
    fit_to,
    fits,
    non_intersecting,
)

# Area matching
from .area import (
    expand_to_area,
    rectangle_by_area,
    rectangle_by_ratio,
)

# Convex hull
from .hull import make_hull, convex_hull_from_polygons

# Simplification functions
from .simplify import (
    simplify,
    simplify_radial_distance,
    simplify_douglas_peucker,
    simplify_geometry,
)

# Fixed-point conversion
from .convert import (
    to_fixed_path,
    from_fixed_path,
    to_fixed_paths,
    from_fixed_paths,
)

# Clipping engine
from .clipping import ClippingEngine, PyclipperEngine

# Core types (enums)
from .core import (
    FillRule,
    ClipOperation,
    Anchor,
)

# Core exceptions
from .core import (
    PolyshaperError,
    ValidationError,
    ConfigurationError,
    ClippingError,
    AreaMatchWarning,
)

# Configuration and orientation helpers
from .core import (
    GeometryConfig,
    DEFAULT_CONFIG,
    signed_area,
    is_clockwise,
    ensure_ccw,
    anchor_point,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Polygon algebra
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

    # Area matching
    'expand_to_area',
    'rectangle_by_area',
    'rectangle_by_ratio',

    # Convex hull
    'make_hull',
    'convex_hull_from_polygons',

    # Simplification
    'simplify',
    'simplify_radial_distance',
    'simplify_douglas_peucker',
    'simplify_geometry',

    # Fixed-point conversion
    'to_fixed_path',
    'from_fixed_path',
    'to_fixed_paths',
    'from_fixed_paths',

    # Clipping engine
    'ClippingEngine',
    'PyclipperEngine',

    # Enums
    'FillRule',
    'ClipOperation',
    'Anchor',

    # Exceptions
    'PolyshaperError',
    'ValidationError',
    'ConfigurationError',
    'ClippingError',
    'AreaMatchWarning',

    # Configuration and orientation
    'GeometryConfig',
    'DEFAULT_CONFIG',
    'signed_area',
    'is_clockwise',
    'ensure_ccw',
    'anchor_point',
]
