"""Core types and utilities for polyshaper.

This module provides type definitions, enums, exceptions, configuration and
the orientation/tolerance helpers used throughout the library.
"""

from .types import (
    FillRule,
    ClipOperation,
    Anchor,
    coerce_enum,
)

from .errors import (
    PolyshaperError,
    ValidationError,
    ConfigurationError,
    ClippingError,
    AreaMatchWarning,
)

from .config import (
    GeometryConfig,
    DEFAULT_CONFIG,
)

from .geometry_utils import (
    signed_area,
    is_clockwise,
    ensure_ccw,
    near_equal,
    anchor_point,
)

__all__ = [
    # Enums
    'FillRule',
    'ClipOperation',
    'Anchor',
    'coerce_enum',

    # Exceptions
    'PolyshaperError',
    'ValidationError',
    'ConfigurationError',
    'ClippingError',
    'AreaMatchWarning',

    # Configuration
    'GeometryConfig',
    'DEFAULT_CONFIG',

    # Orientation / tolerance
    'signed_area',
    'is_clockwise',
    'ensure_ccw',
    'near_equal',
    'anchor_point',
]
