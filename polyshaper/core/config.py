"""Precision settings shared by the fixed-point conversion and tolerance checks."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from .errors import ConfigurationError


@dataclass(frozen=True)
class GeometryConfig:
    """Fixed-point scale and point-equality epsilon.

    Attributes:
        scale: Factor applied to float coordinates before integer clipping.
            Scaled coordinates must stay within the engine range of about
            4.6e18, so the default of 1e12 handles coordinates up to about
            4.6e6 in magnitude. Larger inputs need a smaller scale (1e6
            handles up to about 4.6e12); out-of-range input raises
            ClippingError.
        epsilon: Tolerance for point equality, zero-length edges and
            convergence stalls.

    Examples:
        >>> from polyshaper import merge, GeometryConfig
        >>> coarse = GeometryConfig(scale=1e6)
        >>> result = merge(polygons, config=coarse)
    """

    scale: float = 1e12
    epsilon: float = 1e-9

    def __post_init__(self) -> None:
        if not self.scale > 0:
            raise ConfigurationError(f"scale must be positive, got {self.scale}")
        if not self.epsilon >= 0:
            raise ConfigurationError(f"epsilon must be non-negative, got {self.epsilon}")

    def with_scale(self, scale: float) -> GeometryConfig:
        return replace(self, scale=scale)

    def with_epsilon(self, epsilon: float) -> GeometryConfig:
        return replace(self, epsilon=epsilon)


DEFAULT_CONFIG = GeometryConfig()


def resolve_config(config: Optional[GeometryConfig]) -> GeometryConfig:
    """Return ``config`` or the library default when ``None``."""
    return DEFAULT_CONFIG if config is None else config


__all__ = [
    'GeometryConfig',
    'DEFAULT_CONFIG',
    'resolve_config',
]
