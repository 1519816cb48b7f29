"""Exceptions and warnings raised by polyshaper.

Geometric degeneracy (slivers, collapsed or self-intersecting fragments) is
never raised; it is filtered out of results or reported as ``None``. The
classes here cover programmer errors and engine failures only.
"""


class PolyshaperError(Exception):
    """Base class for all polyshaper errors."""
    pass


class ValidationError(PolyshaperError, ValueError):
    """Raised when an argument is invalid (missing polygon, non-positive area...)."""
    pass


class ConfigurationError(PolyshaperError, ValueError):
    """Raised when a GeometryConfig holds unusable values."""
    pass


class ClippingError(PolyshaperError):
    """Raised when the clipping engine fails to execute an operation."""
    pass


class AreaMatchWarning(UserWarning):
    """Emitted when expand_to_area stops at its iteration cap."""

    def __init__(self, message: str, area: float, target: float, iterations: int):
        super().__init__(message)
        self.area = area
        self.target = target
        self.iterations = iterations

    def __str__(self) -> str:
        return (
            f"{self.args[0]} (area={self.area:.6g}, target={self.target:.6g}, "
            f"iterations={self.iterations})"
        )


__all__ = [
    'PolyshaperError',
    'ValidationError',
    'ConfigurationError',
    'ClippingError',
    'AreaMatchWarning',
]
