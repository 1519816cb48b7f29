"""Apply a vertex-array function to every coordinate sequence of a geometry."""

from typing import Callable

import numpy as np
from shapely.geometry import (
    GeometryCollection,
    LinearRing,
    LineString,
    MultiLineString,
    MultiPolygon,
    Point,
    MultiPoint,
    Polygon,
)
from shapely.geometry.base import BaseGeometry

VertexFunc = Callable[..., np.ndarray]


def process_geometry(geometry: BaseGeometry, func: VertexFunc, **kwargs) -> BaseGeometry:
    """Rebuild ``geometry`` after passing each of its vertex arrays through ``func``.

    ``func`` receives an (N, 2|3) array and returns a new array. Polygon rings
    are passed closed (first vertex repeated at the end). Points are returned
    unchanged.

    Args:
        geometry: Any shapely geometry
        func: Vertex array transform
        **kwargs: Extra keyword arguments forwarded to ``func``

    Returns:
        Geometry of the same type built from the transformed vertices

    Examples:
        >>> line = LineString([(0, 0), (1, 0), (2, 0)])
        >>> process_geometry(line, lambda v: v[[0, -1]]).coords[:]
        [(0.0, 0.0), (2.0, 0.0)]
    """
    if geometry.is_empty or isinstance(geometry, (Point, MultiPoint)):
        return geometry

    if isinstance(geometry, LinearRing):
        return LinearRing(func(np.asarray(geometry.coords), **kwargs))

    if isinstance(geometry, LineString):
        return LineString(func(np.asarray(geometry.coords), **kwargs))

    if isinstance(geometry, Polygon):
        exterior = func(np.asarray(geometry.exterior.coords), **kwargs)
        holes = [func(np.asarray(ring.coords), **kwargs) for ring in geometry.interiors]
        return Polygon(exterior, holes=holes)

    if isinstance(geometry, MultiLineString):
        return MultiLineString([process_geometry(g, func, **kwargs) for g in geometry.geoms])

    if isinstance(geometry, MultiPolygon):
        return MultiPolygon([process_geometry(g, func, **kwargs) for g in geometry.geoms])

    if isinstance(geometry, GeometryCollection):
        return GeometryCollection([process_geometry(g, func, **kwargs) for g in geometry.geoms])

    raise TypeError(f"Unsupported geometry type: {geometry.geom_type}")


__all__ = ['process_geometry']
