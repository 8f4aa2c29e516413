"""Coordinate mapping over shapely geometries and GeoJSON mappings.

`map_coordinates` rebuilds a geometry with every (x, y) pair passed through a
function, leaving the structure untouched: ring counts, points per ring,
sub-geometry order, empty parts, feature properties and extra ordinates
(Z, M) all carry over. Coordinates are visited in document order (exterior
ring before holes, points in ring order, parts in collection order) and the
first exception raised by the function aborts the whole mapping.
"""
import copy
from typing import Any, Callable, Dict, Sequence, Tuple

from shapely.geometry import (
    GeometryCollection,
    LinearRing,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)
from shapely.geometry.base import BaseGeometry

from .exceptions import UnsupportedGeometryError

CoordinateFunc = Callable[[Any, Any], Tuple[Any, Any]]

# Nesting depth of the "coordinates" member for each GeoJSON geometry type
GEOJSON_COORDINATE_DEPTH: Dict[str, int] = {
    "Point": 0,
    "MultiPoint": 1,
    "LineString": 1,
    "Polygon": 2,
    "MultiLineString": 2,
    "MultiPolygon": 3,
}


def map_coordinates(geometry, func: CoordinateFunc):
    """Return a copy of `geometry` with `func(x, y)` applied to every coordinate.

    Args:
        geometry: shapely geometry, or a GeoJSON geometry, Feature or
            FeatureCollection mapping (plain dict or geojson object)
        func: receives the x and y components, returns the new pair

    Raises:
        UnsupportedGeometryError: If `geometry` is not a supported geometry
        Exception: Whatever `func` raises first, unchanged
    """
    if isinstance(geometry, BaseGeometry):
        return _map_shapely(geometry, func)
    if isinstance(geometry, dict):
        return _map_geojson(geometry, func)
    raise UnsupportedGeometryError(geometry)


def _map_position(position: Sequence, func: CoordinateFunc) -> tuple:
    x, y = func(position[0], position[1])
    return (x, y, *position[2:])


def _map_shapely(geometry: BaseGeometry, func: CoordinateFunc) -> BaseGeometry:
    if geometry.is_empty:
        # shapely geometries are immutable, so sharing the empty value is safe
        return geometry

    if isinstance(geometry, Point):
        return Point(_map_position(geometry.coords[0], func))
    if isinstance(geometry, LinearRing):
        return LinearRing([_map_position(p, func) for p in geometry.coords])
    if isinstance(geometry, LineString):
        return LineString([_map_position(p, func) for p in geometry.coords])
    if isinstance(geometry, Polygon):
        shell = [_map_position(p, func) for p in geometry.exterior.coords]
        holes = [[_map_position(p, func) for p in ring.coords] for ring in geometry.interiors]
        return Polygon(shell, holes)
    if isinstance(geometry, MultiPoint):
        return MultiPoint([_map_shapely(part, func) for part in geometry.geoms])
    if isinstance(geometry, MultiLineString):
        return MultiLineString([_map_shapely(part, func) for part in geometry.geoms])
    if isinstance(geometry, MultiPolygon):
        return MultiPolygon([_map_shapely(part, func) for part in geometry.geoms])
    if isinstance(geometry, GeometryCollection):
        return GeometryCollection([_map_shapely(part, func) for part in geometry.geoms])

    raise UnsupportedGeometryError(geometry)


def _map_nested(coordinates, depth: int, func: CoordinateFunc, geometry: dict) -> list:
    if not isinstance(coordinates, (list, tuple)):
        raise UnsupportedGeometryError(geometry)
    if depth == 0:
        if len(coordinates) < 2:
            raise UnsupportedGeometryError(geometry)
        return list(_map_position(coordinates, func))
    return [_map_nested(item, depth - 1, func, geometry) for item in coordinates]


def _map_geojson(obj: dict, func: CoordinateFunc) -> dict:
    kind = obj.get("type")
    # copy.copy keeps geojson object classes without re-running their constructors
    result = copy.copy(obj)

    if kind == "FeatureCollection":
        result["features"] = [_map_geojson(feature, func) for feature in obj.get("features", [])]
    elif kind == "Feature":
        geometry = obj.get("geometry")
        result["geometry"] = None if geometry is None else _map_geojson(geometry, func)
    elif kind == "GeometryCollection":
        result["geometries"] = [_map_geojson(part, func) for part in obj.get("geometries", [])]
    elif kind in GEOJSON_COORDINATE_DEPTH:
        if "coordinates" not in obj:
            raise UnsupportedGeometryError(obj)
        coordinates = obj["coordinates"]
        depth = GEOJSON_COORDINATE_DEPTH[kind]
        if depth == 0 and isinstance(coordinates, (list, tuple)) and len(coordinates) == 0:
            # empty Point
            result["coordinates"] = []
        else:
            result["coordinates"] = _map_nested(coordinates, depth, func, obj)
    else:
        raise UnsupportedGeometryError(obj)

    return result
