"""
epsg-transform: reproject geometries between EPSG coordinate reference systems.

Resolves EPSG codes into pyproj-backed operations and composes them through a
geographic pivot CRS to move shapely geometries and GeoJSON mappings from one
system into another.
"""

from .coordinate_mapper import map_coordinates
from .engine import configure_proj_network
from .exceptions import (
    ConfigurationError,
    ContextClosedError,
    DoubleToScalarConversionError,
    EngineError,
    ForeignHandleError,
    ScalarToDoubleConversionError,
    TransformError,
    UnknownCrsCodeError,
    UnsupportedGeometryError,
)
from .models import Coordinate, Direction, OperationHandle
from .operation_context import OperationContext
from .transformer import Transformer, lookup_epsg_code

__all__ = [
    'Transformer',
    'lookup_epsg_code',
    'OperationContext',
    'OperationHandle',
    'Direction',
    'Coordinate',
    'map_coordinates',
    'configure_proj_network',
    'TransformError',
    'UnknownCrsCodeError',
    'EngineError',
    'ScalarToDoubleConversionError',
    'DoubleToScalarConversionError',
    'ForeignHandleError',
    'ContextClosedError',
    'UnsupportedGeometryError',
    'ConfigurationError',
]
