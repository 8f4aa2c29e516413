"""
Transformer: two-stage reprojection between a pair of EPSG codes

Every compiled operation maps the pivot CRS to its own CRS. Moving a
coordinate from source to target therefore runs the source operation
INVERSE (source -> pivot) followed by the target operation FORWARD
(pivot -> target).
"""
import logging
from typing import Optional, Tuple

from .config import Settings, get_settings
from .coordinate_mapper import map_coordinates
from .engine import OperationEngine
from .exceptions import TransformError, UnknownCrsCodeError
from .models import Coordinate, Direction, OperationHandle
from .operation_context import OperationContext
from .registry import CrsRegistry
from .scalars import from_double, to_double

logger = logging.getLogger(__name__)


class Transformer:
    """Reprojects geometries from a source CRS to a target CRS.

    Built once per (source, target) pair and reused; `transform` never
    re-resolves. The transformer either owns its OperationContext (created by
    `setup`, closed with the transformer) or borrows one supplied to
    `from_handles`, which the caller must keep open while the transformer is
    in use.

    Input coordinates are taken in the source CRS's native axis units and
    output is produced in the target CRS's native units (degrees for
    EPSG:4326, grads for EPSG:4807). With OUTPUT_ANGULAR_UNITS="radians" an
    angular target is rescaled once on the way out, by the radians-per-unit
    factor of the target operation itself; a projected target is never
    rescaled.
    """

    def __init__(
        self,
        context: OperationContext,
        source: OperationHandle,
        target: OperationHandle,
        owns_context: bool = False,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        self.context = context
        self.source = source
        self.target = target
        self.owns_context = owns_context
        self.angular_units = settings.OUTPUT_ANGULAR_UNITS

        # Raises ForeignHandleError for handles from another context
        context.operation(source)
        context.operation(target)
        self._output_factor = None
        if self.angular_units == "radians" and context.is_angular(target):
            self._output_factor = context.radians_per_unit(target)

    @classmethod
    def setup(
        cls,
        source_code: int,
        target_code: int,
        *,
        registry: Optional[CrsRegistry] = None,
        engine: Optional[OperationEngine] = None,
        settings: Optional[Settings] = None,
    ) -> "Transformer":
        """Resolve both EPSG codes into a freshly owned context

        Raises:
            UnknownCrsCodeError: If either code is unknown; nothing is compiled
            EngineError: If either definition fails to compile
        """
        settings = settings or get_settings()
        context = OperationContext(engine=engine, registry=registry, settings=settings)

        # Both codes are checked before anything is compiled
        for code in (source_code, target_code):
            if context.registry.lookup(code) is None:
                context.close()
                logger.error(f"Cannot set up transformer EPSG:{source_code} -> EPSG:{target_code}: unknown EPSG:{code}")
                raise UnknownCrsCodeError(code)

        try:
            source = context.resolve(source_code)
            target = context.resolve(target_code)
        except TransformError:
            context.close()
            raise

        logger.info(f"Transformer ready: EPSG:{source_code} -> EPSG:{target_code}")
        return cls(context, source, target, owns_context=True, settings=settings)

    @classmethod
    def from_handles(
        cls,
        context: OperationContext,
        source: OperationHandle,
        target: OperationHandle,
        settings: Optional[Settings] = None,
    ) -> "Transformer":
        """Build a transformer over handles already resolved in a shared context"""
        return cls(context, source, target, owns_context=False, settings=settings)

    def transform(self, geometry):
        """Return `geometry` reprojected into the target CRS.

        The input is never modified. On failure the first error in traversal
        order is raised and the caller's geometry is left as it was.

        Raises:
            ScalarToDoubleConversionError: A component is not a finite number
            EngineError: The engine failed on a coordinate
            DoubleToScalarConversionError: A result does not fit the input scalar type
            UnsupportedGeometryError: `geometry` is not a supported geometry
        """
        return map_coordinates(geometry, self.transform_coordinate)

    transform_geometry = transform

    def transform_coordinate(self, x, y) -> Tuple:
        """Reproject a single coordinate, keeping the scalar types of x and y"""
        coord = Coordinate(to_double(x), to_double(y))

        self.context.apply(self.source, Direction.INVERSE, coord)
        self.context.apply(self.target, Direction.FORWARD, coord)

        if self._output_factor is not None:
            coord.x, coord.y = coord.x * self._output_factor, coord.y * self._output_factor

        return from_double(coord.x, x), from_double(coord.y, y)

    def close(self) -> None:
        """Close the context if this transformer owns it"""
        if self.owns_context:
            self.context.close()

    def __enter__(self) -> "Transformer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        source = self.context.operation(self.source).name if not self.context.closed else "?"
        target = self.context.operation(self.target).name if not self.context.closed else "?"
        return f"Transformer({source!r} -> {target!r})"


def lookup_epsg_code(
    code: int,
    *,
    registry: Optional[CrsRegistry] = None,
    engine: Optional[OperationEngine] = None,
    settings: Optional[Settings] = None,
) -> Tuple[OperationContext, OperationHandle]:
    """Resolve a single EPSG code into a new context for raw operation access

    Raises:
        UnknownCrsCodeError: If the code is unknown
        EngineError: If the definition fails to compile
    """
    context = OperationContext(engine=engine, registry=registry, settings=settings)
    try:
        handle = context.resolve(code)
    except TransformError:
        context.close()
        raise
    return context, handle
