"""
Operation Engine

Compiles CRS definition strings into executable coordinate operations and
applies them to coordinate buffers. Every compiled operation maps the pivot
CRS to the CRS it was compiled from, so FORWARD goes pivot -> CRS and
INVERSE goes CRS -> pivot.

Coordinates are exchanged in the native axis units of each CRS (degrees for
EPSG:4326, grads for EPSG:4807, metres for projected systems). Whether a side
of an operation is angular, and how many radians one of its units spans, is
recorded on the compiled operation so callers can normalize units from the
operation's own metadata.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List
import logging

from pyproj import CRS, Transformer, network
from pyproj.enums import TransformDirection
from pyproj.exceptions import CRSError, ProjError

from .exceptions import ConfigurationError, EngineError
from .models import Coordinate, Direction

logger = logging.getLogger(__name__)


@dataclass
class CompiledOperation:
    """Engine-independent description of a compiled operation"""
    definition: str
    name: str
    is_angular: bool
    # Radians per native angular unit of the CRS side; unused for linear units
    radians_per_unit: float = 1.0


@dataclass
class PyprojOperation(CompiledOperation):
    transformer: Any = None


class OperationEngine(ABC):
    """Abstract operation engine"""

    @abstractmethod
    def compile(self, definition: str) -> CompiledOperation:
        """Build an executable operation from a definition string

        Raises:
            EngineError: If the definition cannot be compiled
        """
        pass

    @abstractmethod
    def apply(self, operation: CompiledOperation, direction: Direction, buffer: List[Coordinate]) -> None:
        """Run an operation over every coordinate in the buffer, in place

        Raises:
            EngineError: If the operation fails for any coordinate
        """
        pass


_PYPROJ_DIRECTIONS = {
    Direction.FORWARD: TransformDirection.FORWARD,
    Direction.INVERSE: TransformDirection.INVERSE,
}


def configure_proj_network(enabled: bool) -> None:
    """Allow or forbid PROJ grid downloads from the CDN.

    This is process-wide PROJ state shared by every engine and context, so it
    is set once at startup rather than per engine.
    """
    network.set_network_enabled(enabled)
    logger.debug(f"PROJ network access {'enabled' if enabled else 'disabled'}")


class PyprojEngine(OperationEngine):
    """Operation engine backed by pyproj/PROJ

    Not thread-safe: pyproj Transformer objects must stay on the thread
    that uses them.
    """

    def __init__(self, pivot_epsg: int = 4326):
        try:
            self.pivot = CRS.from_epsg(pivot_epsg)
        except CRSError as e:
            raise ConfigurationError("PIVOT_EPSG", str(e)) from e
        if not self.pivot.is_geographic:
            raise ConfigurationError("PIVOT_EPSG", f"EPSG:{pivot_epsg} is not a geographic CRS")

        logger.debug(f"PyprojEngine initialized with pivot {self.pivot.name}")

    def compile(self, definition: str) -> PyprojOperation:
        try:
            crs = CRS.from_user_input(definition)
            transformer = Transformer.from_crs(self.pivot, crs, always_xy=True)
        except (CRSError, ProjError) as e:
            logger.error(f"Failed to compile operation: {e}")
            raise EngineError(e) from e

        radians_per_unit = 1.0
        if crs.is_geographic:
            radians_per_unit = crs.axis_info[0].unit_conversion_factor

        logger.debug(f"Compiled operation {transformer.description!r} for {crs.name}")
        return PyprojOperation(
            definition=definition,
            name=crs.name,
            is_angular=crs.is_geographic,
            radians_per_unit=radians_per_unit,
            transformer=transformer,
        )

    def apply(self, operation: PyprojOperation, direction: Direction, buffer: List[Coordinate]) -> None:
        xs = [coord.x for coord in buffer]
        ys = [coord.y for coord in buffer]
        try:
            # Values stay in the native axis units of each CRS
            out_x, out_y = operation.transformer.transform(
                xs, ys,
                errcheck=True,
                direction=_PYPROJ_DIRECTIONS[direction],
            )
        except ProjError as e:
            raise EngineError(e) from e

        for coord, x, y in zip(buffer, out_x, out_y):
            coord.x = x
            coord.y = y
