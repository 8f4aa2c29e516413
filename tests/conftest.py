"""
Shared test fixtures for the epsg-transform test suite.
Provides a fake operation engine and registry so the pipeline can be tested
without PROJ, plus settings and real pyproj-backed fixtures.
"""
import math
from dataclasses import dataclass
from typing import List, Optional

import pytest

from epsg_transform.config import Settings
from epsg_transform.engine import CompiledOperation, OperationEngine
from epsg_transform.exceptions import EngineError
from epsg_transform.models import Coordinate, Direction
from epsg_transform.operation_context import OperationContext
from epsg_transform.registry import StaticRegistry


class FakeCodes:
    """EPSG-like codes known to the fake registry."""
    GEOGRAPHIC = 1000   # angular identity, degrees
    GRADIAN = 7000      # angular, degrees -> grads (x * 10 / 9)
    GRID = 2000         # projected: x * 1000 + 500, y * 1000
    SHIFTED = 3000      # projected: x * 2 + 10, y * 2 - 10
    BROKEN = 4000       # definition the fake engine refuses to compile
    FRAGILE = 5000      # fails for |x| > 100 in the pivot
    HUGE = 6000         # projected: x * 1e40, overflows float32
    UNKNOWN = 9999


FAKE_DEFINITIONS = {
    FakeCodes.GEOGRAPHIC: f"linear name=geographic angular=1 unit={math.pi / 180!r}",
    FakeCodes.GRADIAN: f"linear name=gradian angular=1 scale={10 / 9!r} unit={math.pi / 200!r}",
    FakeCodes.GRID: "linear name=grid scale=1000 dx=500",
    FakeCodes.SHIFTED: "linear name=shifted scale=2 dx=10 dy=-10",
    FakeCodes.BROKEN: "spline name=broken",
    FakeCodes.FRAGILE: "linear name=fragile fail_above=100",
    FakeCodes.HUGE: "linear name=huge scale=1e40",
}


@dataclass
class FakeOperation(CompiledOperation):
    scale: float = 1.0
    dx: float = 0.0
    dy: float = 0.0
    fail_above: Optional[float] = None


class FakeEngine(OperationEngine):
    """Engine running affine operations parsed from 'linear key=value ...' strings.

    FORWARD computes (x * scale + dx, y * scale + dy); INVERSE undoes it.
    Every compile and apply call is recorded for assertions.
    """

    def __init__(self):
        self.compiled: List[str] = []
        self.applied: List[tuple] = []

    def compile(self, definition: str) -> FakeOperation:
        self.compiled.append(definition)
        kind, *pairs = definition.split()
        params = dict(pair.split("=", 1) for pair in pairs)
        if kind != "linear":
            raise EngineError(ValueError(f"unsupported operation kind: {kind}"))
        return FakeOperation(
            definition=definition,
            name=params.get("name", definition),
            is_angular=params.get("angular") == "1",
            radians_per_unit=float(params.get("unit", 1.0)),
            scale=float(params.get("scale", 1.0)),
            dx=float(params.get("dx", 0.0)),
            dy=float(params.get("dy", 0.0)),
            fail_above=float(params["fail_above"]) if "fail_above" in params else None,
        )

    def apply(self, operation: FakeOperation, direction: Direction, buffer: List[Coordinate]) -> None:
        for coord in buffer:
            self.applied.append((operation.name, direction, (coord.x, coord.y)))
            if direction is Direction.FORWARD:
                if operation.fail_above is not None and abs(coord.x) > operation.fail_above:
                    raise EngineError(ValueError("point outside projection domain"))
                coord.x = coord.x * operation.scale + operation.dx
                coord.y = coord.y * operation.scale + operation.dy
            else:
                coord.x = (coord.x - operation.dx) / operation.scale
                coord.y = (coord.y - operation.dy) / operation.scale


@pytest.fixture
def settings():
    """Settings isolated from any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def radian_settings():
    """Settings returning angular output in radians."""
    return Settings(_env_file=None, OUTPUT_ANGULAR_UNITS="radians")


@pytest.fixture
def codes():
    return FakeCodes


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def fake_registry():
    return StaticRegistry(FAKE_DEFINITIONS)


@pytest.fixture
def fake_context(fake_engine, fake_registry):
    """Operation context over the fake engine and registry."""
    with OperationContext(engine=fake_engine, registry=fake_registry) as context:
        yield context


@pytest.fixture
def copenhagen():
    """Copenhagen city hall as (longitude, latitude) in WGS 84."""
    return 12.568, 55.676


@pytest.fixture(autouse=True)
def suppress_logging():
    """Suppress logging during tests to reduce noise."""
    import logging
    logging.disable(logging.CRITICAL)
    yield
    logging.disable(logging.NOTSET)


@pytest.fixture
def grid_forward():
    """Expected output of FakeCodes.GEOGRAPHIC -> FakeCodes.GRID for degree input."""
    def expected(lon_deg: float, lat_deg: float) -> tuple:
        return lon_deg * 1000 + 500, lat_deg * 1000
    return expected
