"""Value types shared by the registry, engine, context and transformer"""
from dataclasses import dataclass
from enum import Enum


class Direction(Enum):
    """Which way an operation runs: forward maps pivot -> CRS, inverse maps CRS -> pivot"""
    FORWARD = "forward"
    INVERSE = "inverse"


@dataclass(frozen=True)
class OperationHandle:
    """Reference to a compiled operation inside the OperationContext that produced it"""
    index: int
    context_id: int


@dataclass
class Coordinate:
    """Working coordinate in double precision, mutated in place by the engine"""
    x: float
    y: float

    def as_tuple(self) -> tuple[float, float]:
        return self.x, self.y
