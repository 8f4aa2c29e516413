"""Operation Context: owns compiled operations and applies them by handle"""
import itertools
import logging
from typing import Dict, List, Optional

from .config import Settings, get_settings
from .engine import CompiledOperation, OperationEngine, PyprojEngine
from .exceptions import ContextClosedError, ForeignHandleError
from .models import Coordinate, Direction, OperationHandle
from .registry import CrsRegistry, PyprojRegistry
from .resolver import resolve as resolve_code

logger = logging.getLogger(__name__)

_context_ids = itertools.count(1)


class OperationContext:
    """Table of compiled operations addressed by OperationHandle.

    A context is either owned by a single Transformer or shared between many,
    in which case the caller keeps it open for as long as any of them is used.
    Operations are only added during resolution; afterwards the context is
    read-mostly. Not thread-safe: use one context per worker thread or guard
    a shared one with a lock.
    """

    def __init__(
        self,
        engine: Optional[OperationEngine] = None,
        registry: Optional[CrsRegistry] = None,
        settings: Optional[Settings] = None,
    ):
        if engine is None:
            settings = settings or get_settings()
            engine = PyprojEngine(settings.PIVOT_EPSG)
        self.engine = engine
        self.registry = registry if registry is not None else PyprojRegistry()
        self.context_id = next(_context_ids)

        self._operations: List[CompiledOperation] = []
        self._handles_by_definition: Dict[str, OperationHandle] = {}
        self._closed = False

        logger.debug(f"OperationContext {self.context_id} created")

    @property
    def closed(self) -> bool:
        return self._closed

    def resolve(self, code: int) -> OperationHandle:
        """Resolve an EPSG code through the registry into this context"""
        self._ensure_open()
        return resolve_code(self, code)

    def register(self, definition: str) -> OperationHandle:
        """Compile a definition and register it, reusing the handle of an identical definition"""
        self._ensure_open()
        handle = self._handles_by_definition.get(definition)
        if handle is not None:
            return handle

        operation = self.engine.compile(definition)
        handle = OperationHandle(index=len(self._operations), context_id=self.context_id)
        self._operations.append(operation)
        self._handles_by_definition[definition] = handle
        logger.debug(f"Registered operation {handle.index} ({operation.name}) in context {self.context_id}")
        return handle

    def owns(self, handle: OperationHandle) -> bool:
        return handle.context_id == self.context_id and 0 <= handle.index < len(self._operations)

    def operation(self, handle: OperationHandle) -> CompiledOperation:
        self._ensure_open()
        if not self.owns(handle):
            raise ForeignHandleError(handle)
        return self._operations[handle.index]

    def is_angular(self, handle: OperationHandle) -> bool:
        """Whether the CRS side of the operation is expressed in angular units"""
        return self.operation(handle).is_angular

    def radians_per_unit(self, handle: OperationHandle) -> float:
        """Radians spanned by one native angular unit of the operation's CRS side"""
        return self.operation(handle).radians_per_unit

    def apply(self, handle: OperationHandle, direction: Direction, coord: Coordinate) -> None:
        """Apply an operation to a single coordinate in place

        Raises:
            EngineError: If the engine fails
            ForeignHandleError: If the handle was produced by another context
            ContextClosedError: If the context has been closed
        """
        self.engine.apply(self.operation(handle), direction, [coord])

    def close(self) -> None:
        """Drop all compiled operations; handles into this context become unusable"""
        if not self._closed:
            self._operations.clear()
            self._handles_by_definition.clear()
            self._closed = True
            logger.debug(f"OperationContext {self.context_id} closed")

    def get_cache_stats(self) -> Dict[str, int]:
        """Get compiled operation statistics for monitoring"""
        return {
            "compiled_operations": len(self._operations),
            "cached_definitions": len(self._handles_by_definition),
        }

    def _ensure_open(self) -> None:
        if self._closed:
            raise ContextClosedError()

    def __enter__(self) -> "OperationContext":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
