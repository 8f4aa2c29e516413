"""CRS Resolver: turns an EPSG code into a ready-to-use operation handle"""
from typing import Optional, TYPE_CHECKING

from .exceptions import EngineError, UnknownCrsCodeError
from .logging_config import get_crs_logger
from .models import OperationHandle
from .registry import CrsRegistry

if TYPE_CHECKING:
    from .operation_context import OperationContext


def resolve(context: "OperationContext", code: int, registry: Optional[CrsRegistry] = None) -> OperationHandle:
    """Resolve an EPSG code into an operation handle registered in `context`

    Args:
        context: Context that will own the compiled operation
        code: EPSG code to resolve
        registry: Registry to consult (defaults to the context's registry)

    Returns:
        Handle valid only inside `context`

    Raises:
        UnknownCrsCodeError: If the registry does not know the code
        EngineError: If the definition cannot be compiled
    """
    log = get_crs_logger(__name__, code)
    registry = registry if registry is not None else context.registry

    definition = registry.lookup(code)
    if definition is None:
        log.error(f"Unknown EPSG code: {code}")
        raise UnknownCrsCodeError(code)

    try:
        handle = context.register(definition)
    except EngineError:
        log.error(f"Failed to compile definition for EPSG:{code}")
        raise

    log.debug(f"Resolved EPSG:{code} to operation {handle.index}")
    return handle
