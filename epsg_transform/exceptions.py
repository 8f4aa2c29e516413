"""
Custom Exception Hierarchy for epsg-transform

Every failure raised by the transformation pipeline derives from TransformError
so callers can catch the whole family in one place. Nothing in the pipeline is
retried: registry lookups, compilation and coordinate operations are
deterministic, so a failure is permanent for its input.
"""


class TransformError(Exception):
    """Base exception for all coordinate transformation errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnknownCrsCodeError(TransformError):
    """Raised when the registry has no definition for an EPSG code"""

    def __init__(self, code: int):
        super().__init__(f"Unknown EPSG code: {code}")
        self.code = code


class EngineError(TransformError):
    """Raised when the operation engine fails to compile or apply an operation"""

    def __init__(self, inner: BaseException):
        super().__init__(f"Geodesy error: {inner}")
        self.inner = inner


class ScalarToDoubleConversionError(TransformError):
    """Raised when a coordinate component cannot be represented as a finite float"""

    def __init__(self, value):
        super().__init__("Could not convert number to f64")
        self.value = value


class DoubleToScalarConversionError(TransformError):
    """Raised when a transformed float cannot be represented in the caller's scalar type"""

    def __init__(self, value: float, scalar_type: type):
        super().__init__("Could not convert number from f64")
        self.value = value
        self.scalar_type = scalar_type


class ForeignHandleError(TransformError):
    """Raised when an operation handle is used with a context that did not produce it"""

    def __init__(self, handle):
        super().__init__(f"Operation handle {handle.index} belongs to another context")
        self.handle = handle


class ContextClosedError(TransformError):
    """Raised when a closed operation context is used"""

    def __init__(self):
        super().__init__("Operation context is closed")


class ConfigurationError(TransformError):
    """Raised when settings are invalid"""

    def __init__(self, config_field: str, reason: str):
        super().__init__(f"Configuration error in {config_field}: {reason}")
        self.config_field = config_field
        self.reason = reason


class UnsupportedGeometryError(TransformError):
    """Raised when the coordinate mapper is given something that is not a geometry"""

    def __init__(self, geometry):
        kind = geometry.get("type") if isinstance(geometry, dict) else type(geometry).__name__
        super().__init__(f"Unsupported geometry type: {kind}")
        self.geometry = geometry
