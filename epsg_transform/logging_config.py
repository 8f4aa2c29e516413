import logging
import json
import sys
from datetime import datetime, timezone
from typing import Optional
import os

# Attributes every LogRecord carries; anything else was passed through `extra`
_RESERVED_ATTRS = frozenset((
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'exc_info', 'exc_text', 'stack_info', 'lineno', 'funcName',
    'created', 'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'taskName', 'message', 'asctime',
))


class StructuredJSONFormatter(logging.Formatter):
    """Formatter emitting one JSON object per log record"""

    def __init__(self, service_name: str = "epsg-transform"):
        super().__init__()
        self.service_name = service_name
        self.hostname = os.environ.get('HOSTNAME', 'localhost')

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON"""

        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "service": self.service_name,
            "hostname": self.hostname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Pipeline context promoted to top-level keys
        if hasattr(record, 'epsg_code'):
            log_entry["epsg_code"] = record.epsg_code
        if hasattr(record, 'coordinates'):
            log_entry["coordinates"] = record.coordinates

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info)
            }

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key in ('epsg_code', 'coordinates'):
                continue
            if not key.startswith('_'):
                log_entry.setdefault("extra", {})[key] = value

        return json.dumps(log_entry, default=str, separators=(',', ':'))


class DevelopmentFormatter(logging.Formatter):
    """Human-readable formatter for development"""

    def __init__(self):
        super().__init__(
            fmt='%(asctime)s | %(levelname)8s | %(name)20s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )


def setup_logging(
    level: str = "INFO",
    use_json: Optional[bool] = None,
    service_name: str = "epsg-transform"
) -> None:
    """Setup logging configuration for epsg-transform tools"""

    if use_json is None:
        use_json = os.environ.get('LOG_FORMAT', '').lower() == 'json'

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # stderr keeps stdout free for transformed output
    console_handler = logging.StreamHandler(sys.stderr)

    if use_json:
        formatter = StructuredJSONFormatter(service_name)
    else:
        formatter = DevelopmentFormatter()

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    configure_pipeline_loggers(level)

    logger = logging.getLogger(__name__)
    logger.debug(
        "Logging configured",
        extra={
            "log_format": "json" if use_json else "development",
            "log_level": level,
            "service": service_name
        }
    )


def configure_pipeline_loggers(level: str) -> None:
    """Configure specific loggers for pipeline components"""

    loggers = [
        'epsg_transform.registry',
        'epsg_transform.engine',
        'epsg_transform.resolver',
        'epsg_transform.operation_context',
        'epsg_transform.transformer',
        'epsg_transform.cli',
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(getattr(logging, level.upper()))

    # Suppress noisy third-party loggers
    logging.getLogger('pyproj').setLevel(logging.WARNING)
    logging.getLogger('shapely').setLevel(logging.WARNING)


def get_crs_logger(name: str, epsg_code: int) -> logging.LoggerAdapter:
    """Get logger that tags every record with an EPSG code"""
    logger = logging.getLogger(name)

    class ContextAdapter(logging.LoggerAdapter):
        def process(self, msg, kwargs):
            extra = dict(kwargs.get('extra') or {})
            extra['epsg_code'] = epsg_code
            kwargs['extra'] = extra
            return msg, kwargs

    return ContextAdapter(logger, {})
