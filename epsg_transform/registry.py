"""CRS registry: maps EPSG codes to operation definition strings"""
from abc import ABC, abstractmethod
from typing import Dict, Optional
import logging

from pyproj import CRS
from pyproj.exceptions import CRSError

from .config import MAX_EPSG_CODE

logger = logging.getLogger(__name__)


def is_epsg_code(code) -> bool:
    """True for integers that fit the unsigned 16-bit EPSG code space"""
    return isinstance(code, int) and not isinstance(code, bool) and 0 <= code <= MAX_EPSG_CODE


class CrsRegistry(ABC):
    """
    Abstract registry of CRS definitions.

    Lookups are pure: the same code always yields the same definition, or
    None when the code is unknown.
    """

    @abstractmethod
    def lookup(self, code: int) -> Optional[str]:
        """Return the definition string for an EPSG code, or None if unknown"""
        pass


class StaticRegistry(CrsRegistry):
    """Registry backed by an in-memory mapping of code -> definition"""

    def __init__(self, definitions: Optional[Dict[int, str]] = None):
        self._definitions: Dict[int, str] = dict(definitions or {})

    def add(self, code: int, definition: str) -> None:
        if not is_epsg_code(code):
            raise ValueError(f"EPSG code must be an integer between 0 and {MAX_EPSG_CODE}, got {code!r}")
        self._definitions[code] = definition

    def lookup(self, code: int) -> Optional[str]:
        if not is_epsg_code(code):
            return None
        return self._definitions.get(code)


class PyprojRegistry(CrsRegistry):
    """Registry backed by the EPSG tables in the PROJ database shipped with pyproj

    Definitions are WKT2 strings so no information is lost on the way to the
    engine. Results (including misses) are cached per code.
    """

    def __init__(self):
        self._cache: Dict[int, Optional[str]] = {}

    def lookup(self, code: int) -> Optional[str]:
        if not is_epsg_code(code):
            logger.debug(f"EPSG code out of range: {code!r}")
            return None
        if code not in self._cache:
            try:
                self._cache[code] = CRS.from_epsg(code).to_wkt()
                logger.debug(f"Loaded definition for EPSG:{code}")
            except CRSError as e:
                logger.debug(f"No CRS definition for EPSG:{code}: {e}")
                self._cache[code] = None
        return self._cache[code]

    def get_cache_stats(self) -> Dict[str, int]:
        """Get registry cache statistics for monitoring"""
        return {
            "cached_codes": len(self._cache),
            "known_codes": sum(1 for definition in self._cache.values() if definition is not None),
        }
