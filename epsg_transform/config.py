from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal
from dotenv import load_dotenv

from .exceptions import ConfigurationError

# Explicitly load .env file to ensure environment variables are available
load_dotenv()

MAX_EPSG_CODE = 0xFFFF


class Settings(BaseSettings):
    # Pivot representation every compiled operation maps from
    PIVOT_EPSG: int = Field(
        default=4326,
        description="EPSG code of the geographic CRS used as the common pivot"
    )

    # Units of angular (geographic) coordinates returned to callers
    OUTPUT_ANGULAR_UNITS: Literal["native", "radians"] = Field(
        default="native",
        description="native keeps the target CRS's own angular unit, radians rescales geographic output"
    )

    # Process-wide; applied once at startup with configure_proj_network
    PROJ_NETWORK_ENABLED: bool = Field(
        default=False,
        description="Allow PROJ to download transformation grids from the CDN"
    )

    LOG_LEVEL: str = Field(default="INFO", description="Root log level")
    LOG_FORMAT: Literal["development", "json"] = Field(
        default="development",
        description="development (human readable) or json (structured lines)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding='utf-8',
        extra="ignore"
    )

    @field_validator('PIVOT_EPSG')
    @classmethod
    def validate_epsg_range(cls, v):
        """EPSG codes are unsigned 16-bit values."""
        if not 0 < v <= MAX_EPSG_CODE:
            raise ValueError(f"EPSG code must be between 1 and {MAX_EPSG_CODE}, got {v}")
        return v

    @field_validator('PROJ_NETWORK_ENABLED', mode='before')
    @classmethod
    def parse_boolean(cls, v):
        """Handle string boolean values from environment variables."""
        if isinstance(v, bool):
            return v
        if isinstance(v, str):
            return v.lower() in ('true', '1', 'yes', 'on', 't', 'y')
        return bool(v)

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f"Unknown log level: {v}")
        return level


def get_settings(**overrides) -> Settings:
    """Build settings from the environment, raising ConfigurationError when invalid."""
    try:
        return Settings(**overrides)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "settings"
        raise ConfigurationError(field, first["msg"]) from e
