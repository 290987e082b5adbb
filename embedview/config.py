"""Runtime settings, read from the environment (and a local .env file)."""

import logging
import os
from datetime import datetime

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError, field_validator

from embedview.views import EmbedViewError

logger = logging.getLogger(__name__)

# No outcome from the frame within this many seconds counts as a failed load
EMBED_TIMEOUT_SECONDS = 10.0

# pt-BR renders time of day as HH:MM:SS (24h)
DEFAULT_TIMESTAMP_FORMAT = "%H:%M:%S"

_LOG_LEVELS = {"critical", "error", "warning", "info", "debug", "trace"}


class Settings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "info"
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT
    embed_timeout: float = EMBED_TIMEOUT_SECONDS

    @field_validator("port")
    @classmethod
    def _check_port(cls, value: int) -> int:
        if not 0 < value < 65536:
            raise ValueError(f"port out of range: {value}")
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in _LOG_LEVELS:
            raise ValueError(f"unknown log level: {value}")
        return value

    @field_validator("timestamp_format")
    @classmethod
    def _check_timestamp_format(cls, value: str) -> str:
        if not datetime(2000, 1, 1).strftime(value):
            raise ValueError("timestamp format renders an empty string")
        return value

    @field_validator("embed_timeout")
    @classmethod
    def _check_embed_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError(f"embed timeout must be positive, got {value}")
        return value


_ENV_KEYS = {
    "host": "EMBEDVIEW_HOST",
    "port": "EMBEDVIEW_PORT",
    "log_level": "EMBEDVIEW_LOG_LEVEL",
    "timestamp_format": "EMBEDVIEW_TIMESTAMP_FORMAT",
    "embed_timeout": "EMBEDVIEW_EMBED_TIMEOUT",
}


def load_settings(env: dict[str, str] | None = None) -> Settings:
    """Build Settings from EMBEDVIEW_* variables.

    With no explicit mapping, a .env file in the working directory is loaded
    first and then os.environ is read. Unset variables keep their defaults.
    """
    if env is None:
        load_dotenv()
        env = dict(os.environ)

    values = {field: env[key] for field, key in _ENV_KEYS.items() if env.get(key)}
    try:
        settings = Settings(**values)
    except ValidationError as e:
        raise EmbedViewError(f"Invalid embedview configuration: {e}") from e

    logger.debug(f"Loaded settings: {settings.model_dump()}")
    return settings
