from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List


class ConfigurationError(RuntimeError):
    """Raised when required configuration is missing or malformed."""


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - DATABASE_URL: SQLAlchemy database URL (required)
    - PORT: port to listen on (default: 4000)
    - HOST: interface to bind (default: 0.0.0.0)
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: root log level (default: INFO)
    - SQL_ECHO: 'true' to echo SQL statements (default: false)
    """

    database_url: str
    port: int = 4000
    host: str = "0.0.0.0"
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    sql_echo: bool = False


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value.strip() == "":
        return default
    return value


def _parse_bool(value: str, default: bool = False) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_port(value: str) -> int:
    try:
        port = int(value.strip())
    except ValueError:
        raise ConfigurationError(f"PORT must be an integer, got {value!r}") from None
    if not 0 < port < 65536:
        raise ConfigurationError(f"PORT must be between 1 and 65535, got {port}")
    return port


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """
    Return application settings loaded from environment variables.

    Raises:
        ConfigurationError: if DATABASE_URL is absent or PORT is not a valid port.
    """
    database_url = os.getenv("DATABASE_URL", "").strip()
    if not database_url:
        raise ConfigurationError("DATABASE_URL environment variable is required")

    return Settings(
        database_url=database_url,
        port=_parse_port(_get_env("PORT", "4000")),
        host=_get_env("HOST", "0.0.0.0").strip(),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        sql_echo=_parse_bool(_get_env("SQL_ECHO", "false"), False),
    )
