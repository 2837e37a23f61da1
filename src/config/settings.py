"""
Configuration settings for the People Directory Backend
"""

import os
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

# Load environment variables from .env file (real environment wins)
load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Configure logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

PORT = int(os.getenv("PORT", 8080))

REQUIRED_DATABASE_VARIABLES = ["DB_HOST", "DB_PORT", "DB_USERNAME", "DB_PASSWORD", "DB_NAME"]


def _parse_int(environ: Mapping[str, str], name: str, default: Optional[int] = None) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        if default is None:
            raise ValueError(f"{name} environment variable is required")
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class DatabaseConfig:
    """Connection settings for the PostgreSQL backing store"""

    host: str
    port: int
    user: str
    password: str
    database: str
    ssl_mode: str = "disable"
    pool_min_size: int = 1
    pool_max_size: int = 10
    command_timeout: int = 60

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None) -> "DatabaseConfig":
        """
        Build the database configuration from environment variables

        Raises:
            ValueError: if a required variable is missing or a numeric one
                does not parse
        """
        if environ is None:
            environ = os.environ

        missing = [name for name in REQUIRED_DATABASE_VARIABLES if not environ.get(name)]
        if missing:
            raise ValueError(f"Missing required database configuration: {', '.join(missing)}")

        port = _parse_int(environ, "DB_PORT")
        if not 0 < port < 65536:
            raise ValueError(f"DB_PORT out of range: {port}")

        config = cls(
            host=environ["DB_HOST"],
            port=port,
            user=environ["DB_USERNAME"],
            password=environ["DB_PASSWORD"],
            database=environ["DB_NAME"],
            ssl_mode=environ.get("DB_SSLMODE") or "disable",
            pool_min_size=_parse_int(environ, "DB_POOL_MIN_SIZE", 1),
            pool_max_size=_parse_int(environ, "DB_POOL_MAX_SIZE", 10),
            command_timeout=_parse_int(environ, "DB_COMMAND_TIMEOUT", 60),
        )
        if config.pool_min_size > config.pool_max_size:
            raise ValueError("DB_POOL_MIN_SIZE cannot exceed DB_POOL_MAX_SIZE")
        return config

    def describe(self) -> str:
        """Connection target without credentials, for logs"""
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


# Validate database configuration at import; missing values abort startup
database_config = DatabaseConfig.from_environment()
logger.info(f"Database target: {database_config.describe()} (sslmode={database_config.ssl_mode})")

# CORS settings
ALLOWED_ORIGINS = [origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",") if origin.strip()]

# Error log settings
LOG_REQUEST_BODIES = os.getenv("LOG_REQUEST_BODIES", "true").lower() in ("1", "true", "yes")
LOG_BODY_MAX_SIZE = int(os.getenv("LOG_BODY_MAX_SIZE", 5000))
