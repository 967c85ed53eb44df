"""Application settings from environment variables.

Centralized environment variable parsing and validation.
"""

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Application settings from environment.

    Handles parsing, validation, and defaults for all env vars.
    """

    # Run configuration file
    config_path: str = field(default="config.yaml")

    # Logging
    log_level: str = field(default="INFO")
    log_colors: bool = field(default=True)

    # MCP transport
    transport: str = field(default="stdio")
    http_host: str = field(default="127.0.0.1")
    http_port: int = field(default=8000)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from BOOMERANG_* environment variables.

        Returns:
            Settings instance with values from environment
        """
        return cls(
            config_path=os.getenv("BOOMERANG_CONFIG", "config.yaml"),
            log_level=os.getenv("BOOMERANG_LOG_LEVEL", "INFO").upper(),
            log_colors=cls._get_bool("BOOMERANG_LOG_COLORS", True),
            transport=cls._get_transport(),
            http_host=os.getenv("BOOMERANG_HTTP_HOST", "127.0.0.1"),
            http_port=cls._get_int("BOOMERANG_HTTP_PORT", 8000),
        )

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        """Get integer from environment.

        Args:
            key: Environment variable key
            default: Default value if not set

        Returns:
            Integer value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default

        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid int for %s: %s, using default %d", key, value, default)
            return default

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() in ("1", "true", "yes", "on")

    @staticmethod
    def _get_transport() -> str:
        """Get MCP transport ("http" or "stdio") from environment."""
        transport = os.getenv("BOOMERANG_TRANSPORT", "").lower()
        if transport in ("http", "stdio"):
            return transport
        return "stdio"
