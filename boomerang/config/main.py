"""Application configuration.

Delegates to specialized components:
- Settings: Environment variables
- RunConfigParser: Reads the YAML run configuration
- KnownHostsStore: Trusted host keys
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from boomerang.config.host_keys import KnownHostsStore
from boomerang.config.parser import RunConfigParser, RunOptions
from boomerang.config.settings import Settings
from boomerang.models import Command

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """Application configuration.

    Aggregates environment settings and the run configuration file.
    """

    settings: Settings
    options: RunOptions
    _trust_store: KnownHostsStore | None = field(default=None, init=False, repr=False)

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> "Config":
        """Create config from environment and the run configuration file.

        Args:
            config_path: YAML file to read; falls back to BOOMERANG_CONFIG

        Returns:
            Loaded Config

        Raises:
            ConfigError: If the configuration file is invalid
        """
        settings = Settings.from_env()
        path = config_path or settings.config_path
        options = RunConfigParser(path).parse()
        return cls(settings=settings, options=options)

    @property
    def commands(self) -> list[Command]:
        return self.options.commands

    @property
    def trust_store(self) -> KnownHostsStore | None:
        """Known-hosts store, or None when host key checking is disabled."""
        if not self.options.host_key_check:
            return None
        if self._trust_store is None:
            self._trust_store = KnownHostsStore(self.options.known_hosts)
        return self._trust_store
