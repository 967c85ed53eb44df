"""Configuration module for Boomerang.

Provides focused classes for different configuration concerns:
- Config: Main configuration class (aggregates all components)
- RunConfigParser: Parses the YAML run configuration
- KnownHostsStore: Resolves trusted SSH host keys
- Settings: Environment variable configuration
"""

from boomerang.config.host_keys import HostKeyLookupError, KnownHostsStore
from boomerang.config.main import Config
from boomerang.config.parser import ConfigError, RunConfigParser, RunOptions
from boomerang.config.settings import Settings

__all__ = [
    "Config",
    "ConfigError",
    "HostKeyLookupError",
    "KnownHostsStore",
    "RunConfigParser",
    "RunOptions",
    "Settings",
]
