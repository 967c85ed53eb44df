"""Run configuration file parser.

Reads the YAML file that names the inventory, the authentication method,
connection tuning, report output options and the command list.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from boomerang.models import Command

logger = logging.getLogger(__name__)

AUTH_METHODS = ("key", "agent", "password")


class ConfigError(Exception):
    """Run configuration is missing, unreadable or invalid."""

    pass


@dataclass
class RunOptions:
    """Options read from the run configuration file."""

    inventory: str
    auth: str
    commands: list[Command]
    key_location: str | None = None
    key_passphrase: str | None = field(default=None, repr=False)
    password: str | None = field(default=None, repr=False)
    agent_ssh_auth: str = "SSH_AUTH_SOCK"
    host_key_check: bool = True
    known_hosts: str = field(
        default_factory=lambda: str(Path.home() / ".ssh" / "known_hosts")
    )
    connection_timeout: float = 10
    retry: int = 1
    retry_wait: float = 15
    run_type: str = ""
    output_dir: str = "raw"
    json_prefix: str = "raw"
    indent_json: bool = True
    keep_latest_file_only: bool = False


class RunConfigParser:
    """Parser for Boomerang's YAML run configuration."""

    def __init__(self, config_path: Path | str):
        """Initialize parser.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)

    def parse(self) -> RunOptions:
        """Read, validate and convert the configuration file.

        Returns:
            Parsed RunOptions

        Raises:
            ConfigError: If the file or any option is invalid
        """
        data = self._load()

        inventory = data.get("inventory")
        if not inventory:
            raise ConfigError("config file is missing inventory option")

        auth = data.get("auth")
        if not auth:
            raise ConfigError(
                "missing valid auth option. Available options: key, agent or password"
            )
        auth = str(auth).lower()
        if auth not in AUTH_METHODS:
            raise ConfigError(
                f"unsupported auth method: {auth}. Must use key, agent or password"
            )

        key_location = data.get("key_location")
        if auth == "key" and not key_location:
            raise ConfigError("must include key_location when auth=key")

        password = data.get("password")
        if auth == "password" and not password:
            raise ConfigError("must include password when auth=password")

        options = RunOptions(
            inventory=str(inventory),
            auth=auth,
            commands=self._parse_commands(data.get("commands")),
            key_location=os.path.expanduser(str(key_location)) if key_location else None,
            key_passphrase=data.get("key_passphrase"),
            password=str(password) if password else None,
            agent_ssh_auth=str(data.get("agent_ssh_auth") or "SSH_AUTH_SOCK"),
            host_key_check=self._get_bool(data, "host_key_check", True),
            connection_timeout=self._get_non_negative(data, "connection_timeout", 10),
            retry=int(self._get_non_negative(data, "retry", 1)),
            retry_wait=self._get_non_negative(data, "retry_wait", 15),
            run_type=str(data.get("type") or ""),
            output_dir=str(data.get("output_dir") or "raw"),
            json_prefix=str(data.get("json_prefix") or "raw"),
            indent_json=self._get_bool(data, "indent_json", True),
            keep_latest_file_only=self._get_bool(data, "keep_latest_file_only", False),
        )
        if known_hosts := data.get("known_hosts"):
            options.known_hosts = os.path.expanduser(str(known_hosts))

        logger.info(
            "Loaded config %s: auth=%s, %d command(s), host_key_check=%s",
            self.config_path,
            options.auth,
            len(options.commands),
            options.host_key_check,
        )
        return options

    def _load(self) -> dict[str, Any]:
        """Read the YAML document into a mapping."""
        try:
            stat = self.config_path.stat()
        except OSError as e:
            raise ConfigError(f"could not locate config file: {self.config_path}") from e

        if not self.config_path.is_file() or stat.st_size == 0:
            raise ConfigError(
                f"{self.config_path} contains [{stat.st_size}] bytes and may be "
                f"empty or is not a regular file"
            )

        try:
            content = self.config_path.read_text()
            data = yaml.safe_load(content)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"could not read config file {self.config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"{self.config_path} must contain a mapping of options")

        logger.debug("Read config from %s", self.config_path)
        return data

    def _parse_commands(self, raw: Any) -> list[Command]:
        """Convert ``[{name: command}, ...]`` into Command objects.

        Entries whose name or command is not a string are skipped with a
        warning.
        """
        if raw is None:
            raise ConfigError("could not find commands key in config file")
        if not isinstance(raw, list) or not raw:
            raise ConfigError("no commands specified in config file")

        commands: list[Command] = []
        for entry in raw:
            if not isinstance(entry, dict):
                logger.warning("[%s] is not a name: command mapping, ignoring it", entry)
                continue
            for name, command_line in entry.items():
                if not isinstance(name, str):
                    logger.warning(
                        "[%s] is not a string. Command name will be ignored, check config file",
                        name,
                    )
                    continue
                if not isinstance(command_line, str):
                    logger.warning(
                        "[%s] is not a string. Command will be ignored, check config file",
                        command_line,
                    )
                    continue
                commands.append(Command(name=name, command_line=command_line))

        if not commands:
            raise ConfigError("could not generate list of commands from config file")

        return commands

    @staticmethod
    def _get_bool(data: dict[str, Any], key: str, default: bool) -> bool:
        value = data.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        return str(value).lower() in ("1", "true", "yes", "on")

    @staticmethod
    def _get_non_negative(data: dict[str, Any], key: str, default: float) -> float:
        """Read a duration or count that must be zero or positive."""
        value = data.get(key)
        if value is None:
            return default
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"{key} must be a number, got [{value}]")
        if value < 0:
            raise ConfigError(
                "connection_timeout, retry_wait or retry must be a positive value"
            )
        return value
