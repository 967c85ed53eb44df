"""Tests for the YAML run configuration parser."""

from pathlib import Path

import pytest

from boomerang.config import ConfigError, RunConfigParser
from boomerang.models import Command

BASE = """\
inventory: hosts.json
auth: password
password: secret
commands:
  - uptime: uptime
  - disk: df -h /
"""


def write_config(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(content)
    return path


class TestRunConfigParser:
    """Tests for RunConfigParser.parse."""

    def test_minimal_config_uses_defaults(self, tmp_path: Path) -> None:
        """Unset options take their documented defaults."""
        options = RunConfigParser(write_config(tmp_path, BASE)).parse()

        assert options.inventory == "hosts.json"
        assert options.auth == "password"
        assert options.password == "secret"
        assert options.commands == [
            Command(name="uptime", command_line="uptime"),
            Command(name="disk", command_line="df -h /"),
        ]
        assert options.host_key_check is True
        assert options.connection_timeout == 10
        assert options.retry == 1
        assert options.retry_wait == 15
        assert options.output_dir == "raw"
        assert options.json_prefix == "raw"
        assert options.indent_json is True
        assert options.keep_latest_file_only is False
        assert options.agent_ssh_auth == "SSH_AUTH_SOCK"

    def test_all_options(self, tmp_path: Path) -> None:
        """Every option is read."""
        content = """\
inventory: https://cmdb.example.com/hosts
auth: KEY
key_location: ~/.ssh/id_ed25519
key_passphrase: pass
host_key_check: false
known_hosts: ~/custom_known_hosts
connection_timeout: 3
retry: 2
retry_wait: 0.5
type: audit
output_dir: reports
json_prefix: fleet
indent_json: false
keep_latest_file_only: true
commands:
  - hostname: hostname
"""
        options = RunConfigParser(write_config(tmp_path, content)).parse()

        assert options.auth == "key"
        assert options.key_location == str(Path.home() / ".ssh" / "id_ed25519")
        assert options.key_passphrase == "pass"
        assert options.host_key_check is False
        assert options.known_hosts == str(Path.home() / "custom_known_hosts")
        assert options.connection_timeout == 3
        assert options.retry == 2
        assert options.retry_wait == 0.5
        assert options.run_type == "audit"
        assert options.output_dir == "reports"
        assert options.json_prefix == "fleet"
        assert options.indent_json is False
        assert options.keep_latest_file_only is True

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file is a config error."""
        with pytest.raises(ConfigError, match="could not locate config file"):
            RunConfigParser(tmp_path / "nope.yaml").parse()

    def test_empty_file(self, tmp_path: Path) -> None:
        """An empty file is a config error."""
        with pytest.raises(ConfigError, match="may be empty"):
            RunConfigParser(write_config(tmp_path, "")).parse()

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        """The document must be a mapping."""
        with pytest.raises(ConfigError, match="mapping"):
            RunConfigParser(write_config(tmp_path, "- a\n- b\n")).parse()

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Broken YAML is a config error."""
        with pytest.raises(ConfigError, match="could not read config file"):
            RunConfigParser(write_config(tmp_path, "inventory: [unclosed\n")).parse()

    def test_missing_inventory(self, tmp_path: Path) -> None:
        """inventory is required."""
        content = BASE.replace("inventory: hosts.json\n", "")
        with pytest.raises(ConfigError, match="inventory"):
            RunConfigParser(write_config(tmp_path, content)).parse()

    def test_unknown_auth(self, tmp_path: Path) -> None:
        """Only key, agent and password are accepted."""
        content = BASE.replace("auth: password", "auth: kerberos")
        with pytest.raises(ConfigError, match="unsupported auth method"):
            RunConfigParser(write_config(tmp_path, content)).parse()

    def test_key_auth_requires_location(self, tmp_path: Path) -> None:
        """auth=key needs key_location."""
        content = BASE.replace("auth: password", "auth: key")
        with pytest.raises(ConfigError, match="key_location"):
            RunConfigParser(write_config(tmp_path, content)).parse()

    def test_password_auth_requires_password(self, tmp_path: Path) -> None:
        """auth=password needs password."""
        content = BASE.replace("password: secret\n", "")
        with pytest.raises(ConfigError, match="must include password"):
            RunConfigParser(write_config(tmp_path, content)).parse()

    def test_negative_retry(self, tmp_path: Path) -> None:
        """Negative tuning values are rejected."""
        with pytest.raises(ConfigError, match="must be a positive value"):
            RunConfigParser(write_config(tmp_path, BASE + "retry: -1\n")).parse()

    def test_non_numeric_timeout(self, tmp_path: Path) -> None:
        """Tuning values must be numbers."""
        with pytest.raises(ConfigError, match="must be a number"):
            RunConfigParser(
                write_config(tmp_path, BASE + "connection_timeout: soon\n")
            ).parse()

    def test_missing_commands(self, tmp_path: Path) -> None:
        """A config without commands is rejected."""
        content = "inventory: hosts.json\nauth: password\npassword: x\n"
        with pytest.raises(ConfigError, match="commands"):
            RunConfigParser(write_config(tmp_path, content)).parse()

    def test_non_string_commands_are_skipped(self, tmp_path: Path) -> None:
        """Entries with a non-string command are ignored."""
        content = BASE + "  - broken: 42\n  - 7: uptime\n"
        options = RunConfigParser(write_config(tmp_path, content)).parse()
        assert [c.name for c in options.commands] == ["uptime", "disk"]

    def test_only_invalid_commands(self, tmp_path: Path) -> None:
        """If every command is invalid the config is rejected."""
        content = "inventory: h.json\nauth: password\npassword: x\ncommands:\n  - a: 1\n"
        with pytest.raises(ConfigError, match="could not generate list of commands"):
            RunConfigParser(write_config(tmp_path, content)).parse()
