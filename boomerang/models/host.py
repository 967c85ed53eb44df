"""Host inventory and per-host result models."""

from dataclasses import dataclass, field
from typing import Any

from boomerang.models.command import CommandResult
from boomerang.utils.validation import DEFAULT_PORT


def _coerce_port(value: Any) -> int | str | None:
    """Turn numeric inventory strings into ints, leave anything else as given."""
    if value is None or value == "":
        return None
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return value


@dataclass(frozen=True)
class HostDescriptor:
    """Identity of one target machine, as loaded from the inventory.

    ``port`` is None when the inventory left it out. Numeric strings become
    ints on load; anything else is kept as supplied and rejected later by
    port validation, so the report shows what was wrong.
    """

    hostname: str
    username: str
    port: int | str | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    @property
    def address(self) -> str:
        """Return ``hostname:port`` for log messages."""
        port = self.port if self.port not in (None, "") else DEFAULT_PORT
        return f"{self.hostname}:{port}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the inventory field names."""
        return {
            "hostname": self.hostname,
            "username": self.username,
            "ssh_port": self.port,
            "extras": dict(self.extras),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HostDescriptor":
        """Build a descriptor from an inventory record.

        Missing mandatory fields are kept as empty strings so the host still
        produces a result; the runner rejects it with a validation error.
        """
        extras = data.get("extras") or {}
        return cls(
            hostname=str(data.get("hostname") or ""),
            username=str(data.get("username") or ""),
            port=_coerce_port(data.get("ssh_port", data.get("port"))),
            extras=dict(extras),
        )


@dataclass
class HostResult:
    """Complete outcome of one host's run.

    Created when the host task starts and only mutated by that task.
    """

    host: HostDescriptor
    connected: bool = False
    run_length: float = 0.0
    connection_errors: list[str] = field(default_factory=list)
    command_results: list[CommandResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the report's ``machine_data`` entry shape."""
        data = self.host.to_dict()
        data.update(
            {
                "connection": self.connected,
                "run_length": self.run_length,
                "connection_errors": list(self.connection_errors),
                "stream_data": [r.to_dict() for r in self.command_results],
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HostResult":
        """Rebuild a result from its serialized form."""
        return cls(
            host=HostDescriptor.from_dict(data),
            connected=bool(data.get("connection", False)),
            run_length=float(data.get("run_length", 0.0)),
            connection_errors=list(data.get("connection_errors") or []),
            command_results=[
                CommandResult.from_dict(item) for item in data.get("stream_data") or []
            ],
        )
