"""Command execution data models."""

from dataclasses import dataclass, field
from typing import Any

# Exit code recorded when the remote side never reported one.
MISSING_EXIT_CODE = -1


@dataclass(frozen=True)
class Command:
    """A named shell command from the run configuration."""

    name: str
    command_line: str


@dataclass
class CommandResult:
    """Result of one command on one host."""

    name: str
    stdout: str = ""
    stderr: str = ""
    exit_code: int = MISSING_EXIT_CODE
    errors: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """True when the command exited 0 with nothing recorded against it."""
        return self.exit_code == 0 and not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "stdout": self.stdout,
            "stderr": self.stderr,
            "exit_code": self.exit_code,
            "stream_errors": list(self.errors),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CommandResult":
        return cls(
            name=data.get("name", ""),
            stdout=data.get("stdout", ""),
            stderr=data.get("stderr", ""),
            exit_code=int(data.get("exit_code", MISSING_EXIT_CODE)),
            errors=list(data.get("stream_errors") or []),
        )
