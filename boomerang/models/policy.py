"""Run-wide connection policy and authentication variants.

Authentication is a closed set of three methods. Each variant carries the
credential it was resolved to and knows how to express it as asyncssh
connect options; nothing else in the engine looks at which one it is.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    import asyncssh


@dataclass(frozen=True)
class PrivateKeyAuth:
    """Public key authentication with a key loaded from disk."""

    key_path: str
    key: "asyncssh.SSHKey" = field(repr=False)

    method = "key"

    def connect_options(self) -> dict[str, Any]:
        return {
            "client_keys": [self.key],
            "password": None,
            "agent_path": None,
            "preferred_auth": "publickey",
        }


@dataclass(frozen=True)
class AgentAuth:
    """Public key authentication with keys held by a running ssh-agent.

    The agent client stays open for the whole run because the key pairs sign
    through it.
    """

    socket_path: str
    agent: "asyncssh.SSHAgentClient" = field(repr=False)
    keys: tuple[Any, ...] = field(repr=False)

    method = "agent"

    def connect_options(self) -> dict[str, Any]:
        return {
            "client_keys": list(self.keys),
            "password": None,
            "agent_path": None,
            "preferred_auth": "publickey",
        }


@dataclass(frozen=True)
class PasswordAuth:
    """Static password authentication."""

    password: str = field(repr=False)

    method = "password"

    def connect_options(self) -> dict[str, Any]:
        return {
            "client_keys": None,
            "password": self.password,
            "agent_path": None,
            "preferred_auth": "password,keyboard-interactive",
        }


AuthMethod = Union[PrivateKeyAuth, AgentAuth, PasswordAuth]

# Slack added on top of the worst-case retry time.
DEADLINE_MARGIN = 1.0


@dataclass(frozen=True)
class ConnectionPolicy:
    """Rules shared read-only by every host task.

    Durations are in seconds. ``connect_timeout == 0`` means a single
    connection attempt with no timeout and no retries.
    """

    auth: AuthMethod
    host_key_verification: bool = True
    connect_timeout: float = 10
    retry_count: int = 1
    retry_wait: float = 15

    def __post_init__(self) -> None:
        if self.connect_timeout < 0:
            raise ValueError(f"connect_timeout must be >= 0, got {self.connect_timeout}")
        if self.retry_count < 0:
            raise ValueError(f"retry_count must be >= 0, got {self.retry_count}")
        if self.retry_wait < 0:
            raise ValueError(f"retry_wait must be >= 0, got {self.retry_wait}")

    @property
    def deadline(self) -> float | None:
        """Overall time budget for establishing one host's connection.

        ``connect_timeout + retry_count * retry_wait + retry_count *
        connect_timeout`` plus a one second margin, or None when timeouts are
        disabled.
        """
        if self.connect_timeout == 0:
            return None
        return (
            self.connect_timeout
            + self.retry_count * self.retry_wait
            + self.retry_count * self.connect_timeout
            + DEADLINE_MARGIN
        )

