"""Shared fixtures and fakes for Boomerang tests."""

import logging
from collections.abc import Callable, Iterator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from boomerang.models import Command, ConnectionPolicy, HostDescriptor, PasswordAuth


def _completed(
    stdout: str = "",
    stderr: str = "",
    exit_status: int | None = 0,
    exit_signal: tuple[Any, ...] | None = None,
) -> MagicMock:
    """Fake asyncssh.SSHCompletedProcess."""
    return MagicMock(
        stdout=stdout,
        stderr=stderr,
        exit_status=exit_status,
        exit_signal=exit_signal,
    )


def _make_conn(*outcomes: Any) -> MagicMock:
    """Fake SSH connection whose ``run`` yields ``outcomes`` in order.

    An outcome that is an exception is raised instead of returned.
    """
    conn = MagicMock()
    conn.run = AsyncMock(side_effect=list(outcomes))
    conn.wait_closed = AsyncMock()
    return conn


@pytest.fixture
def commands() -> list[Command]:
    """Two simple commands."""
    return [
        Command(name="uptime", command_line="uptime"),
        Command(name="disk", command_line="df -h /"),
    ]


@pytest.fixture
def policy() -> ConnectionPolicy:
    """Password policy with host key checking off and fast retries."""
    return ConnectionPolicy(
        auth=PasswordAuth(password="secret"),
        host_key_verification=False,
        connect_timeout=5,
        retry_count=0,
        retry_wait=0,
    )


@pytest.fixture
def host() -> HostDescriptor:
    """A remote host with the default port."""
    return HostDescriptor(
        hostname="web1.example.com",
        username="deploy",
        extras={"rack": "r12"},
    )


@pytest.fixture(autouse=True)
def reset_boomerang_logger() -> Iterator[None]:
    """Undo handlers installed by configure_logging so caplog keeps working."""
    logger = logging.getLogger("boomerang")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = True


@pytest.fixture
def completed() -> Callable[..., MagicMock]:
    """Factory for fake completed processes."""
    return _completed


@pytest.fixture
def make_conn() -> Callable[..., MagicMock]:
    """Factory for fake SSH connections."""
    return _make_conn
