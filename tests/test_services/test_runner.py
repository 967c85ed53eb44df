"""Tests for the per-host lifecycle."""

from collections.abc import Callable
from dataclasses import replace
from unittest.mock import AsyncMock, MagicMock

import pytest

from boomerang.config import HostKeyLookupError
from boomerang.models import Command, ConnectionPolicy, HostDescriptor
from boomerang.services.runner import run_host


@pytest.fixture
def verifying_policy(policy: ConnectionPolicy) -> ConnectionPolicy:
    return ConnectionPolicy(
        auth=policy.auth,
        host_key_verification=True,
        connect_timeout=5,
        retry_count=0,
        retry_wait=0,
    )


@pytest.mark.asyncio
async def test_success_runs_every_command(
    host: HostDescriptor,
    policy: ConnectionPolicy,
    commands: list[Command],
    make_conn: Callable,
    completed: Callable,
) -> None:
    """A reachable host runs all commands and the connection is closed."""
    conn = make_conn(completed(stdout="up", exit_status=0), completed(stdout="50%", exit_status=0))
    connector = AsyncMock(return_value=conn)

    result = await run_host(host, policy, commands, connector=connector)

    assert result.connected is True
    assert result.connection_errors == []
    assert [r.name for r in result.command_results] == ["uptime", "disk"]
    assert all(r.succeeded for r in result.command_results)
    assert result.host.port == 22
    assert result.host.extras == {"rack": "r12"}
    assert result.run_length >= 0
    conn.close.assert_called_once()
    conn.wait_closed.assert_awaited_once()


@pytest.mark.asyncio
async def test_connection_refused_records_attempts(
    host: HostDescriptor, policy: ConnectionPolicy, commands: list[Command]
) -> None:
    """Each attempt error and the final summary are recorded."""
    policy = replace(policy, retry_count=1)
    connector = AsyncMock(side_effect=ConnectionRefusedError("refused"))

    result = await run_host(host, policy, commands, connector=connector)

    assert result.connected is False
    assert result.command_results == []
    assert result.connection_errors[0] == "attempt 1/2: ConnectionRefusedError: refused"
    assert result.connection_errors[1] == "attempt 2/2: ConnectionRefusedError: refused"
    assert result.connection_errors[2].startswith("failed client connection to web1.example.com")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "port,message",
    [
        ("abc", "failed validation: converting port [abc] to int failed"),
        (0, "failed validation: invalid port: [0]"),
        (70000, "failed validation: invalid port: [70000]"),
    ],
)
async def test_malformed_port_is_never_dialed(
    policy: ConnectionPolicy, commands: list[Command], port: object, message: str
) -> None:
    """Bad ports fail validation and keep their raw value."""
    host = HostDescriptor(hostname="web1", username="deploy", port=port)  # type: ignore[arg-type]
    connector = AsyncMock()

    result = await run_host(host, policy, commands, connector=connector)

    assert result.connected is False
    assert result.connection_errors == [message]
    assert result.host.port == port
    connector.assert_not_called()


@pytest.mark.asyncio
async def test_missing_username(policy: ConnectionPolicy, commands: list[Command]) -> None:
    """A host without a username is rejected."""
    connector = AsyncMock()

    result = await run_host(
        HostDescriptor(hostname="web1", username=""), policy, commands, connector=connector
    )

    assert result.connection_errors == ["failed validation: missing mandatory field: username"]
    connector.assert_not_called()


@pytest.mark.asyncio
async def test_loopback_is_unsupported(policy: ConnectionPolicy, commands: list[Command]) -> None:
    """The local machine is never connected to."""
    connector = AsyncMock()

    result = await run_host(
        HostDescriptor(hostname="localhost", username="me"), policy, commands, connector=connector
    )

    assert result.connected is False
    assert "not supported" in result.connection_errors[0]
    connector.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_host_key(
    host: HostDescriptor,
    verifying_policy: ConnectionPolicy,
    commands: list[Command],
) -> None:
    """A host missing from the trust store fails the host key check."""
    store = MagicMock()
    store.lookup.side_effect = HostKeyLookupError(host.hostname, 22, "no hostkey in known_hosts")
    connector = AsyncMock()

    result = await run_host(host, verifying_policy, commands, store, connector=connector)

    assert result.connected is False
    assert result.connection_errors == [
        "failed host key check: [web1.example.com:22] no hostkey in known_hosts"
    ]
    connector.assert_not_called()


@pytest.mark.asyncio
async def test_trusted_key_is_passed_to_connect(
    host: HostDescriptor,
    verifying_policy: ConnectionPolicy,
    commands: list[Command],
    make_conn: Callable,
    completed: Callable,
) -> None:
    """Keys from the trust store restrict the accepted server key."""
    key = MagicMock()
    store = MagicMock()
    store.lookup.return_value = [key]
    connector = AsyncMock(return_value=make_conn(completed(), completed()))

    result = await run_host(host, verifying_policy, commands, store, connector=connector)

    assert result.connected is True
    store.lookup.assert_called_once_with("web1.example.com", 22)
    assert connector.call_args.kwargs["known_hosts"] == ([key], [], [])


@pytest.mark.asyncio
async def test_verification_without_store(
    host: HostDescriptor, verifying_policy: ConnectionPolicy, commands: list[Command]
) -> None:
    """Verification with no trust store fails the host."""
    result = await run_host(host, verifying_policy, commands, None, connector=AsyncMock())
    assert result.connection_errors[0].startswith("failed host key check")


@pytest.mark.asyncio
async def test_unexpected_connect_error(
    host: HostDescriptor, policy: ConnectionPolicy, commands: list[Command]
) -> None:
    """An unexpected exception while connecting still yields a result."""
    connector = AsyncMock(side_effect=ValueError("bad state"))

    result = await run_host(host, policy, commands, connector=connector)

    assert result.connected is False
    assert result.connection_errors == ["failed client connection: ValueError: bad state"]


@pytest.mark.asyncio
async def test_unexpected_command_error_is_recorded(
    host: HostDescriptor,
    policy: ConnectionPolicy,
    commands: list[Command],
    make_conn: Callable,
    completed: Callable,
) -> None:
    """A command that raises unexpectedly is recorded and the run continues."""
    encode_error = UnicodeEncodeError("utf-8", "\udc80", 0, 1, "surrogates not allowed")
    conn = make_conn(completed(stdout="up", exit_status=0), encode_error)
    connector = AsyncMock(return_value=conn)

    result = await run_host(host, policy, commands, connector=connector)

    assert result.connected is True
    assert result.connection_errors == []
    assert len(result.command_results) == 2
    assert result.command_results[0].stdout == "up"
    assert result.command_results[1].exit_code == -1
    assert result.command_results[1].errors[0].startswith(
        "failed session run: UnicodeEncodeError"
    )
    conn.close.assert_called_once()
    conn.wait_closed.assert_awaited_once()
