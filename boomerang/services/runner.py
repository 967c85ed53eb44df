"""Per-host lifecycle: validate, connect, run commands, close."""

import logging
import time
from dataclasses import replace
from typing import TYPE_CHECKING

from boomerang.config.host_keys import HostKeyLookupError
from boomerang.models import Command, ConnectionPolicy, HostDescriptor, HostResult
from boomerang.services.connection import (
    BoomerangConnectionError,
    ConnectionDeadlineError,
    ConnectionFailedError,
    Connector,
    connect,
    describe_error,
    resolve_target,
)
from boomerang.services.executors import run_commands
from boomerang.utils.validation import HostValidationError, validate_host_fields

if TYPE_CHECKING:
    from boomerang.protocols import TrustedHostLookup

logger = logging.getLogger(__name__)


async def run_host(
    host: HostDescriptor,
    policy: ConnectionPolicy,
    commands: list[Command],
    trust_store: "TrustedHostLookup | None" = None,
    connector: Connector | None = None,
) -> HostResult:
    """Run the command list on one host and describe what happened.

    Every failure mode ends up in the returned HostResult; this never raises.
    The connection, once open, is closed before returning.

    Args:
        host: Target host from the inventory
        policy: Run-wide connection policy
        commands: Commands to run, in order
        trust_store: Trusted key lookup, used when host key verification is on
        connector: Replacement for ``asyncssh.connect``

    Returns:
        HostResult with ``connected`` set and either connection errors or one
        CommandResult per command.
    """
    start = time.monotonic()
    result = HostResult(host=host)

    def fail(*errors: str) -> HostResult:
        result.connected = False
        result.command_results = []
        result.connection_errors.extend(errors)
        result.run_length = time.monotonic() - start
        logger.info("Host %s failed: %s", host.hostname or "<unnamed>", errors[-1])
        return result

    try:
        validate_host_fields(host.hostname, host.username)
        port = resolve_target(host)
    except HostValidationError as e:
        return fail(f"failed validation: {e}")
    except BoomerangConnectionError as e:
        return fail(str(e))

    # Report the normalized port from here on
    result.host = replace(host, port=port)

    trusted_keys = None
    if policy.host_key_verification:
        if trust_store is None:
            return fail(f"failed host key check: no trust store for [{host.hostname}:{port}]")
        try:
            trusted_keys = trust_store.lookup(host.hostname, port)
        except HostKeyLookupError as e:
            return fail(f"failed host key check: {e}")

    try:
        conn = await connect(result.host, policy, trusted_keys, connector)
    except (ConnectionFailedError, ConnectionDeadlineError) as e:
        return fail(*e.attempt_errors, str(e))
    except BoomerangConnectionError as e:
        return fail(str(e))
    except Exception as e:
        logger.exception("Unexpected error connecting to %s", host.hostname)
        return fail(f"failed client connection: {describe_error(e)}")

    try:
        result.command_results = await run_commands(conn, commands)
        result.connected = True
    finally:
        conn.close()
        await conn.wait_closed()
        result.run_length = time.monotonic() - start

    logger.info(
        "Host %s completed %d command(s) in %.3fs",
        host.hostname,
        len(result.command_results),
        result.run_length,
    )
    return result
