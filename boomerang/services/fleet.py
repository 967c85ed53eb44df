"""Fleet orchestration: one concurrent task per host, one aggregated report.

Every host gets its own asyncio task with no cap on how many are in flight.
Very large inventories can therefore run into file descriptor or outbound
connection limits. Results are appended to the report under a single lock
that is never held across network I/O, and the report is only returned once
every task has finished.

There is no timeout on command execution: a remote command that never exits
keeps its host's task, and therefore ``execute``, waiting.
"""

import asyncio
import logging
import time
from collections.abc import Sequence
from datetime import datetime
from typing import TYPE_CHECKING

from boomerang import __version__
from boomerang.models import (
    Command,
    ConnectionPolicy,
    HostDescriptor,
    HostResult,
    Report,
    ReportMetadata,
)
from boomerang.services.connection import Connector, describe_error
from boomerang.services.runner import run_host

if TYPE_CHECKING:
    from boomerang.protocols import TrustedHostLookup

logger = logging.getLogger(__name__)


class FleetConfigurationError(Exception):
    """The run cannot start: there is nothing meaningful to execute."""

    pass


def _check_inputs(
    hosts: Sequence[HostDescriptor],
    policy: ConnectionPolicy | None,
    commands: Sequence[Command],
    trust_store: "TrustedHostLookup | None",
) -> None:
    if not hosts:
        raise FleetConfigurationError("inventory is empty, no hosts to run against")
    if policy is None:
        raise FleetConfigurationError("connection policy is not set")
    if not commands:
        raise FleetConfigurationError("command list is empty")
    if policy.host_key_verification and trust_store is None:
        raise FleetConfigurationError(
            "host key verification is enabled but no trusted host store was provided"
        )


async def execute(
    hosts: Sequence[HostDescriptor],
    policy: ConnectionPolicy,
    commands: Sequence[Command],
    trust_store: "TrustedHostLookup | None" = None,
    run_type: str = "",
    connector: Connector | None = None,
) -> Report:
    """Run ``commands`` on every host concurrently and collect the results.

    Args:
        hosts: Inventory, one task is started per entry
        policy: Connection policy shared by all tasks
        commands: Commands to run on each host, in order
        trust_store: Trusted key lookup for host key verification
        run_type: Label stored in the report metadata
        connector: Replacement for ``asyncssh.connect``

    Returns:
        Finalized Report with exactly one HostResult per host, in completion
        order.

    Raises:
        FleetConfigurationError: If the inventory or command list is empty,
            the policy is missing, or verification has no trust store
    """
    _check_inputs(hosts, policy, commands, trust_store)

    start = time.monotonic()
    report = Report(
        metadata=ReportMetadata(
            version=__version__,
            run_type=run_type,
            timestamp=datetime.now().astimezone().isoformat(timespec="seconds"),
            total_hosts=len(hosts),
        )
    )
    lock = asyncio.Lock()
    command_list = list(commands)

    logger.info(
        "Starting run on %d host(s) with %d command(s)", len(hosts), len(command_list)
    )
    if not policy.host_key_verification:
        logger.warning(
            "SSH host key verification DISABLED - any server key will be accepted"
        )

    async def run_and_collect(host: HostDescriptor) -> None:
        try:
            result = await run_host(host, policy, command_list, trust_store, connector)
        except Exception as e:
            logger.exception("Host task for %s raised unexpectedly", host.hostname)
            result = HostResult(
                host=host,
                connected=False,
                connection_errors=[f"host task failed: {describe_error(e)}"],
            )

        async with lock:
            report.add(result)

    await asyncio.gather(*(run_and_collect(host) for host in hosts))

    elapsed = time.monotonic() - start
    report.finalize(elapsed)

    connected = sum(1 for r in report.host_results if r.connected)
    logger.info(
        "Run completed in %s: %d/%d host(s) connected",
        report.metadata.total_time,
        connected,
        len(hosts),
    )
    return report
