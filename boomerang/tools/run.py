"""End-to-end fleet run shared by the CLI and the MCP tool."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from boomerang.config import Config
from boomerang.dependencies import Dependencies
from boomerang.models import Report
from boomerang.services.fleet import execute
from boomerang.services.inventory import load_inventory

logger = logging.getLogger(__name__)


@dataclass
class RunOutcome:
    """A finished run and where its report went."""

    report: Report
    report_path: str

    @property
    def hosts_in(self) -> int:
        return self.report.metadata.total_hosts

    @property
    def hosts_out(self) -> int:
        return len(self.report.host_results)


async def perform_run(config: Config) -> RunOutcome:
    """Load the inventory, run the fleet and write the report.

    Raises:
        AuthError, InventoryError, FleetConfigurationError, OutputError:
            Setup or output failures that make the run meaningless
    """
    started = datetime.now()
    options = config.options

    hosts = await asyncio.to_thread(load_inventory, options.inventory)

    trust_store = config.trust_store
    if trust_store is not None:
        await asyncio.to_thread(trust_store.load)

    deps = await Dependencies.create(config)
    try:
        report = await execute(
            hosts,
            deps.policy,
            config.commands,
            trust_store=trust_store,
            run_type=options.run_type,
        )
    finally:
        await deps.cleanup()

    path = await asyncio.to_thread(deps.writer.write, report, started)
    return RunOutcome(report=report, report_path=path)


async def run_fleet(config_path: str = "") -> dict[str, Any]:
    """Run the configured commands on every inventory host over SSH.

    Args:
        config_path: YAML run configuration. Empty uses BOOMERANG_CONFIG or
            ``config.yaml``.

    Returns:
        The report (metadata and per-host results) plus the path it was
        written to.
    """
    config = Config.load(Path(config_path) if config_path else None)
    outcome = await perform_run(config)
    logger.info(
        "tool:run_fleet wrote %s (input: %d output: %d)",
        outcome.report_path,
        outcome.hosts_in,
        outcome.hosts_out,
    )
    return {"report_path": outcome.report_path, **outcome.report.to_dict()}
