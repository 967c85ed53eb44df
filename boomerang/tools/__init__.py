"""Run entry points shared by the CLI and the MCP server."""

from boomerang.tools.run import RunOutcome, perform_run, run_fleet

__all__ = ["RunOutcome", "perform_run", "run_fleet"]
