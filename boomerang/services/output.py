"""Report serialization to timestamped JSON files."""

import json
import logging
import os
from datetime import datetime
from pathlib import Path

from boomerang.models import Report

logger = logging.getLogger(__name__)


class OutputError(Exception):
    """The report could not be written."""

    pass


def dumps_report(report: Report, indent: bool = True) -> str:
    """Serialize a report to JSON text."""
    if indent:
        return json.dumps(report.to_dict(), indent="\t")
    return json.dumps(report.to_dict())


def loads_report(text: str) -> Report:
    """Parse JSON text produced by ``dumps_report``."""
    return Report.from_dict(json.loads(text))


def clean_up_except(directory: Path | str, *keep: Path | str) -> list[Exception]:
    """Delete every regular ``.json`` file in ``directory`` except ``keep``.

    Files in ``keep`` may be bare names or full paths. Failures do not stop
    the cleanup; they are collected and returned.
    """
    directory = Path(directory)
    keep_names = {Path(f).name for f in keep}
    errors: list[Exception] = []

    try:
        entries = list(directory.iterdir())
    except OSError as e:
        errors.append(OSError(f"error opening directory [{directory}]: {e}"))
        return errors

    for entry in entries:
        if entry.name in keep_names or entry.suffix != ".json" or not entry.is_file():
            continue
        try:
            entry.unlink()
            logger.debug("Removing old report %s", entry)
        except OSError as e:
            errors.append(OSError(f"removing JSON file {entry}: {e}"))

    return errors


class ReportWriter:
    """Writes reports as ``<output_dir>/<prefix>_<YYYYmmdd_HHMMSS>.json``."""

    def __init__(
        self,
        output_dir: Path | str = "raw",
        prefix: str = "raw",
        indent: bool = True,
        keep_latest_only: bool = False,
    ):
        """Initialize writer.

        Args:
            output_dir: Directory for report files, created if missing
            prefix: File name prefix
            indent: Pretty-print the JSON
            keep_latest_only: Remove older ``.json`` reports after writing
        """
        self.output_dir = Path(output_dir)
        self.prefix = prefix
        self.indent = indent
        self.keep_latest_only = keep_latest_only

    def report_path(self, when: datetime) -> Path:
        """Return the report file path for a run started at ``when``.

        Raises:
            OutputError: If the output directory cannot be created or a
                non-directory is in its place
        """
        if not self.output_dir.exists():
            try:
                os.makedirs(self.output_dir, mode=0o744)
            except OSError as e:
                raise OutputError(f"making directory [{self.output_dir}]: {e}") from e
        if not self.output_dir.is_dir():
            raise OutputError(
                f"{self.output_dir} is not a directory. Remove it and let boomerang "
                "create its own directory"
            )
        return self.output_dir / f"{self.prefix}_{when.strftime('%Y%m%d_%H%M%S')}.json"

    def write(self, report: Report, when: datetime | None = None) -> str:
        """Write the report, then prune older reports if configured.

        Returns:
            Path of the written file

        Raises:
            OutputError: If the file cannot be written
        """
        path = self.report_path(when or datetime.now())
        try:
            path.write_text(dumps_report(report, indent=self.indent))
        except (OSError, TypeError, ValueError) as e:
            raise OutputError(f"writing report {path}: {e}") from e

        logger.info("Report written to %s", path)

        if self.keep_latest_only:
            for error in clean_up_except(self.output_dir, path):
                logger.error("error cleaning up: %s", error)

        return str(path)
