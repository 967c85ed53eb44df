"""Tests for the console log formatter."""

import logging
import sys

from boomerang.utils.console import ColorfulFormatter, configure_logging


def make_record(name: str, level: int, msg: str) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, msg, None, None)


def test_plain_format_has_columns() -> None:
    """Without colors the line is time | level | component | message."""
    formatter = ColorfulFormatter(use_colors=False)
    line = formatter.format(
        make_record("boomerang.services.fleet", logging.INFO, "Starting run on 3 host(s)")
    )

    parts = [p.strip() for p in line.split("|")]
    assert parts[1] == "INFO"
    assert parts[2] == "services.fleet"
    assert parts[3] == "Starting run on 3 host(s)"
    assert "\033[" not in line


def test_colored_format_highlights_targets() -> None:
    """With colors SSH targets and attempts are wrapped in ANSI codes."""
    formatter = ColorfulFormatter(use_colors=True)
    line = formatter.format(
        make_record(
            "boomerang.services.connection",
            logging.WARNING,
            "Connection to deploy@web1:22 failed (attempt 1/2)",
        )
    )

    assert "\033[95mdeploy@web1:22\033[0m" in line
    assert "\033[36mattempt 1/2\033[0m" in line
    assert line.startswith("\033[91m!! ")


def test_exception_is_appended() -> None:
    """Exception info is rendered after the message."""
    formatter = ColorfulFormatter(use_colors=False)
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord(
            "boomerang.services.runner", logging.ERROR, __file__, 1, "oops", None, sys.exc_info()
        )

    line = formatter.format(record)
    assert "RuntimeError: boom" in line


def test_configure_logging_installs_single_handler() -> None:
    """Repeated configuration does not stack handlers."""
    logger = logging.getLogger("boomerang")
    logger.handlers = []

    configure_logging("DEBUG", use_colors=True)
    configure_logging("DEBUG", use_colors=True)

    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    assert isinstance(logger.handlers[0].formatter, ColorfulFormatter)
    assert logging.getLogger("asyncssh").level == logging.WARNING
