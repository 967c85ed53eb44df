"""Sequential command execution over an open SSH connection."""

import logging
from typing import TYPE_CHECKING, Any

import asyncssh

from boomerang.models import MISSING_EXIT_CODE, Command, CommandResult
from boomerang.services.connection import describe_error

if TYPE_CHECKING:
    from asyncssh import SSHClientConnection

logger = logging.getLogger(__name__)


def _decode(stream: Any) -> str:
    """Convert captured output to trimmed text."""
    if stream is None:
        return ""
    if isinstance(stream, bytes):
        stream = stream.decode("utf-8", errors="replace")
    return stream.strip()


async def run_command(conn: "SSHClientConnection", command: Command) -> CommandResult:
    """Run one command in its own session and capture the outcome.

    Failures are recorded on the returned result; this never raises for a
    command that failed, exited non-zero or could not be started.

    Returns:
        CommandResult with trimmed stdout/stderr, the exit code (or -1 when
        none was reported) and any errors.
    """
    result = CommandResult(name=command.name)

    try:
        completed = await conn.run(
            command.command_line, check=False, encoding="utf-8", errors="replace"
        )
    except asyncssh.ChannelOpenError as e:
        result.errors.append(f"failed to open session: {e}")
        logger.debug("Session for %r could not be opened: %s", command.name, e)
        return result
    except (asyncssh.Error, OSError) as e:
        result.errors.append(f"failed session run: {describe_error(e)}")
        logger.debug("Command %r failed to run: %s", command.name, e)
        return result
    except Exception as e:
        result.errors.append(f"failed session run: {describe_error(e)}")
        logger.exception("Unexpected error running %r", command.name)
        return result

    result.stdout = _decode(completed.stdout)
    result.stderr = _decode(completed.stderr)

    # asyncssh reports -1 rather than None when the process died by signal
    if completed.exit_signal or completed.exit_status is None:
        result.exit_code = MISSING_EXIT_CODE
        if completed.exit_signal:
            signal_name = completed.exit_signal[0]
            result.errors.append(f"exit code missing: terminated by signal {signal_name}")
        else:
            result.errors.append("exit code missing")
        return result

    result.exit_code = completed.exit_status
    if completed.exit_status != 0:
        result.errors.append(
            f"command completed unsuccessfully: exit status {completed.exit_status}"
        )
    return result


async def run_commands(
    conn: "SSHClientConnection",
    commands: list[Command],
) -> list[CommandResult]:
    """Run every command in order, regardless of earlier outcomes.

    Returns:
        One CommandResult per command, in input order.
    """
    results: list[CommandResult] = []
    for command in commands:
        result = await run_command(conn, command)
        logger.debug(
            "Command %r finished with exit code %d", command.name, result.exit_code
        )
        results.append(result)
    return results
