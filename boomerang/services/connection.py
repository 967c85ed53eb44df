"""SSH connection establishment with bounded retry.

A connection attempt is retried ``retry_count`` times, sleeping
``retry_wait`` seconds between attempts. When ``connect_timeout`` is set, each
attempt is limited to it and the whole loop is bounded by the policy deadline
(``connect_timeout + retry_count * retry_wait + retry_count * connect_timeout``
plus a one second margin).
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

import asyncssh

from boomerang.models import ConnectionPolicy, HostDescriptor
from boomerang.utils.hostname import is_loopback_target
from boomerang.utils.validation import validate_port

if TYPE_CHECKING:
    from asyncssh import SSHKey

logger = logging.getLogger(__name__)

Connector = Callable[..., Awaitable[asyncssh.SSHClientConnection]]

# Failures worth another attempt: network errors (including per-attempt
# timeouts), SSH protocol and auth errors, host key rejection.
RETRYABLE_ERRORS = (OSError, asyncssh.Error)


class BoomerangConnectionError(Exception):
    """Failed to establish an SSH connection to a host."""

    def __init__(self, host_name: str, message: str):
        """Initialize connection error.

        Args:
            host_name: Hostname of the target
            message: Description of the failure
        """
        self.host_name = host_name
        super().__init__(message)


class UnsupportedHostError(BoomerangConnectionError):
    """Target is the local machine, which is never connected to."""

    def __init__(self, host_name: str):
        super().__init__(
            host_name,
            f"[{host_name}] is not supported: connecting to the local machine is unsupported",
        )


class ConnectionFailedError(BoomerangConnectionError):
    """Every connection attempt failed."""

    def __init__(self, host_name: str, attempt_errors: list[str]):
        """Initialize with the error of each attempt, in order."""
        self.attempt_errors = list(attempt_errors)
        last = self.attempt_errors[-1] if self.attempt_errors else "unknown error"
        super().__init__(
            host_name,
            f"failed client connection to {host_name} after "
            f"{self.attempts} attempt(s): {last}",
        )

    @property
    def attempts(self) -> int:
        return len(self.attempt_errors)


class ConnectionDeadlineError(BoomerangConnectionError):
    """The overall connection deadline elapsed before success or exhaustion."""

    def __init__(
        self,
        host_name: str,
        deadline: float,
        policy: ConnectionPolicy,
        attempt_errors: list[str],
    ):
        self.deadline = deadline
        self.attempt_errors = list(attempt_errors)
        super().__init__(
            host_name,
            f"connection deadline of {deadline:.1f}s exceeded for {host_name}: "
            f"retried {policy.retry_count} time(s) with a {policy.retry_wait:g}s wait. "
            "No more retries!",
        )

    @property
    def attempts(self) -> int:
        return len(self.attempt_errors)


def resolve_target(host: HostDescriptor) -> int:
    """Check a host can be connected to and return its port.

    Raises:
        UnsupportedHostError: If the host is a loopback address
        PortValidationError: If the port is malformed
    """
    if is_loopback_target(host.hostname):
        raise UnsupportedHostError(host.hostname)
    return validate_port(host.port)


def describe_error(error: BaseException) -> str:
    """One-line description of an exception for result error lists."""
    message = str(error) or repr(error)
    return f"{type(error).__name__}: {message}"


async def connect(
    host: HostDescriptor,
    policy: ConnectionPolicy,
    trusted_keys: "list[SSHKey] | None" = None,
    connector: Connector | None = None,
) -> asyncssh.SSHClientConnection:
    """Open an authenticated SSH connection to ``host``.

    Args:
        host: Target host
        policy: Run-wide connection policy
        trusted_keys: Keys the server must present. Required when the policy
            enables host key verification, ignored otherwise.
        connector: Replacement for ``asyncssh.connect``

    Returns:
        Open SSH connection, owned by the caller

    Raises:
        UnsupportedHostError: Loopback target, no attempt made
        PortValidationError: Malformed port, no attempt made
        ConnectionFailedError: All attempts failed
        ConnectionDeadlineError: The policy deadline elapsed
    """
    port = resolve_target(host)
    connector = connector or asyncssh.connect

    if policy.host_key_verification:
        if not trusted_keys:
            raise BoomerangConnectionError(
                host.hostname,
                f"failed host key check: no trusted key for {host.hostname}:{port}",
            )
        known_hosts: Any = (list(trusted_keys), [], [])
    else:
        known_hosts = None

    options: dict[str, Any] = dict(policy.auth.connect_options())
    options.update(
        port=port,
        username=host.username,
        known_hosts=known_hosts,
        connect_timeout=policy.connect_timeout or None,
    )

    async def dial() -> asyncssh.SSHClientConnection:
        return await connector(host.hostname, **options)

    logger.debug("Opening SSH connection to %s@%s", host.username, host.address)

    attempt_errors: list[str] = []
    deadline = policy.deadline
    if deadline is None:
        try:
            conn = await dial()
        except RETRYABLE_ERRORS as e:
            attempt_errors.append(f"attempt 1/1: {describe_error(e)}")
            raise ConnectionFailedError(host.hostname, attempt_errors) from e
    else:
        try:
            conn = await asyncio.wait_for(
                _dial_with_retry(dial, host.hostname, policy, attempt_errors),
                timeout=deadline,
            )
        except TimeoutError as e:
            logger.warning(
                "Connection deadline of %.1fs exceeded for %s after %d attempt(s)",
                deadline,
                host.hostname,
                len(attempt_errors),
            )
            raise ConnectionDeadlineError(
                host.hostname, deadline, policy, attempt_errors
            ) from e

    logger.info("SSH connection established to %s@%s", host.username, host.address)
    return conn


async def _dial_with_retry(
    dial: Callable[[], Awaitable[asyncssh.SSHClientConnection]],
    host_name: str,
    policy: ConnectionPolicy,
    attempt_errors: list[str],
) -> asyncssh.SSHClientConnection:
    """Attempt ``dial`` until it succeeds or the retry budget is spent.

    Each failure is appended to ``attempt_errors`` as it happens so the
    caller still has them if the deadline cancels this coroutine.
    """
    total = policy.retry_count + 1
    retries_left = policy.retry_count
    attempt = 0

    while True:
        attempt += 1
        try:
            return await dial()
        except RETRYABLE_ERRORS as e:
            attempt_errors.append(f"attempt {attempt}/{total}: {describe_error(e)}")
            if retries_left <= 0:
                raise ConnectionFailedError(host_name, attempt_errors) from e

            logger.warning(
                "Connection to %s failed (attempt %d/%d): %s, retrying in %gs",
                host_name,
                attempt,
                total,
                e,
                policy.retry_wait,
            )
            await asyncio.sleep(policy.retry_wait)
            retries_left -= 1
