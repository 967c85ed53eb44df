"""SSH host key trust store.

Resolves previously trusted host keys from an OpenSSH known_hosts file.
"""

import ipaddress
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

import asyncssh

if TYPE_CHECKING:
    from asyncssh import SSHKey

logger = logging.getLogger(__name__)

DEFAULT_KNOWN_HOSTS = Path.home() / ".ssh" / "known_hosts"


class HostKeyLookupError(Exception):
    """No trusted key could be resolved for a host."""

    def __init__(self, host: str, port: int, reason: str):
        """Initialize lookup error.

        Args:
            host: Hostname that was looked up
            port: SSH port that was looked up
            reason: Why the lookup failed
        """
        self.host = host
        self.port = port
        self.reason = reason
        super().__init__(f"[{host}:{port}] {reason}")


class KnownHostsStore:
    """Trusted-host lookup backed by a known_hosts file.

    The file is read once and shared by every host task. Call ``load()``
    before fanning out (off the event loop) so no host task does the read;
    a read failure is remembered and reported by every lookup.
    """

    def __init__(self, known_hosts_path: str | Path | None = None):
        """Initialize the store.

        Args:
            known_hosts_path: Path to known_hosts (default: ~/.ssh/known_hosts)
        """
        if known_hosts_path is None:
            known_hosts_path = DEFAULT_KNOWN_HOSTS
        self.path = Path(os.path.expanduser(str(known_hosts_path)))
        self._known_hosts: asyncssh.SSHKnownHosts | None = None
        self._load_error: str | None = None

    @property
    def loaded(self) -> bool:
        """Whether the file has been read, successfully or not."""
        return self._known_hosts is not None or self._load_error is not None

    def load(self) -> None:
        """Read the known_hosts file unless it was already read.

        Blocking; run it with ``asyncio.to_thread`` from async code.
        """
        if self.loaded:
            return
        try:
            self._known_hosts = asyncssh.read_known_hosts(str(self.path))
        except (OSError, ValueError) as e:
            self._load_error = f"cannot read known_hosts {self.path}: {e}"
            logger.warning("%s", self._load_error)
            return
        logger.debug("Loaded trusted host keys from %s", self.path)

    def lookup(self, hostname: str, port: int) -> list["SSHKey"]:
        """Return the trusted keys for ``hostname:port``.

        Entries for port 22 are written as ``host``, others as
        ``[host]:port``; asyncssh handles both forms.

        Raises:
            HostKeyLookupError: If the file cannot be read or has no key
                for the host
        """
        self.load()
        if self._known_hosts is None:
            raise HostKeyLookupError(hostname, port, self._load_error or "no known_hosts")
        known_hosts = self._known_hosts

        addr = hostname if _is_ip_literal(hostname) else ""
        host_keys = known_hosts.match(hostname, addr, port)[0]
        if not host_keys:
            raise HostKeyLookupError(hostname, port, f"no hostkey in {self.path}")

        logger.debug("Found %d trusted key(s) for %s:%d", len(host_keys), hostname, port)
        return list(host_keys)


def _is_ip_literal(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True
