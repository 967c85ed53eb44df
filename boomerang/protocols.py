"""Protocol interfaces for the engine's collaborators.

The fleet engine depends on these abstractions rather than on concrete
classes, so tests and alternative backends can stand in for them:

    class StaticTrust:
        def lookup(self, hostname: str, port: int) -> list:
            return [trusted_key]

    await execute(hosts, policy, commands, trust_store=StaticTrust())
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class TrustedHostLookup(Protocol):
    """Resolves previously trusted host keys.

    Implemented by ``boomerang.config.KnownHostsStore``.
    """

    def lookup(self, hostname: str, port: int) -> list[Any]:
        """Return the trusted keys for ``hostname:port``.

        Raises:
            HostKeyLookupError: If no trusted key exists or the store
                cannot be read
        """
        ...


@runtime_checkable
class ReportSink(Protocol):
    """Persists a finished report.

    Implemented by ``boomerang.services.output.ReportWriter``.
    """

    def write(self, report: Any, when: Any = None) -> str:
        """Write the report, stamped with ``when`` if given, and return where it went."""
        ...
