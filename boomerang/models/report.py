"""Fleet run report models."""

from dataclasses import dataclass, field
from typing import Any

from boomerang.models.host import HostResult


def format_elapsed(seconds: float) -> str:
    """Render elapsed time truncated to milliseconds, e.g. ``"2.345s"``."""
    millis = int(seconds * 1000)
    return f"{millis / 1000:.3f}s"


@dataclass
class ReportMetadata:
    """Run-level data that is not tied to any single host."""

    version: str
    run_type: str
    timestamp: str
    total_hosts: int
    total_time: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "boomerang_version": self.version,
            "type": self.run_type,
            "timestamp": self.timestamp,
            "total_items": self.total_hosts,
            "total_time": self.total_time,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReportMetadata":
        return cls(
            version=data.get("boomerang_version", ""),
            run_type=data.get("type", ""),
            timestamp=data.get("timestamp", ""),
            total_hosts=int(data.get("total_items", 0)),
            total_time=data.get("total_time", ""),
        )


class ReportFinalizedError(RuntimeError):
    """Raised when a finalized report is modified."""


@dataclass
class Report:
    """Metadata plus one HostResult per inventory host.

    Host results are kept in completion order. Consumers should treat them as
    an unordered set keyed by host identity.
    """

    metadata: ReportMetadata
    host_results: list[HostResult] = field(default_factory=list)
    _finalized: bool = field(default=False, init=False, repr=False, compare=False)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def add(self, result: HostResult) -> None:
        """Append a finished host's result."""
        if self._finalized:
            raise ReportFinalizedError(
                f"Report is finalized, cannot add result for {result.host.hostname}"
            )
        self.host_results.append(result)

    def finalize(self, elapsed: float) -> None:
        """Record total time and freeze the report."""
        self.metadata.total_time = format_elapsed(elapsed)
        self._finalized = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "metadata": self.metadata.to_dict(),
            "machine_data": [r.to_dict() for r in self.host_results],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Report":
        """Rebuild a report from parsed JSON. The result is finalized."""
        report = cls(
            metadata=ReportMetadata.from_dict(data.get("metadata") or {}),
            host_results=[
                HostResult.from_dict(item) for item in data.get("machine_data") or []
            ],
        )
        report._finalized = True
        return report
