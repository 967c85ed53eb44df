"""Data models for Boomerang."""

from boomerang.models.command import MISSING_EXIT_CODE, Command, CommandResult
from boomerang.models.host import HostDescriptor, HostResult
from boomerang.models.policy import (
    AgentAuth,
    AuthMethod,
    ConnectionPolicy,
    PasswordAuth,
    PrivateKeyAuth,
)
from boomerang.models.report import (
    Report,
    ReportFinalizedError,
    ReportMetadata,
    format_elapsed,
)

__all__ = [
    "AgentAuth",
    "AuthMethod",
    "Command",
    "CommandResult",
    "ConnectionPolicy",
    "HostDescriptor",
    "HostResult",
    "MISSING_EXIT_CODE",
    "PasswordAuth",
    "PrivateKeyAuth",
    "Report",
    "ReportFinalizedError",
    "ReportMetadata",
    "format_elapsed",
]
