"""Services for Boomerang."""

from boomerang.services.auth import AuthError, close_auth, resolve_auth
from boomerang.services.connection import (
    BoomerangConnectionError,
    ConnectionDeadlineError,
    ConnectionFailedError,
    UnsupportedHostError,
    connect,
)
from boomerang.services.executors import run_command, run_commands
from boomerang.services.fleet import FleetConfigurationError, execute
from boomerang.services.inventory import InventoryError, load_inventory
from boomerang.services.output import OutputError, ReportWriter
from boomerang.services.runner import run_host

__all__ = [
    "AuthError",
    "BoomerangConnectionError",
    "ConnectionDeadlineError",
    "ConnectionFailedError",
    "FleetConfigurationError",
    "InventoryError",
    "OutputError",
    "ReportWriter",
    "UnsupportedHostError",
    "close_auth",
    "connect",
    "execute",
    "load_inventory",
    "resolve_auth",
    "run_command",
    "run_commands",
    "run_host",
]
