"""Utilities for Boomerang."""

from boomerang.utils.console import ColorfulFormatter, configure_logging
from boomerang.utils.hostname import is_loopback_target
from boomerang.utils.validation import (
    HostValidationError,
    PortValidationError,
    validate_host_fields,
    validate_port,
)

__all__ = [
    "ColorfulFormatter",
    "configure_logging",
    "HostValidationError",
    "is_loopback_target",
    "PortValidationError",
    "validate_host_fields",
    "validate_port",
]
