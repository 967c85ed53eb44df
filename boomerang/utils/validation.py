"""Host descriptor validation utilities."""

from typing import Any, Final

MIN_PORT: Final[int] = 1
MAX_PORT: Final[int] = 65535
DEFAULT_PORT: Final[int] = 22


class HostValidationError(ValueError):
    """Host descriptor failed validation before any network activity."""

    pass


class PortValidationError(HostValidationError):
    """Port is not an integer in [1, 65535]."""

    pass


def validate_port(port: Any) -> int:
    """Normalize an inventory port value.

    Args:
        port: Value from the inventory (int, numeric string, "" or None)

    Returns:
        The port as an int, 22 when none was supplied

    Raises:
        PortValidationError: If the value is not an integer in range
    """
    if port is None or port == "":
        return DEFAULT_PORT

    # bool is an int subclass; True is not a port
    if isinstance(port, bool):
        raise PortValidationError(f"invalid port: [{port}]")

    if isinstance(port, int):
        value = port
    else:
        try:
            value = int(str(port).strip())
        except ValueError as e:
            raise PortValidationError(
                f"converting port [{port}] to int failed"
            ) from e

    if value < MIN_PORT or value > MAX_PORT:
        raise PortValidationError(f"invalid port: [{port}]")

    return value


def validate_host_fields(hostname: str, username: str) -> None:
    """Check the mandatory inventory fields.

    Raises:
        HostValidationError: If hostname or username is missing, or the
            hostname contains characters that cannot appear in a host
    """
    if not hostname or not hostname.strip():
        raise HostValidationError("missing mandatory field: hostname")
    if not username or not username.strip():
        raise HostValidationError("missing mandatory field: username")

    if len(hostname) > 253:
        raise HostValidationError(f"hostname too long: {len(hostname)} chars")

    suspicious_chars = ["/", "\\", ";", "&", "|", "$", "`", " ", "\n", "\r", "\x00"]
    for char in suspicious_chars:
        if char in hostname:
            raise HostValidationError(f"hostname contains invalid characters: {hostname!r}")
