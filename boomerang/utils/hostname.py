"""Hostname detection utilities for loopback identification."""

import ipaddress

LOOPBACK_NAMES = frozenset({"localhost", "localhost.localdomain", "ip6-localhost"})


def is_loopback_target(target_host: str) -> bool:
    """Check if target host points at the machine running Boomerang.

    <parameters>
    target_host: hostname or address from the inventory
    </parameters>

    <returns>
    True for localhost names and loopback addresses (127.0.0.0/8, ::1)
    </returns>
    """
    if not target_host:
        return False

    target = target_host.strip().lower()
    if target in LOOPBACK_NAMES:
        return True

    # Bracketed IPv6 literals such as [::1]
    if target.startswith("[") and target.endswith("]"):
        target = target[1:-1]

    try:
        return ipaddress.ip_address(target).is_loopback
    except ValueError:
        return False
