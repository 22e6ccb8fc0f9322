"""Constants and utility functions for configuration."""

import ipaddress

__all__ = (
    "DEFAULT_ADDRESS",
    "DEFAULT_DEV_LOGGER_PORT",
    "DEFAULT_LIVERELOAD_PORT",
    "DEFAULT_PORT",
    "LOCAL_ADDRESSES",
    "TRUE_VALUES",
    "is_local_address",
)

TRUE_VALUES = {"True", "true", "1", "yes", "Y", "T"}

DEFAULT_ADDRESS = "0.0.0.0"  # noqa: S104
DEFAULT_PORT = 8100
DEFAULT_LIVERELOAD_PORT = 35729
DEFAULT_DEV_LOGGER_PORT = 53703

LOCAL_ADDRESSES = frozenset({"localhost", "127.0.0.1", "::1"})
"""Address literals a device can only reach through port forwarding."""


def is_local_address(address: str) -> bool:
    """Check whether ``address`` is only reachable from this machine.

    Private (RFC 1918) ranges are not considered local: a device on the same
    network can reach them.

    Returns:
        True for the loopback/link-local literals and addresses, else False.
    """
    if address in LOCAL_ADDRESSES:
        return True
    try:
        parsed = ipaddress.ip_address(address.strip("[]"))
    except ValueError:
        return False
    return parsed.is_loopback or parsed.is_link_local
