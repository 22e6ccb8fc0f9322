"""Dev server connection details and what the app needs to reach them."""

import socket
from dataclasses import dataclass

from cordova_run.config import is_local_address

__all__ = (
    "PORT_FORWARDING_HINT",
    "ServerDetails",
    "content_src_url",
    "reachability_warning",
    "resolve_external_address",
)

PORT_FORWARDING_HINT = "Ensure you have proper port forwarding setup from your device to your computer."

_WILDCARD_ADDRESSES = frozenset({"0.0.0.0", "::", ""})  # noqa: S104


@dataclass(frozen=True)
class ServerDetails:
    """Where a started dev server can be reached.

    Attributes:
        protocol: URL scheme, ``http`` when None.
        external_address: Address a device should use.
        external_port: Port a device should use.
        externally_accessible: Whether the address is reachable from other machines.
    """

    protocol: "str | None"
    external_address: str
    external_port: int
    externally_accessible: bool


def content_src_url(details: ServerDetails) -> str:
    """Build the URL ``config.xml`` must load its content from.

    Returns:
        ``{protocol}://{address}:{port}``.
    """
    address = details.external_address
    if ":" in address and not address.startswith("["):
        address = f"[{address}]"
    return f"{details.protocol or 'http'}://{address}:{details.external_port}"


def reachability_warning(details: ServerDetails) -> "str | None":
    """Explain why a device may fail to load the app from the dev server.

    Returns:
        A console message, or None when the server is externally accessible.
    """
    if details.externally_accessible:
        return None
    message = f"Your device or emulator may not be able to access [bold]{details.external_address}[/]."
    if is_local_address(details.external_address):
        message = f"{message}\n{PORT_FORWARDING_HINT}"
    return message


def _lan_address() -> "str | None":
    """Find the address of the interface used for outbound traffic.

    Connecting a UDP socket sends no packets; it only selects a route.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.connect(("10.254.254.254", 1))
        address = sock.getsockname()[0]
    except OSError:
        return None
    finally:
        sock.close()
    return None if is_local_address(address) else address


def resolve_external_address(bind_address: str) -> "tuple[str, bool]":
    """Map the dev server's bind address to the address a device should use.

    Returns:
        The external address and whether it is reachable from other machines.
    """
    if bind_address in _WILDCARD_ADDRESSES:
        address = _lan_address()
        if address is None:
            return "localhost", False
        return address, True
    return bind_address, not is_local_address(bind_address)
