"""
Network Utilities Module
========================

Target resolution for icmp-echo.

Literal addresses are parsed directly. Hostnames go through the system
resolver and the first address returned wins: there is no IPv4/IPv6
preference and no reachability probing.
"""

import ipaddress
import logging
import socket
from typing import Union

logger = logging.getLogger(__name__)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


class ResolutionError(Exception):
    """Raised when a hostname does not resolve to any address."""

    def __init__(self, host: str, reason: str):
        super().__init__(f"Cannot resolve {host!r}: {reason}")
        self.host = host
        self.reason = reason


def is_valid_ip(ip: str) -> bool:
    """
    Check if a string is a literal IPv4 or IPv6 address.

    Args:
        ip: IP address string to validate

    Returns:
        True if valid IP, False otherwise
    """
    try:
        ipaddress.ip_address(ip)
        return True
    except ValueError:
        return False


def resolve(host: str) -> IPAddress:
    """
    Turn a hostname or IP string into an address.

    Args:
        host: Hostname or literal IP address

    Returns:
        The parsed literal, or the first address from the resolver

    Raises:
        ResolutionError: If the lookup fails or returns no addresses
    """
    host = host.strip()
    if is_valid_ip(host):
        return ipaddress.ip_address(host)

    try:
        _name, _aliases, addresses = socket.gethostbyname_ex(host)
    except (socket.gaierror, socket.herror, UnicodeError) as exc:
        raise ResolutionError(host, str(exc)) from exc

    if not addresses:
        raise ResolutionError(host, "no addresses returned")

    logger.debug("Resolved %s to %s (first of %d)", host, addresses[0], len(addresses))
    return ipaddress.ip_address(addresses[0])


__all__ = [
    'IPAddress',
    'ResolutionError',
    'is_valid_ip',
    'resolve',
]
