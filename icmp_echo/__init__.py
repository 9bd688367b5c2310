"""
icmp-echo v1.0.0 - ICMP Echo round-trip timer
=============================================

Sends one ICMP Echo Request at a time over a raw socket and measures how
long the reply takes.

Usage:
    from icmp_echo import EchoSession, resolve

    session = EchoSession(timeout=2.0)
    response = session.ping(resolve("example.com"), payload_size=56)
    print(response.packet_len, response.elapsed_ms)

Version: 1.0.0
"""

__version__ = "1.0.0"
__author__ = "icmp-echo developers"

from icmp_echo.core.checksum import checksum
from icmp_echo.core.echo_session import EchoResponse, EchoSession
from icmp_echo.core.icmp_packet import build_request
from icmp_echo.core.network_utils import resolve

__all__ = [
    'EchoSession',
    'EchoResponse',
    'build_request',
    'checksum',
    'resolve',
    '__version__',
]
