"""
Raw Socket Module - ICMP socket transport for icmp-echo.

Features:
- Raw ICMP socket creation (SOCK_RAW, needs root or CAP_NET_RAW)
- Unprivileged Linux ping sockets (SOCK_DGRAM + IPPROTO_ICMP)
- Packet transmission via sendto with no port semantics
- Single bounded receive with truncation detection

Raw IPv4 sockets hand back the IP header in front of the ICMP message;
ping sockets strip it. Neither kind is parsed here.
"""

import logging
import socket
from typing import Tuple

logger = logging.getLogger(__name__)

SOCKET_TYPES = {
    'raw': socket.SOCK_RAW,
    'dgram': socket.SOCK_DGRAM,
}


class SocketCreationError(Exception):
    """
    Raised when the ICMP socket cannot be opened.

    ``privileged`` is True when the OS refused for lack of privilege,
    which callers usually want to report differently from other failures.
    """

    def __init__(self, message: str, privileged: bool = False):
        super().__init__(message)
        self.privileged = privileged


class TransmitError(Exception):
    """Raised when sending the Echo Request fails."""
    pass


def create_icmp_socket(family: int = socket.AF_INET, socket_type: str = 'raw') -> socket.socket:
    """
    Create an ICMP socket.

    Args:
        family: socket.AF_INET
        socket_type: 'raw' for SOCK_RAW, 'dgram' for an unprivileged ping socket

    Returns:
        socket.socket: Open ICMP socket

    Raises:
        SocketCreationError: If the socket cannot be created
        ValueError: If socket_type is unknown
    """
    if socket_type not in SOCKET_TYPES:
        raise ValueError(
            f"Unknown socket type {socket_type!r}, expected one of {sorted(SOCKET_TYPES)}"
        )

    try:
        sock = socket.socket(family, SOCKET_TYPES[socket_type], socket.IPPROTO_ICMP)
    except PermissionError as exc:
        raise SocketCreationError(
            f"Permission denied opening {socket_type} ICMP socket "
            f"(run as root or use a ping socket)",
            privileged=True,
        ) from exc
    except OSError as exc:
        raise SocketCreationError(f"Cannot open {socket_type} ICMP socket: {exc}") from exc

    logger.debug("Opened %s ICMP socket fd=%d", socket_type, sock.fileno())
    return sock


def send_packet(sock: socket.socket, packet: bytes, dst_ip: str) -> int:
    """
    Send a packet to ``dst_ip``.

    Args:
        sock: ICMP socket
        packet: ICMP message bytes
        dst_ip: Destination IPv4 address

    Returns:
        int: Number of bytes sent

    Raises:
        TransmitError: If sendto fails
    """
    try:
        sent = sock.sendto(packet, (dst_ip, 0))
    except OSError as exc:
        raise TransmitError(f"Send to {dst_ip} failed: {exc}") from exc
    logger.debug("Sent %d bytes to %s", sent, dst_ip)
    return sent


def receive_packet(sock: socket.socket, bufsize: int) -> Tuple[bytes, bool]:
    """
    Block for one datagram.

    Args:
        sock: ICMP socket
        bufsize: Receive buffer capacity in bytes

    Returns:
        (data, truncated): at most ``bufsize`` bytes, and whether the
        datagram was longer than the buffer. Truncation can only be
        detected where the platform supports recvmsg.
    """
    if hasattr(sock, 'recvmsg'):
        data, _ancdata, msg_flags, _address = sock.recvmsg(bufsize)
        return data, bool(msg_flags & getattr(socket, 'MSG_TRUNC', 0))
    return sock.recv(bufsize), False


__all__ = [
    'SOCKET_TYPES',
    'SocketCreationError',
    'TransmitError',
    'create_icmp_socket',
    'send_packet',
    'receive_packet',
]
