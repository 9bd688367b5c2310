"""
Echo Session - one ICMP Echo Request/Reply round trip.

An EchoSession owns the sequence counter and the per-call settings
(receive buffer size, optional deadline, socket kind). Each ping opens
its own socket and closes it before returning, on every exit path.

Replies are not matched against the request: the first datagram that
arrives on the socket is reported, whatever it is.
"""

import ipaddress
import logging
import socket
import threading
import time
from dataclasses import dataclass
from typing import Optional, Union

from .icmp_packet import (
    MAX_SEQUENCE,
    EchoRequest,
    IcmpHeader,
    build_request,
    decode_reply,
)
from .raw_socket import create_icmp_socket, receive_packet, send_packet

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 100


class EchoTimeoutError(Exception):
    """Raised when no reply arrives before the session deadline."""

    def __init__(self, address: str, timeout: float):
        super().__init__(f"No reply from {address} within {timeout:g}s")
        self.address = address
        self.timeout = timeout


class UnsupportedAddressError(Exception):
    """Raised for targets this session cannot ping (IPv6)."""
    pass


class ReceiveIncomplete(Exception):
    """
    Receive failure carried inside an EchoResponse.

    Never raised by ``ping``; callers inspect ``EchoResponse.error``.
    """
    pass


@dataclass(frozen=True)
class EchoResponse:
    """Result of one round trip."""
    packet: bytes
    packet_len: int
    elapsed: float
    sequence: int
    address: str
    truncated: bool = False
    error: Optional[ReceiveIncomplete] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.packet_len >= 0

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed * 1000.0

    @property
    def reply_header(self) -> Optional[IcmpHeader]:
        return decode_reply(self.packet)


class EchoSession:
    """
    Sends Echo Requests and times the replies.

    Args:
        buffer_size: Receive buffer capacity; longer replies are truncated
            and flagged
        timeout: Receive deadline in seconds. None blocks until something
            arrives.
        socket_type: 'raw' or 'dgram' (see raw_socket)
        strict_checksum: RFC 1071 odd-byte padding

    Example:
        >>> session = EchoSession(timeout=1.0)
        >>> response = session.ping('127.0.0.1')
        >>> response.packet_len, response.elapsed_ms
    """

    def __init__(
        self,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        timeout: Optional[float] = None,
        socket_type: str = 'raw',
        strict_checksum: bool = True,
    ) -> None:
        if buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {buffer_size}")
        if timeout is not None and timeout <= 0:
            raise ValueError(f"timeout must be positive or None, got {timeout}")
        self.buffer_size = buffer_size
        self.timeout = timeout
        self.socket_type = socket_type
        self.strict_checksum = strict_checksum
        self._sequence = 0
        self._lock = threading.Lock()

    @property
    def sequence(self) -> int:
        """Last sequence number issued (0 before the first ping)."""
        return self._sequence

    def next_sequence(self) -> int:
        """Advance the counter and return the new value, wrapping at 65536."""
        with self._lock:
            self._sequence = (self._sequence + 1) & MAX_SEQUENCE
            return self._sequence

    def build_request(self, payload_size: int, sequence: int) -> EchoRequest:
        return build_request(payload_size, sequence, strict_checksum=self.strict_checksum)

    def ping(self, ip: Union[str, ipaddress.IPv4Address, ipaddress.IPv6Address],
             payload_size: int = 0) -> EchoResponse:
        """
        Run one Echo Request/Reply round trip.

        Args:
            ip: Resolved target address
            payload_size: Zero bytes of payload after the header

        Returns:
            EchoResponse; ``packet_len`` is -1 and ``error`` is set when the
            receive call fails

        Raises:
            UnsupportedAddressError: For IPv6 targets
            PacketBuildError: For a negative payload size
            SocketCreationError: If the socket cannot be opened
            TransmitError: If the send fails
            EchoTimeoutError: If a deadline is set and expires
        """
        address = ipaddress.ip_address(str(ip))
        if address.version != 4:
            raise UnsupportedAddressError(f"ICMPv6 is not supported: {address}")
        dst = str(address)

        sequence = self.next_sequence()
        request: Optional[EchoRequest] = self.build_request(payload_size, sequence)
        logger.debug("Built echo request seq=%d len=%d for %s", sequence, len(request), dst)

        with create_icmp_socket(socket.AF_INET, self.socket_type) as sock:
            sock.settimeout(self.timeout)

            start = time.perf_counter()
            send_packet(sock, request.packet, dst)
            request = None

            error: Optional[ReceiveIncomplete] = None
            truncated = False
            try:
                data, truncated = receive_packet(sock, self.buffer_size)
                packet_len = len(data)
            except socket.timeout as exc:
                raise EchoTimeoutError(dst, self.timeout) from exc
            except OSError as exc:
                data, packet_len = b'', -1
                error = ReceiveIncomplete(f"Receive from {dst} failed: {exc}")
                error.__cause__ = exc
            elapsed = time.perf_counter() - start

        if truncated:
            logger.debug("Reply from %s exceeded %d byte buffer", dst, self.buffer_size)
        logger.debug("Received %d bytes from %s in %.3f ms", packet_len, dst, elapsed * 1000.0)

        return EchoResponse(
            packet=data,
            packet_len=packet_len,
            elapsed=elapsed,
            sequence=sequence,
            address=dst,
            truncated=truncated,
            error=error,
        )


__all__ = [
    'DEFAULT_BUFFER_SIZE',
    'EchoTimeoutError',
    'UnsupportedAddressError',
    'ReceiveIncomplete',
    'EchoResponse',
    'EchoSession',
]
