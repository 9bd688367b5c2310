"""
Core module initialization for icmp-echo.
"""

from .checksum import (
    InternetChecksum,
    ChecksumError,
    checksum,
    verify,
)
from .icmp_packet import (
    HEADER_SIZE,
    IcmpHeader,
    EchoRequest,
    PacketBuildError,
    build_request,
    decode_reply,
)
from .network_utils import ResolutionError, resolve
from .raw_socket import SocketCreationError, TransmitError
from .echo_session import (
    EchoSession,
    EchoResponse,
    EchoTimeoutError,
    ReceiveIncomplete,
    UnsupportedAddressError,
)

__all__ = [
    'InternetChecksum',
    'ChecksumError',
    'checksum',
    'verify',
    'HEADER_SIZE',
    'IcmpHeader',
    'EchoRequest',
    'PacketBuildError',
    'build_request',
    'decode_reply',
    'ResolutionError',
    'resolve',
    'SocketCreationError',
    'TransmitError',
    'EchoSession',
    'EchoResponse',
    'EchoTimeoutError',
    'ReceiveIncomplete',
    'UnsupportedAddressError',
]
