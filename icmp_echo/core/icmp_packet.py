"""
ICMP Packet Module - Echo Request construction and reply decoding.

Echo Request wire format (all multi-byte fields big-endian):

    +-----------+-----------+-----------------------+
    | Type (8)  | Code (8)  |     Checksum (16)     |
    +-----------+-----------+-----------------------+
    |  Sequence (16)        |   Gateway (32) ...    |
    +-----------------------+-----------------------+
    |  ... Gateway          |       MTU (16)        |
    +-----------------------+-----------------------+
    |          Payload (zero-filled, nbytes)        |
    +-----------------------------------------------+

Headers are serialized field by field with ``struct`` rather than by
reinterpreting memory, so byte order is explicit on both sides.
"""

import struct
from dataclasses import dataclass
from typing import Optional

from .checksum import checksum

ICMP_ECHO_REPLY = 0
ICMP_ECHO_REQUEST = 8

HEADER_FORMAT = '!BBHHIH'
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)
CHECKSUM_OFFSET = 2

MAX_SEQUENCE = 0xFFFF


class PacketBuildError(Exception):
    """Raised when an Echo Request cannot be constructed."""
    pass


@dataclass
class IcmpHeader:
    """
    ICMP Echo header.

    ``sequence`` holds the host-order counter value; ``pack`` writes it
    in network byte order.
    """
    type: int = ICMP_ECHO_REQUEST
    code: int = 0
    checksum: int = 0
    sequence: int = 0
    gateway: int = 0
    mtu: int = 0

    def pack(self) -> bytes:
        """Serialize the header into its 12-byte wire form."""
        return struct.pack(
            HEADER_FORMAT,
            self.type,
            self.code,
            self.checksum,
            self.sequence,
            self.gateway,
            self.mtu,
        )

    @classmethod
    def unpack(cls, data: bytes) -> 'IcmpHeader':
        """
        Deserialize a header from the start of ``data``.

        Short buffers are zero-extended so that any reply can be decoded.
        """
        raw = bytes(data[:HEADER_SIZE]).ljust(HEADER_SIZE, b'\x00')
        icmp_type, code, csum, sequence, gateway, mtu = struct.unpack(HEADER_FORMAT, raw)
        return cls(
            type=icmp_type,
            code=code,
            checksum=csum,
            sequence=sequence,
            gateway=gateway,
            mtu=mtu,
        )


@dataclass(frozen=True)
class EchoRequest:
    """A fully checksummed Echo Request ready for one send call."""
    header: IcmpHeader
    packet: bytes

    def __len__(self) -> int:
        return len(self.packet)

    @property
    def sequence(self) -> int:
        return self.header.sequence


def build_request(payload_size: int, sequence: int, strict_checksum: bool = True) -> EchoRequest:
    """
    Build an ICMP Echo Request with ``payload_size`` zero bytes of data.

    Args:
        payload_size: Number of payload bytes after the header (>= 0)
        sequence: Sequence number, 0..65535
        strict_checksum: RFC 1071 odd-byte padding (see checksum module)

    Returns:
        EchoRequest of exactly HEADER_SIZE + payload_size bytes

    Raises:
        PacketBuildError: If parameters are out of range
    """
    if payload_size < 0:
        raise PacketBuildError(f"Payload size must be >= 0, got {payload_size}")
    if not 0 <= sequence <= MAX_SEQUENCE:
        raise PacketBuildError(f"Sequence number out of range: {sequence}")

    header = IcmpHeader(type=ICMP_ECHO_REQUEST, code=0, sequence=sequence)
    buffer = bytearray(header.pack())
    buffer.extend(bytes(payload_size))

    header.checksum = checksum(buffer, strict=strict_checksum)
    struct.pack_into('!H', buffer, CHECKSUM_OFFSET, header.checksum)

    return EchoRequest(header=header, packet=bytes(buffer))


def strip_ip_header(data: bytes) -> bytes:
    """
    Drop a leading IPv4 header if one is present.

    IPv4 raw sockets deliver the IP header in front of the ICMP message;
    ping (SOCK_DGRAM) sockets do not.
    """
    if len(data) >= 20 and data[0] >> 4 == 4:
        ihl = (data[0] & 0x0F) * 4
        if ihl >= 20 and len(data) >= ihl:
            return data[ihl:]
    return data


def decode_reply(data: bytes) -> Optional[IcmpHeader]:
    """
    Decode the ICMP header of a received datagram.

    The header is not checked against the request: whatever ICMP message
    arrived is returned as-is. Returns None for an empty buffer.
    """
    if not data:
        return None
    return IcmpHeader.unpack(strip_ip_header(data))


__all__ = [
    'ICMP_ECHO_REPLY',
    'ICMP_ECHO_REQUEST',
    'HEADER_SIZE',
    'MAX_SEQUENCE',
    'PacketBuildError',
    'IcmpHeader',
    'EchoRequest',
    'build_request',
    'strip_ip_header',
    'decode_reply',
]
