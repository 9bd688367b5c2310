"""
Checksum Module - RFC 792 / RFC 1071 Internet checksum for ICMP packets.

Implementation follows RFC 1071 "Computing the Internet Checksum":
1. Sum all 16-bit big-endian words with an unbounded accumulator
2. Fold the carries back into the low 16 bits
3. Return the ones-complement

The only knob is how an odd trailing byte is handled. RFC 1071 pads it
with a zero low byte (``strict=True``, the default). The legacy pinger
this tool replaces silently dropped it (``strict=False``). Echo requests
built by this package always end in zero payload bytes, so both modes
agree on every packet we send.

All functions are pure and thread-safe.
"""

from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]


class ChecksumError(Exception):
    """Raised when checksum calculation fails."""
    pass


class InternetChecksum:
    """
    Ones-complement checksum calculator for ICMP messages.

    Example:
        >>> InternetChecksum.in_cksum(b'\\x00\\x01\\xf2\\x03\\xf4\\xf5\\xf6\\xf7')
        8717
    """

    @staticmethod
    def _fold_32_to_16(sum32: int) -> int:
        """
        Fold an accumulated sum to 16 bits with carry propagation.

        Adds the high bits back into the low 16 bits until no overflow
        remains. Two passes always suffice for sums of 16-bit words that
        fit in 32 bits; the loop also covers larger buffers.
        """
        while sum32 >> 16:
            sum32 = (sum32 & 0xFFFF) + (sum32 >> 16)
        return sum32 & 0xFFFF

    @staticmethod
    def _ones_complement_16(value: int) -> int:
        """Return the ones-complement of a 16-bit value."""
        return (~value) & 0xFFFF

    @classmethod
    def in_cksum(cls, data: BytesLike, strict: bool = True) -> int:
        """
        Compute the Internet checksum of ``data``.

        Args:
            data: Bytes to checksum
            strict: Pad an odd trailing byte with zero (RFC 1071). When
                False the unpaired byte is ignored, matching the legacy
                pinger bit for bit.

        Returns:
            16-bit ones-complement checksum. An empty buffer yields 0xFFFF.

        Raises:
            ChecksumError: If data is not bytes-like
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise ChecksumError(
                f"Data must be bytes, got {type(data).__name__}"
            )
        data = bytes(data)

        end = len(data) - (len(data) % 2)
        total = 0
        for i in range(0, end, 2):
            # Earlier offset is the high byte (network byte order)
            total += (data[i] << 8) | data[i + 1]

        if strict and end != len(data):
            total += data[end] << 8

        return cls._ones_complement_16(cls._fold_32_to_16(total))

    @classmethod
    def verify(cls, data: BytesLike, strict: bool = True) -> bool:
        """
        Check a message whose checksum field is already filled in.

        A correctly checksummed message sums to 0xFFFF, so recomputing the
        checksum over it yields zero.
        """
        return cls.in_cksum(data, strict=strict) == 0


def checksum(data: BytesLike, strict: bool = True) -> int:
    """
    Calculate the ICMP checksum of ``data``.

    Args:
        data: ICMP message bytes with the checksum field zeroed
        strict: RFC 1071 zero padding of an odd trailing byte

    Returns:
        16-bit checksum value
    """
    return InternetChecksum.in_cksum(data, strict=strict)


def verify(data: BytesLike, strict: bool = True) -> bool:
    """Return True if ``data`` carries a valid Internet checksum."""
    return InternetChecksum.verify(data, strict=strict)


__all__ = [
    'ChecksumError',
    'InternetChecksum',
    'checksum',
    'verify',
]
