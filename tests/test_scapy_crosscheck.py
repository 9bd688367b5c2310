"""Decode our packets with scapy as an independent implementation."""

import pytest

scapy_inet = pytest.importorskip('scapy.layers.inet')
from scapy.packet import Raw  # noqa: E402
from scapy.utils import checksum as scapy_checksum  # noqa: E402

from icmp_echo.core.checksum import checksum  # noqa: E402
from icmp_echo.core.icmp_packet import build_request  # noqa: E402

ICMP = scapy_inet.ICMP


@pytest.mark.parametrize('data', [
    bytes([0x00, 0x01, 0xF2, 0x03, 0xF4, 0xF5, 0xF6, 0xF7]),
    bytes(range(1, 64)),
    b'\xde\xad\xbe\xef\x01',
])
def test_checksum_matches_scapy(data):
    assert checksum(data) == scapy_checksum(data)


@pytest.mark.parametrize('sequence,payload_size', [(1, 0), (0xBEEF, 20)])
def test_request_matches_scapy_encoding(sequence, payload_size):
    request = build_request(payload_size, sequence)
    # Our sequence sits in the classic identifier slot; gateway and mtu follow
    expected = bytes(ICMP(type=8, code=0, id=sequence, seq=0) / Raw(load=bytes(4 + payload_size)))
    assert request.packet == expected

    decoded = ICMP(request.packet)
    assert decoded.type == 8
    assert decoded.chksum == request.header.checksum
