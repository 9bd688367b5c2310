import socket

import pytest


class FakeSocket:
    """Stands in for an ICMP socket; records traffic, replays one reply."""

    def __init__(self, reply=b'', recv_error=None, send_error=None):
        self.reply = reply
        self.recv_error = recv_error
        self.send_error = send_error
        self.sent = []
        self.timeout = 'unset'
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
        return False

    def settimeout(self, timeout):
        self.timeout = timeout

    def sendto(self, data, address):
        if self.send_error is not None:
            raise self.send_error
        self.sent.append((bytes(data), address))
        return len(data)

    def recvmsg(self, bufsize):
        if self.recv_error is not None:
            raise self.recv_error
        flags = socket.MSG_TRUNC if len(self.reply) > bufsize else 0
        return self.reply[:bufsize], [], flags, ('127.0.0.1', 0)

    def fileno(self):
        return -1

    def close(self):
        self.closed = True


@pytest.fixture
def fake_socket_factory(monkeypatch):
    """
    Patch the session's socket constructor.

    Returns a function taking FakeSocket kwargs; every socket created
    afterwards is appended to ``factory.created``.
    """
    from icmp_echo.core import echo_session

    def factory(**kwargs):
        def create(family, socket_type):
            factory.calls.append((family, socket_type))
            sock = FakeSocket(**kwargs)
            factory.created.append(sock)
            return sock

        monkeypatch.setattr(echo_session, 'create_icmp_socket', create)
        return factory

    factory.created = []
    factory.calls = []
    return factory


def ipv4_header(payload_len, protocol=1):
    """Minimal 20-byte IPv4 header as delivered by a raw socket."""
    total = 20 + payload_len
    return bytes([0x45, 0, total >> 8, total & 0xFF, 0, 0, 0, 0, 64, protocol, 0, 0,
                  127, 0, 0, 1, 127, 0, 0, 1])
