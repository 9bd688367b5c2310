import ipaddress
import socket

import pytest

from icmp_echo.core import network_utils
from icmp_echo.core.network_utils import ResolutionError, is_valid_ip, resolve


@pytest.fixture
def no_lookup(monkeypatch):
    def fail(host):
        raise AssertionError(f"unexpected lookup of {host}")

    monkeypatch.setattr(network_utils.socket, 'gethostbyname_ex', fail)


def test_literal_ipv4_skips_lookup(no_lookup):
    assert resolve('127.0.0.1') == ipaddress.IPv4Address('127.0.0.1')


def test_literal_ipv6_skips_lookup(no_lookup):
    assert resolve('::1') == ipaddress.IPv6Address('::1')


def test_surrounding_whitespace_ignored(no_lookup):
    assert resolve(' 10.1.2.3\n') == ipaddress.IPv4Address('10.1.2.3')


def test_first_address_wins(monkeypatch):
    monkeypatch.setattr(
        network_utils.socket, 'gethostbyname_ex',
        lambda host: (host, [], ['10.0.0.2', '10.0.0.3']),
    )
    assert resolve('example.test') == ipaddress.IPv4Address('10.0.0.2')


def test_no_addresses(monkeypatch):
    monkeypatch.setattr(network_utils.socket, 'gethostbyname_ex', lambda host: (host, [], []))
    with pytest.raises(ResolutionError) as excinfo:
        resolve('empty.test')
    assert excinfo.value.host == 'empty.test'


def test_lookup_failure(monkeypatch):
    def fail(host):
        raise socket.gaierror(socket.EAI_NONAME, 'Name or service not known')

    monkeypatch.setattr(network_utils.socket, 'gethostbyname_ex', fail)
    with pytest.raises(ResolutionError) as excinfo:
        resolve('nowhere.invalid')
    assert isinstance(excinfo.value.__cause__, socket.gaierror)


@pytest.mark.parametrize('text,valid', [
    ('192.168.0.1', True),
    ('fe80::1', True),
    ('256.0.0.1', False),
    ('example.com', False),
])
def test_is_valid_ip(text, valid):
    assert is_valid_ip(text) is valid
