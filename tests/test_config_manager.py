import json
import logging
import os

import pytest

from icmp_echo.config.config_manager import (
    ConfigError,
    ConfigManager,
    ConfigSchema,
    create_default_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith(ConfigManager.ENV_PREFIX):
            monkeypatch.delenv(key)


def test_defaults_are_valid():
    ConfigSchema.validate(ConfigSchema.get_defaults())
    assert ConfigManager().validate()


def test_defaults_match_legacy_pinger():
    config = ConfigManager()
    assert config.get('network.recv_buffer_size') == 100
    assert config.get('network.timeout') is None
    assert config.get('cli.interval') == 1.0


def test_get_missing_key_returns_default():
    assert ConfigManager().get('network.nope', 'fallback') == 'fallback'


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv('ICMP_ECHO_NETWORK_TIMEOUT', '2.5')
    monkeypatch.setenv('ICMP_ECHO_ICMP_PAYLOAD_SIZE', '8')
    config = ConfigManager()
    assert config.get('network.timeout') == 2.5
    assert config.get('icmp.payload_size') == 8
    assert not config.modified

    monkeypatch.setenv('ICMP_ECHO_NETWORK_TIMEOUT', 'none')
    assert ConfigManager().get('network.timeout') is None


def test_environment_is_read_once(monkeypatch):
    config = ConfigManager()
    monkeypatch.setenv('ICMP_ECHO_CLI_COUNT', '9')
    assert config.get('cli.count') == 4


def test_environment_beats_file_but_not_set(monkeypatch, tmp_path):
    path = tmp_path / 'icmp_echo.json'
    path.write_text(json.dumps({'cli': {'count': 7}}))
    monkeypatch.setenv('ICMP_ECHO_CLI_COUNT', '3')

    config = ConfigManager(str(path))
    assert config.load()
    assert config.get('cli.count') == 3

    config.set('cli.count', 1)
    assert config.get('cli.count') == 1


@pytest.mark.parametrize('name,value', [
    ('ICMP_ECHO_NETWORK_TIMEOUT', '0'),
    ('ICMP_ECHO_CLI_COUNT', 'abc'),
    ('ICMP_ECHO_NETWORK_SOCKET_TYPE', 'x'),
])
def test_invalid_environment_is_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigError):
        ConfigManager()


def test_load_merges_over_defaults(tmp_path):
    path = tmp_path / 'icmp_echo.json'
    path.write_text(json.dumps({'network': {'timeout': 3, 'socket_type': 'dgram'}}))

    config = ConfigManager(str(path))
    assert config.load() is True
    assert config.get('network.timeout') == 3
    assert config.get('network.socket_type') == 'dgram'
    assert config.get('network.recv_buffer_size') == 100


def test_load_missing_file(tmp_path):
    config = ConfigManager(str(tmp_path / 'absent.json'))
    assert config.load() is False
    assert config.config == ConfigSchema.get_defaults()


@pytest.mark.parametrize('content', [
    '{"icmp": {"payload_size": -1}}',
    '{"network": {"socket_type": "stream"}}',
    '{"network": {"timeout": 0}}',
    '[1, 2]',
    '{not json',
])
def test_load_rejects_bad_files(tmp_path, content):
    path = tmp_path / 'bad.json'
    path.write_text(content)

    config = ConfigManager(str(path))
    assert config.load() is False
    assert config.config == ConfigSchema.get_defaults()


def test_set_validates():
    config = ConfigManager()
    config.set('cli.count', 10)
    assert config.get('cli.count') == 10
    assert config.modified

    with pytest.raises(ConfigError, match='cli.count'):
        config.set('cli.count', 0)
    assert config.get('cli.count') == 10


def test_session_kwargs():
    config = ConfigManager()
    config.set('icmp.checksum_mode', 'legacy')
    config.set('network.timeout', 1.5)
    assert config.session_kwargs() == {
        'buffer_size': 100,
        'timeout': 1.5,
        'socket_type': 'raw',
        'strict_checksum': False,
    }


def test_save_and_reload(tmp_path):
    path = tmp_path / 'saved.json'
    assert create_default_config(str(path))

    config = ConfigManager(str(path))
    config.set('icmp.payload_size', 0)
    assert config.save()

    reloaded = ConfigManager(str(path))
    assert reloaded.load()
    assert reloaded.get('icmp.payload_size') == 0


def test_missing_file_warns(tmp_path, caplog):
    path = tmp_path / 'absent.json'
    with caplog.at_level(logging.WARNING, logger='icmp_echo.config.config_manager'):
        assert ConfigManager(str(path)).load() is False
    assert str(path) in caplog.text
