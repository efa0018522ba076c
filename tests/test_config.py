import json

import pytest

from http_echo.config import (
    ServerConfig,
    env_flag,
    load_config,
    parse_listen_address,
)
from http_echo.exception import ConfigError


@pytest.mark.parametrize('address, expected', [
    (':8080', ('', 8080)),
    ('127.0.0.1:9000', ('127.0.0.1', 9000)),
    ('localhost:0', ('localhost', 0)),
    ('[::1]:8080', ('::1', 8080)),
])
def test_parse_listen_address(address, expected):
    assert parse_listen_address(address) == expected


@pytest.mark.parametrize('address', [
    '8080',
    'localhost',
    ':http',
    ':-1',
    ':65536',
    '::1:8080',
    '[::1:8080',
    '[nope]:8080',
])
def test_parse_listen_address_rejects(address):
    with pytest.raises(ValueError):
        parse_listen_address(address)


def test_defaults():
    config = load_config()
    assert config == ServerConfig()
    assert config.service_port == ':8080'
    assert config.metrics_port == ':8081'
    assert config.include_env is False
    assert config.listen_address == ('', 8080)


def test_environment_variables(monkeypatch):
    monkeypatch.setenv('SERVICE_PORT', '127.0.0.1:9999')
    monkeypatch.setenv('METRICS_PORT', ':9998')
    monkeypatch.setenv('ECHO_ENV', 'True')
    config = load_config()
    assert config.service_port == '127.0.0.1:9999'
    assert config.metrics_port == ':9998'
    assert config.include_env is True


def test_config_file(tmp_path):
    path = tmp_path / 'echo.json'
    path.write_text(json.dumps({'servicePort': ':7000', 'env': True}))
    config = load_config(path)
    assert config.service_port == ':7000'
    assert config.include_env is True


def test_config_file_from_environment(tmp_path, monkeypatch):
    path = tmp_path / 'echo.json'
    path.write_text(json.dumps({'metricsPort': ':7001'}))
    monkeypatch.setenv('ECHO_CONFIG', str(path))
    assert load_config().metrics_port == ':7001'


def test_precedence(tmp_path, monkeypatch):
    path = tmp_path / 'echo.json'
    path.write_text(json.dumps({'servicePort': ':7000', 'env': True}))
    monkeypatch.setenv('SERVICE_PORT', ':7100')
    monkeypatch.setenv('ECHO_ENV', 'false')
    config = load_config(path)
    assert config.service_port == ':7100'
    assert config.include_env is False
    config = load_config(path, service_port=':7200', include_env=None)
    assert config.service_port == ':7200'
    assert config.include_env is False


@pytest.mark.parametrize('content', ['{not json', '[1, 2]'])
def test_unusable_config_file_is_ignored(tmp_path, content):
    path = tmp_path / 'echo.json'
    path.write_text(content)
    assert load_config(path) == ServerConfig()


def test_missing_config_file_is_ignored(tmp_path):
    assert load_config(tmp_path / 'missing.json') == ServerConfig()


def test_invalid_address_is_config_error(monkeypatch):
    monkeypatch.setenv('SERVICE_PORT', 'no-port-here')
    with pytest.raises(ConfigError):
        load_config()


def test_invalid_metrics_address_is_config_error():
    with pytest.raises(ConfigError):
        load_config(metrics_port='nope')


def test_config_is_immutable():
    config = ServerConfig()
    with pytest.raises(Exception):
        config.include_env = True


@pytest.mark.parametrize('raw, expected', [
    ('true', True),
    ('TRUE', True),
    ('1', True),
    ('yes', True),
    ('on', True),
    ('false', False),
    ('0', False),
    ('', False),
])
def test_env_flag(monkeypatch, raw, expected):
    monkeypatch.setenv('ECHO_ENV', raw)
    assert env_flag('ECHO_ENV') is expected


def test_env_flag_default(monkeypatch):
    assert env_flag('ECHO_ENV', default=True) is True
