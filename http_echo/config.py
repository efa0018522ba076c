import ipaddress
import json
import os
from pathlib import Path
from typing import Tuple

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .constant import DEFAULT_METRICS_PORT, DEFAULT_SERVICE_PORT
from .exception import ConfigError

_TRUTHY = {'true', '1', 'yes', 'on'}


def env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def parse_listen_address(address: str) -> Tuple[str, int]:
    """
    Split a listen address into ``(host, port)``.

    Accepts ``host:port``, ``:port`` for every interface and
    ``[v6addr]:port``. An empty host is returned as ``''``.
    """
    host, sep, port = address.rpartition(':')
    if not sep:
        raise ValueError(f'missing port in address {address!r}')
    if host.startswith('[') or host.endswith(']'):
        if not (host.startswith('[') and host.endswith(']')):
            raise ValueError(f'malformed IPv6 address {address!r}')
        host = host[1:-1]
        try:
            ipaddress.IPv6Address(host)
        except ValueError as e:
            raise ValueError(f'invalid IPv6 address {address!r}') from e
    elif ':' in host:
        raise ValueError(f'too many colons in address {address!r}')
    if not port.isascii() or not port.isdigit():
        raise ValueError(f'invalid port in address {address!r}')
    port_number = int(port)
    if port_number > 65535:
        raise ValueError(f'port out of range in address {address!r}')
    return host, port_number


class ServerConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    service_port: str = DEFAULT_SERVICE_PORT
    metrics_port: str = DEFAULT_METRICS_PORT
    include_env: bool = False

    @field_validator('service_port', 'metrics_port')
    @classmethod
    def _validate_address(cls, v: str) -> str:
        parse_listen_address(v)
        return v

    @property
    def listen_address(self) -> Tuple[str, int]:
        return parse_listen_address(self.service_port)


def _load_echo_config(path: Path) -> dict:
    try:
        with path.open() as f:
            cfg = json.load(f)
    except FileNotFoundError:
        return {}
    except json.JSONDecodeError:
        return {}
    return cfg if isinstance(cfg, dict) else {}


def load_config(
    config_path: str | Path | None = None,
    **overrides,
) -> ServerConfig:
    """
    Build the server configuration.

    Values are layered from lowest to highest precedence: built-in
    defaults, the JSON file at ``config_path`` (or ``$ECHO_CONFIG``),
    environment variables, then keyword ``overrides`` whose value is not
    ``None``.
    """
    if config_path is None:
        config_path = os.getenv('ECHO_CONFIG')
    cfg = _load_echo_config(Path(config_path)) if config_path else {}
    values = {}
    if 'servicePort' in cfg:
        values['service_port'] = cfg['servicePort']
    if 'metricsPort' in cfg:
        values['metrics_port'] = cfg['metricsPort']
    if 'env' in cfg:
        values['include_env'] = cfg['env']
    if os.getenv('SERVICE_PORT'):
        values['service_port'] = os.getenv('SERVICE_PORT')
    if os.getenv('METRICS_PORT'):
        values['metrics_port'] = os.getenv('METRICS_PORT')
    if os.getenv('ECHO_ENV') is not None:
        values['include_env'] = env_flag('ECHO_ENV')
    values.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return ServerConfig(**values)
    except ValidationError as e:
        raise ConfigError(str(e)) from e


def debug_enabled() -> bool:
    return env_flag('ECHO_DEBUG')

