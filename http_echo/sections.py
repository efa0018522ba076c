import base64
import os
import secrets
from typing import Iterable, Mapping, Optional

from .constant import SEPARATOR, Section


def section(name: Section, content: str) -> str:
    """Frame ``content`` under a ``Name:`` header between separator lines."""
    if content and not content.endswith('\n'):
        content += '\n'
    return f'\n{name.value}:\n{SEPARATOR}\n{content}{SEPARATOR}\n'


def lines(items: Iterable[str]) -> str:
    return ''.join(f'{item}\n' for item in items)


def remote_addr(environ: Mapping) -> str:
    """Peer address as ``ip:port`` (``[ip]:port`` for IPv6) when known."""
    addr = environ.get('REMOTE_ADDR', '')
    port = environ.get('REMOTE_PORT')
    if not port:
        return addr
    if ':' in addr:
        addr = f'[{addr}]'
    return f'{addr}:{port}'


def environment_lines(environ: Optional[Mapping[str, str]] = None) -> list:
    if environ is None:
        environ = os.environ
    return sorted(f'{key}={value}' for key, value in environ.items())


def random_payload(size: int) -> str:
    return base64.b64encode(secrets.token_bytes(size)).decode('ascii')


def request_section(dump: str) -> str:
    return section(Section.REQUEST, dump)


def client_section(environ: Mapping) -> str:
    return section(Section.CLIENT, lines([f'RemoteAddr: {remote_addr(environ)}']))


def environment_section(environ: Optional[Mapping[str, str]] = None) -> str:
    return section(Section.ENVIRONMENT, lines(environment_lines(environ)))


def payload_section(size: int) -> str:
    return section(Section.PAYLOAD, lines([random_payload(size)]))
