import os

from http_echo.config import parse_listen_address

_host, _port = parse_listen_address(os.getenv('SERVICE_PORT', ':8080'))

bind = f'{_host or "0.0.0.0"}:{_port}'
if ':' in _host:
    bind = f'[{_host}]:{_port}'
worker_class = 'gthread'
workers = int(os.getenv('WORKERS', '1'))
threads = int(os.getenv('THREADS', '32'))
# delayed responses hold the worker thread for as long as the caller asked
timeout = int(os.getenv('WORKER_TIMEOUT', '0'))
