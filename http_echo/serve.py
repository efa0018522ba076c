"""Run the echo server with werkzeug's threaded server.

Example::

    http-echo --service-port :8080 --env

Every flag falls back to its environment variable (``SERVICE_PORT``,
``METRICS_PORT``, ``ECHO_ENV``), then to ``$ECHO_CONFIG``, then to the
built-in default. For production use run ``gunicorn app:app`` instead.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from werkzeug.serving import make_server

from .config import load_config
from .constant import VERSION
from .exception import ConfigError
from .server import create_app
from .utils import logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='http-echo',
        description='Http request echo server',
    )
    parser.add_argument('-p',
                        '--service-port',
                        '--port',
                        dest='service_port',
                        metavar='ADDR',
                        help='address to listen on (default :8080)')
    parser.add_argument('-m',
                        '--metrics-port',
                        dest='metrics_port',
                        metavar='ADDR',
                        help='address to serve metrics on (default :8081)')
    parser.add_argument('-e',
                        '--env',
                        dest='include_env',
                        action='store_true',
                        default=None,
                        help='include process environment in response')
    parser.add_argument('-c',
                        '--config',
                        type=Path,
                        default=None,
                        help='JSON config file')
    parser.add_argument('--debug',
                        action='store_true',
                        help='log every request')
    parser.add_argument('--version',
                        action='version',
                        version=f'%(prog)s {VERSION}')
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    try:
        config = load_config(
            args.config,
            service_port=args.service_port,
            metrics_port=args.metrics_port,
            include_env=args.include_env,
        )
    except ConfigError as e:
        logger().error(f'invalid configuration: {e}')
        sys.exit(1)

    app = create_app(config)
    if args.debug:
        app.logger.setLevel(logging.DEBUG)
    host, port = config.listen_address
    logger().info(f'http-echo {VERSION}')
    logger().info(f'Starting service on {config.service_port} ...')
    if config.include_env:
        logger().info('process environment is included in responses')
    logger().info(
        f'metrics port {config.metrics_port} is configured but not served')
    try:
        server = make_server(host or '0.0.0.0', port, app, threaded=True)
    except OSError as e:
        logger().error(f'failed to listen on {config.service_port}: {e}')
        sys.exit(1)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger().info('Stopping service...')
    finally:
        server.server_close()
