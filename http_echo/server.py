import logging

from flask import Flask, request

from .config import ServerConfig, debug_enabled
from .handler import EchoHandler


def use_gunicorn_logger(app: Flask):
    # let flask app use gunicorn's logger
    gunicorn_logger = logging.getLogger('gunicorn.error')
    if not gunicorn_logger.handlers:
        return
    app.logger.handlers = gunicorn_logger.handlers
    app.logger.setLevel(gunicorn_logger.level)
    logging.getLogger().setLevel(gunicorn_logger.level)


def create_app(config: ServerConfig, handler: EchoHandler | None = None) -> Flask:
    app = Flask('http_echo', static_folder=None)
    app.config['ECHO'] = config
    # the url map holds no rules; nothing may rewrite the requested path
    app.url_map.merge_slashes = False
    app.url_map.strict_slashes = False
    use_gunicorn_logger(app)
    if debug_enabled():
        app.logger.setLevel(logging.DEBUG)
        logging.getLogger().setLevel(logging.DEBUG)

    echo = handler or EchoHandler(config)

    # answer every request before routing, whatever its path or method
    @app.before_request
    def echo_request():
        return echo(request)

    return app
