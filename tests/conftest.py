import threading

import pytest
from werkzeug.serving import make_server

from http_echo.config import ServerConfig
from http_echo.server import create_app


@pytest.fixture(autouse=True)
def clean_echo_env(monkeypatch):
    for name in ('SERVICE_PORT', 'METRICS_PORT', 'ECHO_ENV', 'ECHO_CONFIG',
                 'ECHO_DEBUG'):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def client():
    app = create_app(ServerConfig())
    return app.test_client()


@pytest.fixture
def env_client():
    app = create_app(ServerConfig(include_env=True))
    return app.test_client()


@pytest.fixture
def live_server():
    # a real threaded server, so delayed requests run side by side
    app = create_app(ServerConfig(service_port='127.0.0.1:0'))
    server = make_server('127.0.0.1', 0, app, threaded=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f'http://127.0.0.1:{server.server_port}'
    server.shutdown()
    server.server_close()
    thread.join(timeout=5)
