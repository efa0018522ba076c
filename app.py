import logging

from http_echo.config import load_config
from http_echo.server import create_app

logging.basicConfig(level=logging.INFO)

# settings come from SERVICE_PORT, METRICS_PORT, ECHO_ENV and $ECHO_CONFIG
CONFIG = load_config()
app = create_app(CONFIG)
logger = app.logger
logger.info(f'echo app ready [include_env={CONFIG.include_env}]')

# for local debug
# if __name__ == "__main__":
#     app.run(host="0.0.0.0", port=8080, debug=True, threaded=True)
