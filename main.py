import logging
import sys

from sentry_proxy.config import load_config
from sentry_proxy.controller import create_app
from sentry_proxy.errors import ConfigError
from sentry_proxy.logs import setup_logging

logger = logging.getLogger(__name__)

try:
    config = load_config()
except ConfigError as exc:
    setup_logging()
    logger.critical(f"Configuração inválida, abortando: {exc}")
    sys.exit(1)

setup_logging(config.log_level)
app = create_app(config)

if __name__ == '__main__':
    app.run(host='0.0.0.0', port=config.app_port, debug=config.debug_mode, use_reloader=False)
