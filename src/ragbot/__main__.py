import structlog
import uvicorn

from ragbot.api import create_app
from ragbot.components import build_components
from ragbot.config import load_config, load_logging_settings
from ragbot.errors import ConfigError
from ragbot.util.logging import configure_logging

_logger = structlog.get_logger()


def _init_logging() -> None:
    try:
        json_output, log_level = load_logging_settings()
    except ConfigError:
        configure_logging()
        _logger.warning("observability_config_invalid", exc_info=True)
        return
    configure_logging(json_output=json_output, log_level=log_level)


def main() -> None:
    _init_logging()

    config = load_config()
    components = build_components(config)
    app = create_app(components)

    _logger.info("server_listening", host=config.server.host, port=config.server.port)
    # log_config=None keeps uvicorn on the structlog handler installed above
    uvicorn.run(app, host=config.server.host, port=config.server.port, log_config=None)


if __name__ == "__main__":
    main()
