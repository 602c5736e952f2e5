"""Process entry point: ``python -m feed_scraper``."""

import os

import uvicorn

from .app import create_app
from .config import Config, load_env_file
from .logging_config import create_execution_logger, setup_structured_logging


def main() -> None:
    """Load configuration and serve the API until interrupted."""
    setup_structured_logging(os.getenv("LOG_LEVEL", "INFO"))
    load_env_file()

    config = Config()
    setup_structured_logging(config.log_level)
    logger = create_execution_logger("main")
    logger.info("This is My News Aggregator Web Scraper Project!!")

    server_config = config.get_server_config()
    app = create_app(config)
    logger.info(
        f"Listening on {server_config.host}:{server_config.port}",
        host=server_config.host,
        port=server_config.port,
    )
    uvicorn.run(
        app, host=server_config.host, port=server_config.port, log_config=None
    )


if __name__ == "__main__":
    main()
