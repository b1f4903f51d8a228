"""
Entry point for running the token pool service.

Allows running the service via:
    python -m token_pool
    token-pool
"""

import sys

import uvicorn
from loguru import logger

from .api import create_app
from .config import Config
from .logging_conf import configure_logging


def main() -> None:
    """
    Main entry point for the token service.

    Configures:
    - Loguru sinks
    - Config validation (exits non-zero on invalid settings)
    - Uvicorn HTTP server on Config.HOST:Config.PORT
    """
    configure_logging()

    try:
        Config.validate()
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(f"Starting token service on {Config.HOST}:{Config.PORT}")
    try:
        uvicorn.run(create_app(), host=Config.HOST, port=Config.PORT, log_config=None)
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
