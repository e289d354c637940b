"""
Main Entry Module

This module serves as the process entry point, configuring logging and
running the server.

Dependencies:
- uvicorn for server
- Logging

Author: Logdrop Development Team
"""

import logging

import uvicorn

from logdrop.shared import config


def configure_logging(level: str = config.LOG_LEVEL):
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def main():
    configure_logging()
    logging.getLogger(__name__).info(f"Server running on {config.HOST}:{config.PORT}")
    uvicorn.run(
        "logdrop.app:app",
        host=config.HOST,
        port=config.PORT,
        log_level=config.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    main()
