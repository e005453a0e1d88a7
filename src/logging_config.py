"""Loguru sink configuration for the watcher process."""

import sys

from loguru import logger

DEV_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)


def setup_logging(environment: str = "development", log_level: str = "INFO") -> None:
    """Replace loguru's default sink based on environment.

    Production writes one JSON object per line so the log stream can be shipped
    as-is; development keeps the colored human format.
    """
    logger.remove()

    if environment == "production":
        logger.add(sys.stdout, level=log_level, serialize=True)
    else:
        logger.add(sys.stderr, level=log_level, format=DEV_FORMAT)
