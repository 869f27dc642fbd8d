"""Logging setup for the command line entry point."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "WARNING") -> None:
    """Configure root logging once for the process.

    Args:
        level: Level name such as "INFO" or "DEBUG"

    Raises:
        ValueError: If the level name is unknown
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level '{level}'")
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
    logging.getLogger("budgetbook").setLevel(numeric_level)
