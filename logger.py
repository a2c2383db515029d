"""Logging configuration for Spendwell.

Logs go to a dated file under the configured log directory and, unless
disabled, to the console.
"""

import logging
from datetime import date
from typing import Optional

from config import Config

_ROOT_LOGGER = "spendwell"


def setup_logging(config: Config, console: bool = True) -> logging.Logger:
    """Set up application logging with file and console handlers.

    Args:
        config: Application configuration containing log settings.
        console: Whether to also log to stderr.

    Returns:
        Configured root application logger.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(config.log_level)

    # Calling twice must not duplicate output
    logger.handlers.clear()

    file_handler = logging.FileHandler(
        config.log_dir / f"spendwell-{date.today().isoformat()}.log"
    )
    file_handler.setLevel(config.log_level)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(config.log_level)
        console_handler.setFormatter(logging.Formatter("%(levelname)s - %(message)s"))
        logger.addHandler(console_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get the application logger, or one of its children.

    Args:
        name: Optional child name, e.g. "services.budgets".

    Returns:
        The spendwell logger, or "spendwell.<name>" when a name is given.
    """
    if name:
        return logging.getLogger(f"{_ROOT_LOGGER}.{name}")
    return logging.getLogger(_ROOT_LOGGER)
