"""Logging setup for the Spot host.

Every module logs through a child of the "spothost" logger
(spothost.service, spothost.join_code, ...). Records are written as:

    2026-01-27 10:30:45 [INFO] spothost.join_code: Join code refreshed

The package level comes from log_level (or the CLI's --verbose), and
log_levels can raise or lower individual modules, e.g. to trace routing
without debug noise from rotation:

    log_level: INFO
    log_levels:
      spothost.router: DEBUG
"""

import logging
from pathlib import Path
from typing import Optional

from spothost.config import Config
from spothost.errors import ConfigError

PACKAGE_LOGGER = "spothost"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marks handlers installed here so setup is idempotent and reversible
_HANDLER_MARK = "_spothost_handler"

# Module loggers whose level was set from log_levels
_module_levels: set[str] = set()


def parse_level(name: str) -> int:
    """Convert a level name such as "debug" to its logging constant.

    Raises:
        ConfigError: If the name is not a logging level.
    """
    level = logging.getLevelName(str(name).upper())
    if not isinstance(level, int):
        raise ConfigError(f"Unknown log level: {name!r}")
    return level


def _installed_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, _HANDLER_MARK, False)]


def _build_handlers(log_file: Optional[str]) -> list[logging.Handler]:
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_MARK, True)
    return handlers


def setup_logging(config: Config, level: Optional[str] = None) -> logging.Logger:
    """Configure the package logger from config.

    Calling again after a successful setup returns the configured logger
    unchanged.

    Args:
        config: Configuration with log_level, log_file and log_levels.
        level: Overrides config.log_level when set.

    Returns:
        The "spothost" logger.

    Raises:
        ConfigError: If a configured level name is invalid.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    if _installed_handlers(logger):
        return logger

    package_level = parse_level(level or config.log_level)
    module_levels = {
        name: parse_level(value) for name, value in config.log_levels.items()
    }

    logger.setLevel(package_level)
    for handler in _build_handlers(config.log_file):
        logger.addHandler(handler)
    logger.propagate = False

    for name, module_level in module_levels.items():
        logging.getLogger(name).setLevel(module_level)
        _module_levels.add(name)

    return logger


def reset_logging() -> None:
    """Undo setup_logging. Used for testing."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in _installed_handlers(logger):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True

    for name in _module_levels:
        logging.getLogger(name).setLevel(logging.NOTSET)
    _module_levels.clear()
