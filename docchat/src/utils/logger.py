"""
DocChat - Logging
==================
Provides a pre-configured logger factory for consistent, readable
log output across all DocChat modules.

Logging verbosity follows the ``ENV`` setting, read the same way as
``Settings.ENV`` (process environment first, then the project ``.env``):
  • ``"dev"``  → DEBUG level  (maximum detail)
  • ``"prod"`` → WARNING level (errors & warnings only)
  • anything else → INFO

Entry points call ``configure_logging(settings.ENV)`` once the full
settings are loaded, which re-levels every logger handed out so far.

Usage:
    from docchat.src.utils.logger import get_logger
    logger = get_logger(__name__)
    logger.info("Something happened")
"""

import logging
import sys

from pydantic_settings import BaseSettings, SettingsConfigDict

from docchat.config.settings import ENV_FILE

_ENV_LEVEL_MAP = {
    "dev": logging.DEBUG,
    "prod": logging.WARNING,
}

# Loggers created here with an ENV-derived level, re-levelled by configure_logging()
_MANAGED_LOGGERS: dict[str, logging.Logger] = {}
_active_level: int | None = None


class LoggingSettings(BaseSettings):
    """Just the ``ENV`` field, so importing a module never requires the full settings."""

    ENV: str = "dev"

    model_config = SettingsConfigDict(env_file=ENV_FILE, env_file_encoding="utf-8", extra="ignore")


def level_for_env(env: str) -> int:
    """Map an environment mode to a logging level."""
    return _ENV_LEVEL_MAP.get(env, logging.INFO)


def _default_level() -> int:
    global _active_level
    if _active_level is None:
        _active_level = level_for_env(LoggingSettings().ENV)
    return _active_level


def configure_logging(env: str) -> int:
    """
    Apply the level for ``env`` to every managed DocChat logger.

    Loggers created later with ``get_logger(name)`` pick up the same level.

    Returns:
        The level that was applied.
    """
    global _active_level
    _active_level = level_for_env(env)

    for logger in _MANAGED_LOGGERS.values():
        logger.setLevel(_active_level)
        for handler in logger.handlers:
            handler.setLevel(_active_level)

    return _active_level


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """
    Create and return a named logger with a standardised formatter.

    Args:
        name:  Typically ``__name__`` of the calling module.
        level: Explicit logging level override.
               If *None*, the level is derived from ``ENV`` and follows
               later ``configure_logging()`` calls.

    Returns:
        A configured ``logging.Logger`` instance.
    """
    resolved_level = level if level is not None else _default_level()
    logger = logging.getLogger(name)

    # Avoid adding duplicate handlers if the logger already exists
    if not logger.handlers:
        logger.setLevel(resolved_level)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(resolved_level)

        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        logger.propagate = False

        if level is None:
            _MANAGED_LOGGERS[name] = logger

    return logger
