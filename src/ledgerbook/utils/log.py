"""Logging helpers for ledgerbook."""

import logging

import colorlog

BASE_LOGGER = "ledgerbook"


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ledgerbook namespace with colorized output.

    The stream handler lives on the ``ledgerbook`` base logger, so it is
    installed once no matter how many modules ask for a logger.
    """
    base = logging.getLogger(BASE_LOGGER)
    if not base.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            colorlog.ColoredFormatter(
                "%(log_color)s%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
                log_colors={
                    "DEBUG": "cyan",
                    "INFO": "green",
                    "WARNING": "yellow",
                    "ERROR": "red",
                    "CRITICAL": "bold_red",
                },
            )
        )
        base.addHandler(handler)
        base.setLevel(logging.WARNING)
    if name == BASE_LOGGER or name.startswith(BASE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{BASE_LOGGER}.{name}")


def set_level(level: str | int) -> None:
    """Set the level of the ledgerbook base logger."""
    if isinstance(level, str):
        level = level.upper()
    get_logger(BASE_LOGGER).setLevel(level)
