"""
Logging configuration for the command-line tool.
"""
from __future__ import annotations

import logging
from pathlib import Path

import colorlog

log = logging.getLogger("wikipath")

LOG_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

_FILE_LOG_FMT = "%(asctime)s [%(levelname)s] %(message)s"
_FILE_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def parse_level(name: str) -> int:
    """Map a level name such as ``"info"`` to its ``logging`` constant."""
    try:
        return LOG_LEVELS[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown log level: {name!r}") from None


def setup_logging(level: str = "info", log_file: str | None = None) -> None:
    """Configure the package logger with coloured console output
    and, optionally, a file receiving full DEBUG detail.

    Parameters
    ----------
    level : str
        Console level name (``debug``, ``info``, ``warning``, ``error``, ``critical``).
    log_file : str | None
        If given, also write log messages to this file path.
    """
    console_level = parse_level(level)
    log.setLevel(logging.DEBUG if log_file else console_level)
    log.handlers.clear()
    log.propagate = False

    handler = colorlog.StreamHandler()
    handler.setLevel(console_level)
    handler.setFormatter(colorlog.ColoredFormatter(
        "%(log_color)s%(asctime)s [%(levelname)s]%(reset)s %(message)s",
        datefmt="%H:%M:%S",
        log_colors={
            "DEBUG":    "cyan",
            "INFO":     "green",
            "WARNING":  "yellow",
            "ERROR":    "red",
            "CRITICAL": "bold_red",
        },
    ))
    log.addHandler(handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FILE_LOG_FMT, datefmt=_FILE_LOG_DATEFMT))
        log.addHandler(fh)
        log.info("Logging to file: %s", log_path.resolve())
