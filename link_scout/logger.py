"""Logging setup for **LinkScout**.

All modules log through children of one project logger::

    from link_scout.logger import get_logger
    log = get_logger("scanner")      # -> "LinkScout.scanner"

Console output goes to *stderr*; *stdout* belongs to the link list the CLI
prints.  A rotating log file can be added with :func:`configure`.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Iterable, Union

LOGGER_NAME: Final[str] = "LinkScout"
DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

#: chatty third-party loggers, kept at WARNING unless we run at DEBUG
NOISY_LOGGERS: Final[tuple[str, ...]] = ("asyncio", "aiohttp.access", "aiohttp.client")

LogLevel = Union[int, str]


def _handlers(log_file: str | Path | None, fmt: str) -> Iterable[logging.Handler]:
    formatter = logging.Formatter(fmt)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    yield console

    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(
            filename=str(log_file),
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        rotating.setFormatter(formatter)
        yield rotating


def configure(
    *,
    level: LogLevel = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """(Re)configure the project logger and return it.

    Parameters
    ----------
    level
        Numeric or textual level, e.g. ``"DEBUG"``.
    log_file
        Optional logfile, rotated at 5 MiB with three backups.
    log_format
        :class:`logging.Formatter` format string.
    replace_handlers
        Drop previously installed handlers first (the CLI reconfigures after
        import-time defaults).
    """
    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(level)
    if replace_handlers:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
    for handler in _handlers(log_file, log_format):
        root.addHandler(handler)
    root.propagate = False

    third_party = logging.DEBUG if root.getEffectiveLevel() <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(third_party)
    return root


def init_logging(
    level: LogLevel = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """What the CLI calls once options are parsed."""
    return configure(level=level, log_file=log_file, log_format=log_format)


def get_logger(suffix: str | None = None) -> logging.Logger:
    return logging.getLogger(f"{LOGGER_NAME}.{suffix}" if suffix else LOGGER_NAME)


# console logging works before the CLI (or a test) reconfigures it
logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "get_logger", "LOGGER_NAME", "DEFAULT_FORMAT"]
