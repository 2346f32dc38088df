# === FILE: site_mirror/logger.py ===
"""Site‑wide logging configuration for the **SiteMirror** project.

Highlights
----------
* Unified console format for every module.
* Single, importable instance :data:`logger` – simply::

      from site_mirror.logger import logger
      logger.info("Mirroring started")
* A per-run log file made of delimited, timestamped blocks::

      =====log start=====
      datetime: 2024-05-01 12:00:00
      url: https://example.com/index.html
      take time: 0.12s
      =====log end=====

  The file is truncated when the run starts, see :func:`attach_run_log`.
* Re‑configurable at runtime via :func:`configure`.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Final, Optional, Union

# --------------------------------------------------------------------------- #
# Constants & basic types                                                     #
# --------------------------------------------------------------------------- #

_DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_LOGGER_NAME: Final[str] = "SiteMirror"
_BLOCK_START: Final[str] = "=====log start====="
_BLOCK_END: Final[str] = "=====log end====="

_LevelT = Union[int, str]


class BlockFormatter(logging.Formatter):
    """Render a record as a self-contained block for the run log."""

    def __init__(self) -> None:
        super().__init__(datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        body = record.getMessage()
        if record.exc_info:
            body = f"{body}\n{self.formatException(record.exc_info)}"
        return (
            f"{_BLOCK_START}\n"
            f"datetime: {self.formatTime(record, self.datefmt)}\n"
            f"{body}\n"
            f"{_BLOCK_END}\n"
        )


# --------------------------------------------------------------------------- #
# Helper builders                                                             #
# --------------------------------------------------------------------------- #


def _stdout_handler(fmt: str) -> logging.StreamHandler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _run_log_handler(file: Path | str) -> logging.FileHandler:
    path = Path(file)
    path.parent.mkdir(parents=True, exist_ok=True)
    # mode="w": the run log only ever describes the current run
    handler = logging.FileHandler(filename=str(path), mode="w", encoding="utf-8")
    handler.setFormatter(BlockFormatter())
    return handler


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = _DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """(Re)configure the global project logger.

    Parameters
    ----------
    level
        Numeric or textual logging level (e.g. ``"DEBUG"``).
    log_file
        Path to a run log. *None* → console‑only output.
    log_format
        Format string for the console :class:`logging.Formatter`.
    replace_handlers
        *True* – remove existing handlers; *False* – just append new one(s).
    """
    lg = logging.getLogger(_LOGGER_NAME)
    lg.setLevel(level)

    if replace_handlers:
        for handler in list(lg.handlers):
            lg.removeHandler(handler)
            handler.close()

    lg.addHandler(_stdout_handler(log_format))

    if log_file is not None:
        lg.addHandler(_run_log_handler(log_file))

    lg.propagate = False
    return lg


def init_logging(
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = _DEFAULT_FORMAT,
) -> logging.Logger:
    """Backward‑compatible alias used by the CLI."""
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


def attach_run_log(log_file: str | Path) -> logging.FileHandler:
    """Truncate *log_file* and start appending run blocks to it."""
    handler = _run_log_handler(log_file)
    logging.getLogger(_LOGGER_NAME).addHandler(handler)
    return handler


def detach_run_log(handler: Optional[logging.Handler]) -> None:
    """Stop writing to a handler returned by :func:`attach_run_log`."""
    if handler is None:
        return
    logging.getLogger(_LOGGER_NAME).removeHandler(handler)
    handler.close()


# --------------------------------------------------------------------------- #
# Ready‑to‑use instance                                                       #
# --------------------------------------------------------------------------- #

logger: logging.Logger = init_logging()

__all__ = [
    "BlockFormatter",
    "attach_run_log",
    "configure",
    "detach_run_log",
    "init_logging",
    "logger",
]
