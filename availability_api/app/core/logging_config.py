"""
Logging configuration for the availability service.

``setup_logging`` attaches a console handler (and optionally a file
handler) to the root logger exactly once.  Per-request access lines
come from ``RequestLoggingMiddleware``, so uvicorn's own access logger
is raised to WARNING to avoid logging every request twice.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger for the service.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to INFO.
    logfile : Optional[str]
        Path to a file to also log to.  If omitted, only the console
        handler is installed.
    """
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    root = logging.getLogger()
    if root.handlers:
        # A host process (pytest, uvicorn --log-config) already owns the
        # handlers; only the service loggers' level is ours to set.
        logging.getLogger("availability_api").setLevel(_level(level))
        return

    root.setLevel(_level(level))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if logfile:
        file_handler = logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)
