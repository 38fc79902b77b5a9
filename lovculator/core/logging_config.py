"""
Logging setup for the API.

``setup_logging`` is called once from ``create_app`` with the values of
``LOG_LEVEL``, ``LOG_FILE`` and ``DATABASE_ECHO``.  Root handlers are only
installed the first time so tests can build the app repeatedly; logger
levels are applied on every call.
"""

import logging
from pathlib import Path
from typing import Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SQL_LOGGER = "sqlalchemy.engine"


def _file_handler(logfile: str) -> logging.Handler:
    path = Path(logfile).expanduser().resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, encoding="utf-8")


def setup_logging(level: str = "INFO", logfile: Optional[str] = None, sql_echo: bool = False) -> None:
    """Configure the root logger and the SQLAlchemy statement logger.

    Parameters
    ----------
    level : str
        Logging level name, case insensitive.  Unknown names fall back
        to ``INFO``.
    logfile : Optional[str]
        Path of a file to also write log records to.  Missing parent
        directories are created.
    sql_echo : bool
        Log every SQL statement at INFO through the root handlers instead
        of SQLAlchemy's own ``echo`` handler.
    """
    # SQL echo is routed through the root handlers
    logging.getLogger(SQL_LOGGER).setLevel(logging.INFO if sql_echo else logging.WARNING)

    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler()]
    if logfile:
        handlers.append(_file_handler(logfile))

    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
