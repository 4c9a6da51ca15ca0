"""
Root logger setup for the List Manager API.

``create_app`` calls ``setup_logging(settings.log_level, settings.log_file)``.
Records go to stderr and, when ``LOG_FILE`` is set, to that file as
well; missing parent directories of the log file are created.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None, force: bool = False) -> None:
    """Configure the root logger once.

    Parameters
    ----------
    level : str
        Level name, case insensitive; unknown names mean ``INFO``.
    logfile : Optional[str]
        Extra file to write records to.
    force : bool
        Replace handlers that are already attached instead of leaving
        an existing configuration alone.
    """
    logger = logging.getLogger()
    if logger.handlers and not force:
        return
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
