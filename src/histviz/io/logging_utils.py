"""
logging_utils.py
================

Central logging utilities.

Responsibilities
----------------
• Configure the "histviz" logger once
• Log to:
    - console (stderr)
    - file (optional)
• Avoid duplicate handlers

Library modules only call logging.getLogger(__name__); handlers are set up
here, by scripts.
"""

import logging
from pathlib import Path
from typing import Optional


LOGGER_NAME = "histviz"


def setup_logger(log_path: Optional[Path] = None, level: str = "INFO") -> logging.Logger:
    """
    Create and configure the histviz logger.

    Parameters
    ----------
    log_path : Path or None
        Optional log file (e.g. out_dir/showcase.log)
    level : str
        "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"

    Returns
    -------
    logger : logging.Logger
    """
    logger = logging.getLogger(LOGGER_NAME)

    # Prevent duplicate handlers if setup_logger is called multiple times
    if logger.handlers:
        return logger

    level = level.upper()
    logger.setLevel(getattr(logging, level, logging.INFO))

    fmt = (
        "%(asctime)s | "
        "%(levelname)-8s | "
        "%(name)s | "
        "%(message)s"
    )
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(fmt, datefmt=datefmt)

    # --------------------------------------------------------
    # Console handler
    # --------------------------------------------------------
    ch = logging.StreamHandler()
    ch.setLevel(logger.level)
    ch.setFormatter(formatter)
    logger.addHandler(ch)

    # --------------------------------------------------------
    # File handler
    # --------------------------------------------------------
    if log_path is not None:
        log_path = Path(log_path).expanduser().resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_path, mode="w")
        fh.setLevel(logger.level)
        fh.setFormatter(formatter)
        logger.addHandler(fh)
        logger.info(f"Logging to file: {log_path}")

    logger.debug("Logger initialized")
    return logger
