"""Logging setup shared by scripts built on the optimizer."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union


LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'


def setup_logger(
    script_name: str = "mean_variance",
    log_dir: Optional[Union[str, Path]] = None,
    level: int = logging.INFO
) -> logging.Logger:
    """
    Sets up a logger that writes to the console and, optionally, a file.

    Args:
        script_name: Logger name (also used in the log filename)
        log_dir: Directory for a timestamped log file; console only if None
        level: Logging level for the logger and its handlers

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(script_name)
    logger.setLevel(level)
    logger.propagate = False

    # Clear existing handlers (prevent duplicates)
    if logger.hasHandlers():
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y_%m_%d_%H%M")
        log_filename = log_dir / f"log_{script_name}_{timestamp}.txt"

        file_handler = logging.FileHandler(log_filename, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger
