"""
Logging setup using Loguru.
File sink always, stderr sink on request.
"""

import sys
from pathlib import Path

from loguru import logger

from .config import LoggingConfig, get_data_dir


def get_log_file_path() -> Path:
    """Get the path to the default log file."""
    return get_data_dir() / "musiq.log"


def setup_logging(config: LoggingConfig, verbose: bool = False) -> Path:
    """
    Configure loguru sinks for a CLI run.

    Args:
        config: Logging section of the loaded configuration
        verbose: Force DEBUG output on stderr regardless of config

    Returns:
        Path of the log file in use
    """
    log_file = Path(config.log_file) if config.log_file else get_log_file_path()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Remove default stderr handler
    logger.remove()

    logger.add(
        log_file,
        rotation=config.rotation,
        retention=config.retention,
        level=config.level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}",
        enqueue=False,
    )

    if verbose or config.console_output:
        logger.add(
            sys.stderr,
            level="DEBUG" if verbose else config.level,
            format="<level>{level}</level>: {message}",
        )

    logger.debug(f"Loguru initialized: {log_file} (level={config.level})")
    return log_file
