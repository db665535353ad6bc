"""
Logging setup using Loguru.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import LoggingConfig, get_data_dir

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}"


def get_log_file_path() -> Path:
    """Get the path to the default log file."""
    return get_data_dir() / "musicstream.log"


def setup_loguru(
    log_file: Optional[Path] = None,
    level: str = "INFO",
    max_file_size_mb: int = 10,
    backup_count: int = 5,
    console_output: bool = False,
) -> None:
    """
    Configure loguru with a rotating file sink and an optional stderr sink.

    Args:
        log_file: Path to log file (default: ~/.local/share/musicstream/musicstream.log)
        level: Minimum level (DEBUG, INFO, WARNING, ERROR)
        max_file_size_mb: Size before the file is rotated
        backup_count: Rotated files to keep
        console_output: Also log to stderr
    """
    log_file = log_file or get_log_file_path()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Remove default handler
    logger.remove()

    logger.add(
        log_file,
        rotation=f"{max_file_size_mb} MB",
        retention=backup_count,
        level=level,
        format=LOG_FORMAT,
        enqueue=False,  # Synchronous writes (thread-safe but blocking)
    )

    if console_output:
        logger.add(sys.stderr, level=level, format="{level}: {message}")

    logger.info(f"Loguru initialized: {log_file} (level={level})")


def setup_logging_from_config(config: LoggingConfig) -> None:
    """Apply a LoggingConfig section."""
    setup_loguru(
        log_file=Path(config.log_file).expanduser() if config.log_file else None,
        level=config.level.upper(),
        max_file_size_mb=config.max_file_size_mb,
        backup_count=config.backup_count,
        console_output=config.console_output,
    )
