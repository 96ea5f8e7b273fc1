"""Setup and configuration for grid system logging."""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Dict, Any


def setup_logging(config,
                  log_file: Optional[str] = None,
                  console: bool = True,
                  log_level: Optional[str] = None):
    """Configure the root logger from the logging section of the configuration.

    Args:
        config: Config instance
        log_file: Optional log file path (uses config default if not provided, disabled if empty)
        console: Whether to enable console logging
        log_level: Minimum log level (uses config default if not provided)
    """
    root_logger = logging.getLogger()

    log_level = log_level or config.get('logging.level', 'INFO')
    level = getattr(logging, str(log_level).upper(), logging.INFO)
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(config.get('logging.format', '%(levelname)s - %(message)s'))

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file is None:
        log_file = config.get('logging.file')

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=str(log_path),
            maxBytes=config.get('logging.max_file_size', 10 * 1024 * 1024),
            backupCount=config.get('logging.backup_count', 3)
        )
        file_handler.setLevel(logging.DEBUG)  # Capture everything in files
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logging.getLogger(__name__).debug(f"Logging initialized at level {logging.getLevelName(level)}")


def setup_simple_logging(log_level: str = 'INFO'):
    """Setup console-only logging for testing/debugging.

    Args:
        log_level: Minimum log level
    """
    root_logger = logging.getLogger()

    level = getattr(logging, log_level.upper(), logging.INFO)
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)


def get_log_stats() -> Dict[str, Any]:
    """Get statistics from the file log handlers.

    Returns:
        Dict with handler statistics
    """
    stats = {}

    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if isinstance(handler, logging.handlers.RotatingFileHandler):
            stats['file'] = {
                'filename': handler.baseFilename,
                'max_bytes': handler.maxBytes,
                'backup_count': handler.backupCount
            }

    return stats
