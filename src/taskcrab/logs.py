import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union

DEFAULT_LOG_DIR = Path.home() / ".local" / "share" / "taskcrab" / "logs"

def _env_level() -> int:
    env_level = os.getenv('TASKCRAB_LOG_LEVEL', '').upper()
    if os.getenv('TASKCRAB_DEBUG', '').lower() in ('1', 'true', 'yes'):
        return logging.DEBUG
    if env_level:
        return getattr(logging, env_level, logging.WARNING)
    return logging.WARNING

def setup_logging(level: Optional[int] = None, log_dir: Union[Path, str, None] = None):
    """Set up logging configuration for the taskcrab package.

    Level and log directory come from the arguments when given, otherwise from
    TASKCRAB_DEBUG / TASKCRAB_LOG_LEVEL / TASKCRAB_LOG_DIR. Console output
    defaults to WARNING so regular use stays quiet.
    """
    if level is None:
        level = _env_level()
    is_debug = level <= logging.DEBUG

    if log_dir is None:
        log_dir = os.getenv('TASKCRAB_LOG_DIR') or DEFAULT_LOG_DIR
    log_dir = Path(log_dir).expanduser()

    log_format = '[%(asctime)s] %(levelname)-8s [%(name)s:%(funcName)s:%(lineno)d] %(message)s'
    date_format = '%Y-%m-%d %H:%M:%S'

    detailed_formatter = logging.Formatter(log_format, date_format)
    console_formatter = logging.Formatter(
        '%(levelname)-8s [%(name)s] %(message)s' if is_debug
        else '%(levelname)s: %(message)s'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(console_formatter)
    console_handler.setLevel(level)

    logger = logging.getLogger('taskcrab')
    logger.setLevel(logging.DEBUG)  # Logger accepts all, handlers filter
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.addHandler(console_handler)

    # File logging is optional
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / "taskcrab.log", encoding='utf-8')
    except OSError as e:
        logger.debug(f"File logging disabled, cannot use {log_dir}: {e}")
    else:
        file_handler.setFormatter(detailed_formatter)
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger

# Initialize logging when package is imported
setup_logging()

def get_logger(name: str = None):
    """Get a logger instance for a specific module."""
    if name:
        return logging.getLogger(f'taskcrab.{name}')
    return logging.getLogger('taskcrab')
