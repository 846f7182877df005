import logging
import sys
from typing import Optional
from clinic_client.config import get_settings

logger = logging.getLogger("clinic_client")
# Silent until the host application asks for output
logger.addHandler(logging.NullHandler())

_console_handler: Optional[logging.Handler] = None


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Send the package's log records to stdout.

    Safe to call more than once: the console handler is attached a single time
    and later calls only change the level. Defaults to LOG_LEVEL from settings.
    """
    global _console_handler
    level = level or get_settings().log_level
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stdout)
        _console_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(_console_handler)
    return logger


def get_logger(name: str = None) -> logging.Logger:
    """Get a logger instance. If name is provided, returns a child logger."""
    if name:
        return logger.getChild(name)
    return logger
