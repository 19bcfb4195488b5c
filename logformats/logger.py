import logging
import sys


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(log_level: str = "WARNING") -> logging.Logger:
    """Attach a stderr handler to the package logger (once)."""
    logger = logging.getLogger("logformats")
    logger.setLevel(getattr(logging, log_level.upper(), logging.WARNING))
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger
