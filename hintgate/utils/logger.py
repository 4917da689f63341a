import logging
import sys
from hintgate.config import settings

# Provider SDKs log every HTTP call at INFO
NOISY_LOGGERS = ("httpx", "groq", "google.auth")


def setup_logger(name: str, level: str = "INFO") -> logging.Logger:
    """Provides a configured logger instance writing to stdout."""
    logger = logging.getLogger(name)
    log_level = getattr(logging, level.upper(), logging.INFO)

    # Avoid duplicate handlers when the app is rebuilt (tests, reloads)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(handler)
        logger.propagate = False

    logger.setLevel(log_level)
    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(max(log_level, logging.WARNING))

    return logger

logger = setup_logger("hintgate", settings.LOG_LEVEL)
