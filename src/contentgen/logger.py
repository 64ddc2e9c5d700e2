import logging

from contentgen import config

default_level = config.LOGGING_LEVEL

logging.basicConfig(
    level=getattr(logging, default_level, logging.INFO),
    format="%(asctime)s [%(levelname)s] [%(name)s.%(funcName)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger("contentgen")

# httpx logs full request URLs at INFO; the Gemini URL carries the API key.
logging.getLogger("httpx").setLevel(logging.WARNING)

# Shortcut aliases
debug = logger.debug
info = logger.info
warning = logger.warning
error = logger.error
exception = logger.exception


def get_logger():
    return logger


def set_logging_level(level: str):
    normalized_level = level.upper()
    valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if normalized_level not in valid_levels:
        logger.warning(f"Invalid logging level: {level}. Level not changed.")
        return
    logger.setLevel(getattr(logging, normalized_level))
    logger.info(f"Logging level changed to: {normalized_level}")
