import logging
import os
from datetime import datetime

LOGGER_NAME = "SLOTMACRO"
LOG_DIR = "logs"

# Default settings
ENABLE_FILE_LOGGING = False  # Log to file
ENABLE_CONSOLE_LOGGING = True  # Log to console (for developers)
DEBUG_MODE = True  # Show detailed logs


def configure_logging(debug_mode: bool = None,
                      enable_file_logging: bool = None,
                      enable_console_logging: bool = None,
                      log_dir: str = None):
    """Apply logging settings from the recorder config and rebuild handlers"""
    global ENABLE_FILE_LOGGING, ENABLE_CONSOLE_LOGGING, DEBUG_MODE, LOG_DIR
    if debug_mode is not None:
        DEBUG_MODE = debug_mode
    if enable_file_logging is not None:
        ENABLE_FILE_LOGGING = enable_file_logging
    if enable_console_logging is not None:
        ENABLE_CONSOLE_LOGGING = enable_console_logging
    if log_dir:
        LOG_DIR = log_dir
    return setup_logger()


def setup_logger(name=LOGGER_NAME):
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    # Clear existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-7s | %(message)s"
    )

    # File handler - only when ENABLE_FILE_LOGGING = True
    if ENABLE_FILE_LOGGING:
        os.makedirs(LOG_DIR, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = os.path.join(LOG_DIR, f"slotmacro_{timestamp}.log")

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    # Console handler - only when ENABLE_CONSOLE_LOGGING = True
    if ENABLE_CONSOLE_LOGGING:
        ch = logging.StreamHandler()
        ch.setLevel(logging.INFO)
        ch.setFormatter(formatter)
        logger.addHandler(ch)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger


def log(message: str, level: int = logging.INFO):
    """Convenience function for quick logging - respects DEBUG_MODE"""
    if not DEBUG_MODE:
        return  # Skip logging in production mode

    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        logger = setup_logger()
    logger.log(level, message)
