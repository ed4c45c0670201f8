import logging
import os
import sys
from logging import Handler
from typing import Optional

from tqdm import tqdm

PACKAGE_LOGGER_NAME = "langfile_translator"


class TqdmLoggingHandler(Handler):
    """
    Stream handler for the ``langfile_translator`` logger.

    The CLI draws a chunk progress bar while a file is translated; records are
    printed above that bar with ``tqdm.write`` instead of being written into it.
    """
    def __init__(self, level=logging.NOTSET):
        super().__init__(level)

    def emit(self, record):
        try:
            tqdm.write(self.format(record), file=sys.stderr)
            self.flush()
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception:
            self.handleError(record)


def setup_logger(log_level_str: str, log_file_path: Optional[str], log_to_console: bool) -> logging.Logger:
    """
    Set up the package logger.

    Every module logs through ``logging.getLogger(__name__)``, so configuring
    the package logger configures them all.

    Args:
        log_level_str: The logging level as a string (e.g., 'INFO', 'DEBUG').
        log_file_path: The path to the log file, or None/empty for no file.
        log_to_console: Whether to also log to stderr.

    Returns:
        The configured logger instance.
    """
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)

    log_level = getattr(logging, log_level_str.upper(), logging.INFO)
    logger.setLevel(log_level)

    # Reconfiguring (a second load_app_config, a test) replaces the handlers.
    logger.handlers.clear()
    logger.propagate = False

    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')

    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file_path, encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if log_to_console:
        tqdm_handler = TqdmLoggingHandler()
        tqdm_handler.setFormatter(formatter)
        logger.addHandler(tqdm_handler)

    return logger
