# logging_config.py
# One place to configure logging for the launcher and every lab window.

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE_NAME = "CobberBackprop.log"

# Chatty at DEBUG (font cache, backend selection); not useful to students.
NOISY_LOGGERS = ("matplotlib", "PIL")


def default_log_file() -> Optional[str]:
    """
    A frozen build has no console, so its log goes next to the executable.
    Running from source logs to the console only.
    """
    if getattr(sys, 'frozen', False):
        return os.path.join(os.path.dirname(sys.executable), LOG_FILE_NAME)
    return None


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the 'labs' logger namespace and returns it.

    Args:
        level: Logging level (e.g. logging.DEBUG to trace every training step)
        log_file: Path for a log file. Defaults to default_log_file().
    """
    logger = logging.getLogger("labs")
    logger.setLevel(level)

    # Relaunching from the navigator calls this again
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S')

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    log_file = log_file or default_log_file()
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logger.info("Logging initialized%s.", f" (writing {log_file})" if log_file else "")
    return logger
