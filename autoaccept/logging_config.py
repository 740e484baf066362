"""
Lolytics Auto Accept - Logging Configuration
Developer diagnostic channel, separate from the user-visible ActivityLog:
- Rotating file log (5MB x 3)
- Warnings and above mirrored to stderr
- Suppressed noisy libraries
"""
import os
import sys
import logging
import logging.handlers
from typing import Optional


# ==================== CONSTANTS ====================
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
LOG_FILE = os.path.join(BASE_DIR, "autoaccept.log")

MAX_BYTES = 5 * 1024 * 1024  # 5 MB
BACKUP_COUNT = 3

LOG_FORMAT = '%(asctime)s | %(levelname)s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

NOISY_LIBS = [
    "urllib3",
    "requests",
    "asyncio",
    "charset_normalizer",
]


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """
    Setup root logging.

    Args:
        log_level: Log level string
        log_file: Path of the rotating log file (default: autoaccept.log)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, str(log_level).upper(), logging.INFO))

    # Clear existing handlers
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    file_handler = logging.handlers.RotatingFileHandler(
        log_file or LOG_FILE,
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding='utf-8'
    )
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.WARNING)
    root_logger.addHandler(console_handler)

    for lib in NOISY_LIBS:
        logging.getLogger(lib).setLevel(logging.CRITICAL)

    logging.info("Logging initialized")
    return root_logger
