"""Root logger setup for the template ingestion service.

Log records go to three handlers:

- ``info.log`` in ``settings.log_dir``: INFO and above
- ``error.log`` in ``settings.log_dir``: ERROR and above
- stdout: the configured level, in a shorter format
"""

import logging
import sys
from pathlib import Path

from template_ingest.core.config import Settings, get_settings

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"


def _file_handler(path: Path, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(settings: Settings | None = None) -> logging.Logger:
    """Install the file and console handlers on the root logger.

    Handlers from an earlier call are closed first, so calling this again
    (one app per test, say) does not duplicate output.

    Args:
        settings: Optional settings. If None, uses global settings.

    Returns:
        The configured root logger.
    """
    settings = settings or get_settings()
    settings.log_dir.mkdir(parents=True, exist_ok=True)

    level = logging.DEBUG if settings.log_level == "DEBUG" else logging.INFO
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.addHandler(_file_handler(settings.log_dir / "info.log", logging.INFO))
    root_logger.addHandler(_file_handler(settings.log_dir / "error.log", logging.ERROR))

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(console_handler)

    return root_logger
