"""
Logging configuration for the registration server.

Call setup_logging() once at application startup, then use
logging.getLogger(__name__) in every module.
"""
import logging
import sys
from typing import Optional

CONSOLE_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def setup_logging(level: str = "INFO", stream: Optional[object] = None) -> logging.Logger:
    """
    Configure the root logger with a single console handler.

    Repeated calls only update the level, so reloading the app under
    uvicorn --reload does not stack handlers.
    """
    global _configured

    root = logging.getLogger()
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)
    root.setLevel(numeric_level)

    if not _configured:
        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)
        _configured = True

    # motor/pymongo are chatty at DEBUG
    logging.getLogger("pymongo").setLevel(max(numeric_level, logging.WARNING))
    return root
