"""
Logging setup for the API process.

``setup_logging`` attaches a console handler to the root logger the first
time it is called; later calls are no-ops so tests and reloads do not stack
handlers.
"""

import logging
from typing import Optional

from wellness.core.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    root = logging.getLogger()
    if root.handlers:
        return

    numeric_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)
    root.setLevel(numeric_level)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)
