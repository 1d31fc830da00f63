# fantasy_sdk/core/logging.py
from __future__ import annotations

import logging
from typing import Optional

from fantasy_sdk.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Install one stream handler on the package logger. Safe to call twice."""
    root = logging.getLogger("fantasy_sdk")
    root.setLevel((level or settings.LOG_LEVEL or "INFO").upper())
    if not any(getattr(h, "_fantasy_sdk", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._fantasy_sdk = True
        root.addHandler(handler)
