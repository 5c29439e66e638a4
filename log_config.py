"""
log_config.py
Console logging setup (level from LOG_LEVEL, default INFO).
"""

from __future__ import annotations

import logging
import os

FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
HANDLER_NAME = "academy-console"


def configure_logging(level: str | None = None) -> None:
    root = logging.getLogger()
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    # Streamlit re-runs the script on every interaction; only install the handler once
    if any(h.get_name() == HANDLER_NAME for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(FORMAT))
    handler.set_name(HANDLER_NAME)
    root.addHandler(handler)
