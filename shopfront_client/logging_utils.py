from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Idempotent: the UI may call this again after a configuration error.
    for handler in root.handlers:
        if getattr(handler, "_shopfront_handler", False):
            return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._shopfront_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)

    # urllib3 logs full URLs at DEBUG; keep it quiet unless asked for.
    logging.getLogger("urllib3").setLevel(max(root.level, logging.WARNING))
