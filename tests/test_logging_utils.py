from __future__ import annotations

import logging

from shopfront_client.logging_utils import configure_logging


def test_configure_logging_is_idempotent() -> None:
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        configure_logging("DEBUG")
        configure_logging("WARNING")

        added = [h for h in root.handlers if h not in before]
        assert len(added) == 1
        assert root.level == logging.WARNING
    finally:
        root.setLevel(level)
        for handler in root.handlers[:]:
            if handler not in before:
                root.removeHandler(handler)
