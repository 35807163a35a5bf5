from __future__ import annotations

import logging
import os


def configure_logging() -> None:
    """
    Configure console logging, plus a log file when LOG_FILE is set.
    """
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    log_file = os.getenv("LOG_FILE", "").strip()

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
        except OSError:
            print(f"Warning: unable to open log file '{log_file}', using console logging only.")

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(filename)s:%(lineno)d | %(message)s",
        handlers=handlers,
        force=True,
    )
