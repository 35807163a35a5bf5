# core/config.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv
from PySide6.QtCore import QStandardPaths

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppConfig:
    app_data_dir: str
    catalog_path: str
    download_dir: str
    default_volume: float = 0.7
    compact_breakpoint: int = 768


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using %s", name, raw, default)
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using %s", name, raw, default)
        return default


def get_app_data_dir() -> str:
    base = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.AppDataLocation)
    os.makedirs(base, exist_ok=True)
    return base


def load_config(app_data_dir: str | None = None) -> AppConfig:
    """Read settings from the environment (and a .env file, if any)."""
    load_dotenv()

    app_data_dir = app_data_dir or get_app_data_dir()

    catalog_path = os.getenv("MEZMUR_CATALOG", "").strip() or os.path.join(app_data_dir, "mezmurs.json")
    download_dir = (
        os.getenv("MEZMUR_DOWNLOAD_DIR", "").strip()
        or QStandardPaths.writableLocation(QStandardPaths.StandardLocation.MusicLocation)
        or app_data_dir
    )

    volume = _env_float("MEZMUR_DEFAULT_VOLUME", 0.7)
    volume = max(0.0, min(1.0, volume))

    return AppConfig(
        app_data_dir=app_data_dir,
        catalog_path=catalog_path,
        download_dir=download_dir,
        default_volume=volume,
        compact_breakpoint=_env_int("MEZMUR_COMPACT_BREAKPOINT", 768),
    )
