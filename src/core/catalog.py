# core/catalog.py
from __future__ import annotations

import json
import logging
from typing import Iterable

from core.models import CatalogError, Track

logger = logging.getLogger(__name__)


def parse_catalog(data) -> list[Track]:
    """
    Build tracks from an export of the `mezmurs` table.
    Accepts a bare list of rows or {"mezmurs": [...]}; bad rows are skipped.
    """
    if isinstance(data, dict):
        data = data.get("mezmurs", [])
    if not isinstance(data, list):
        raise CatalogError("catalog must be a list of mezmur rows")

    tracks: list[Track] = []
    seen: set[str] = set()
    for row in data:
        if not isinstance(row, dict):
            logger.warning("Skipping non-object catalog row: %r", row)
            continue
        try:
            track = Track.from_row(row)
        except CatalogError as e:
            logger.warning("Skipping catalog row: %s", e)
            continue
        if track.id in seen:
            logger.warning("Skipping duplicate track id %s", track.id)
            continue
        seen.add(track.id)
        tracks.append(track)

    return tracks


def load_catalog(path: str) -> list[Track]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise CatalogError(f"{path} is not valid JSON: {e}") from e

    tracks = parse_catalog(data)
    logger.info("Loaded %d tracks from %s", len(tracks), path)
    return tracks


def filter_tracks(tracks: Iterable[Track], query: str) -> list[Track]:
    q = (query or "").strip().lower()
    if not q:
        return list(tracks)
    return [t for t in tracks if q in t.title.lower() or q in (t.artist or "").lower()]
