# core/models.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Mapping, Optional


class CatalogError(ValueError):
    """A backend row could not be turned into a Track."""


class PlayerStatus(Enum):
    IDLE = auto()
    LOADING = auto()
    PLAYING = auto()
    PAUSED = auto()
    ENDED = auto()


@dataclass(frozen=True)
class Track:
    id: str
    title: str
    artist: str
    media_url: str
    lyrics: Optional[str] = None
    downloadable: bool = False
    category_id: Optional[str] = None

    @staticmethod
    def from_row(row: Mapping[str, Any]) -> "Track":
        # Backend rows call the URL "audio_url"; local exports may use "media_url".
        def opt(k: str):
            v = row.get(k)
            return str(v) if v not in (None, "") else None

        track_id = opt("id")
        title = opt("title")
        url = opt("audio_url") or opt("media_url")
        if not track_id or not title or not url:
            raise CatalogError(f"row is missing id, title or audio_url: {dict(row)!r}")

        return Track(
            id=track_id,
            title=title,
            artist=opt("artist") or "",
            media_url=url,
            lyrics=opt("lyrics"),
            downloadable=bool(row.get("downloadable", False)),
            category_id=opt("category_id"),
        )


@dataclass(frozen=True)
class PlaybackSession:
    current_track: Optional[Track] = None
    is_playing: bool = False
    position_s: float = 0.0
    duration_s: float = 0.0
    progress_percent: float = 0.0
    volume: float = 0.7
    status: PlayerStatus = PlayerStatus.IDLE
