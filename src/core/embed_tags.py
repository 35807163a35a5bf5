# core/embed_tags.py
from __future__ import annotations

import logging
import os
from typing import Optional

from mutagen import File as MutagenFile
from mutagen.flac import FLAC
from mutagen.id3 import ID3, ID3NoHeaderError, TIT2, TPE1, USLT
from mutagen.mp4 import MP4
from mutagen.oggopus import OggOpus
from mutagen.oggvorbis import OggVorbis

logger = logging.getLogger(__name__)

MP4_TITLE_KEY = "\xa9nam"
MP4_ARTIST_KEY = "\xa9ART"
MP4_LYRICS_KEY = "\xa9lyr"


def _norm(s: Optional[str]) -> Optional[str]:
    if not s:
        return None
    s = s.strip()
    return s or None


def embed_track_tags(path: str, track) -> None:
    """
    Write title, artist and lyrics of a Track into a downloaded file:
      - .mp3            -> ID3 TIT2 / TPE1 / USLT
      - .flac           -> Vorbis comments TITLE / ARTIST / LYRICS
      - .ogg/.oga/.opus -> Vorbis comments TITLE / ARTIST / LYRICS
      - .m4a/.mp4       -> MP4 ©nam / ©ART / ©lyr
    Anything else goes through mutagen's easy interface, if it knows the format.
    """
    EMBEDDER_MAP = {
        ".mp3": _embed_mp3,
        ".flac": _embed_flac,
        ".ogg": _embed_ogg_vorbis,
        ".oga": _embed_ogg_vorbis,
        ".opus": _embed_ogg_opus,
        ".m4a": _embed_mp4,
        ".mp4": _embed_mp4,
    }

    title = _norm(track.title)
    artist = _norm(track.artist)
    lyrics = _norm(track.lyrics)

    ext = os.path.splitext(path)[1].lower()
    embedder = EMBEDDER_MAP.get(ext)
    if embedder:
        embedder(path, title, artist, lyrics)
        return

    audio = MutagenFile(path, easy=True)
    if audio is None:
        logger.debug("No tag support for %s", path)
        return

    if title:
        audio["title"] = [title]
    if artist:
        audio["artist"] = [artist]
    audio.save()


def _embed_vorbis_comment(audio_cls, path, title, artist, lyrics) -> None:
    audio = audio_cls(path)

    for key, value in (("TITLE", title), ("ARTIST", artist), ("LYRICS", lyrics)):
        if value:
            audio[key] = [value]
        elif key in audio:
            del audio[key]

    audio.save()


def _embed_flac(path, title, artist, lyrics) -> None:
    _embed_vorbis_comment(FLAC, path, title, artist, lyrics)


def _embed_ogg_vorbis(path, title, artist, lyrics) -> None:
    _embed_vorbis_comment(OggVorbis, path, title, artist, lyrics)


def _embed_ogg_opus(path, title, artist, lyrics) -> None:
    _embed_vorbis_comment(OggOpus, path, title, artist, lyrics)


def _embed_mp3(path, title, artist, lyrics) -> None:
    try:
        tags = ID3(path)
    except ID3NoHeaderError:
        tags = ID3()

    tags.delall("TIT2")
    tags.delall("TPE1")
    tags.delall("USLT")

    if title:
        tags.add(TIT2(encoding=3, text=title))
    if artist:
        tags.add(TPE1(encoding=3, text=artist))
    # ID3 wants a 3-letter language code; mezmurs are mostly Amharic/Ge'ez,
    # so "und" (undefined) is the honest value.
    if lyrics:
        tags.add(USLT(encoding=3, lang="und", desc="", text=lyrics))

    tags.save(path)


def _embed_mp4(path, title, artist, lyrics) -> None:
    audio = MP4(path)

    for key, value in ((MP4_TITLE_KEY, title), (MP4_ARTIST_KEY, artist), (MP4_LYRICS_KEY, lyrics)):
        if value:
            audio[key] = [value]
        elif key in audio:
            del audio[key]

    audio.save()
