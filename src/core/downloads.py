# core/downloads.py
from __future__ import annotations

import logging
import os
import re
import urllib.parse
from typing import Optional

import requests

from core.embed_tags import embed_track_tags
from core.models import Track

logger = logging.getLogger(__name__)

USER_AGENT = "mezmur-hub-desktop/0.1"
CHUNK_SIZE = 64 * 1024


class DownloadError(RuntimeError):
    pass


def url_extension(url: str, default: str = "mp3") -> str:
    path = urllib.parse.urlparse(url).path
    name = path.rsplit("/", 1)[-1]
    parts = name.split(".")
    if len(parts) > 1 and parts[-1]:
        return parts[-1].lower()
    return default


def suggested_filename(track: Track) -> str:
    """Build "title - artist.ext", replacing characters filesystems reject."""
    base = f"{track.title} - {track.artist}" if track.artist else track.title
    base = re.sub(r'[\\/:*?"<>|\x00-\x1f]', "_", base).strip(" .") or track.id
    return f"{base}.{url_extension(track.media_url)}"


def download_track(
    track: Track,
    dest_dir: str,
    session: Optional[requests.Session] = None,
    embed_tags: bool = True,
) -> str:
    """
    Save a downloadable track into dest_dir and return the file path.
    Title, artist and lyrics are written into the file's tags afterwards;
    a tagging failure leaves the audio in place.
    """
    if not track.downloadable or not track.media_url:
        raise DownloadError("No audio URL available for download or not downloadable.")

    session = session or requests.Session()
    session.headers.setdefault("User-Agent", USER_AGENT)

    os.makedirs(dest_dir, exist_ok=True)
    path = os.path.join(dest_dir, suggested_filename(track))
    tmp_path = path + ".part"

    try:
        with session.get(track.media_url, stream=True, timeout=30) as r:
            r.raise_for_status()
            with open(tmp_path, "wb") as f:
                for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
        os.replace(tmp_path, path)
    except (requests.RequestException, OSError) as e:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise DownloadError(f"Download failed: {e}") from e

    logger.info("Downloaded %s to %s", track.id, path)

    if embed_tags:
        try:
            embed_track_tags(path, track)
        except Exception as e:
            logger.warning("Could not tag %s: %s", path, e)

    return path
