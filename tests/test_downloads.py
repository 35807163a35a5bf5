from __future__ import annotations

import os

import pytest
import requests

from core.downloads import DownloadError, download_track, suggested_filename, url_extension

from conftest import make_track


class FakeResponse:
    def __init__(self, chunks, status_error=None):
        self.chunks = chunks
        self.status_error = status_error

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def raise_for_status(self):
        if self.status_error:
            raise self.status_error

    def iter_content(self, chunk_size=1):
        yield from self.chunks


class FakeSession:
    def __init__(self, response):
        self.headers = {}
        self.response = response
        self.requested = []

    def get(self, url, stream=False, timeout=None):
        self.requested.append((url, stream))
        return self.response


def test_url_extension() -> None:
    assert url_extension("https://x.org/a/b/song.OGG?token=1") == "ogg"
    assert url_extension("https://x.org/a/b/song") == "mp3"
    assert url_extension("https://x.org/a/b/song.") == "mp3"


def test_suggested_filename_uses_title_artist_and_extension() -> None:
    track = make_track("1", "Hymn A", artist="Choir", media_url="https://cdn.example.org/f/hymn.m4a")
    assert suggested_filename(track) == "Hymn A - Choir.m4a"


def test_suggested_filename_replaces_path_separators() -> None:
    track = make_track("1", "Yes/No: Why?", artist="")
    assert suggested_filename(track) == "Yes_No_ Why_.mp3"


def test_download_writes_file(tmp_path) -> None:
    track = make_track("1", "Hymn A", artist="Choir", downloadable=True)
    session = FakeSession(FakeResponse([b"ID3", b"", b"data"]))

    path = download_track(track, str(tmp_path), session=session, embed_tags=False)

    assert path == os.path.join(str(tmp_path), "Hymn A - Choir.mp3")
    with open(path, "rb") as f:
        assert f.read() == b"ID3data"
    assert session.requested == [(track.media_url, True)]
    assert session.headers["User-Agent"].startswith("mezmur-hub")


def test_download_refuses_non_downloadable(tmp_path) -> None:
    track = make_track("1", downloadable=False)
    with pytest.raises(DownloadError):
        download_track(track, str(tmp_path), session=FakeSession(FakeResponse([])))


def test_http_error_leaves_no_partial_file(tmp_path) -> None:
    track = make_track("1", downloadable=True)
    session = FakeSession(FakeResponse([], status_error=requests.HTTPError("404 Not Found")))

    with pytest.raises(DownloadError):
        download_track(track, str(tmp_path), session=session)

    assert os.listdir(tmp_path) == []
