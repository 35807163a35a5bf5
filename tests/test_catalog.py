from __future__ import annotations

import json

import pytest

from core.catalog import filter_tracks, load_catalog, parse_catalog
from core.models import CatalogError, Track


ROWS = [
    {
        "id": "7f1c",
        "title": "Kidus Kidus",
        "artist": "Zemari Tewodros Yosef",
        "audio_url": "https://storage.example.org/mezmurs/kidus.mp3",
        "lyrics": "Kidus kidus kidus...",
        "downloadable": True,
        "category_id": None,
        "created_at": "2024-05-01T10:00:00Z",
    },
    {
        "id": "9a22",
        "title": "Amlak Hoy",
        "artist": "Zemarit Lidya",
        "audio_url": "https://storage.example.org/mezmurs/amlak.m4a",
        "lyrics": None,
        "downloadable": False,
        "category_id": "c1",
    },
]


def test_track_from_backend_row() -> None:
    track = Track.from_row(ROWS[0])
    assert track.id == "7f1c"
    assert track.media_url == "https://storage.example.org/mezmurs/kidus.mp3"
    assert track.downloadable is True
    assert track.category_id is None


def test_track_row_without_url_is_rejected() -> None:
    with pytest.raises(CatalogError):
        Track.from_row({"id": "1", "title": "No audio"})


def test_parse_catalog_skips_bad_and_duplicate_rows() -> None:
    rows = ROWS + [{"id": "x"}, "garbage", dict(ROWS[0])]
    tracks = parse_catalog({"mezmurs": rows})
    assert [t.id for t in tracks] == ["7f1c", "9a22"]


def test_parse_catalog_rejects_non_list() -> None:
    with pytest.raises(CatalogError):
        parse_catalog("nope")


def test_load_catalog_from_file(tmp_path) -> None:
    path = tmp_path / "mezmurs.json"
    path.write_text(json.dumps(ROWS), encoding="utf-8")

    tracks = load_catalog(str(path))
    assert len(tracks) == 2
    assert tracks[1].media_url.endswith("amlak.m4a")


def test_load_catalog_invalid_json(tmp_path) -> None:
    path = tmp_path / "mezmurs.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogError):
        load_catalog(str(path))


def test_filter_matches_title_or_artist_case_insensitively() -> None:
    tracks = parse_catalog(ROWS)
    assert [t.id for t in filter_tracks(tracks, "kidus")] == ["7f1c"]
    assert [t.id for t in filter_tracks(tracks, "LIDYA")] == ["9a22"]
    assert filter_tracks(tracks, "  ") == tracks
    assert filter_tracks(tracks, "zzz") == []
