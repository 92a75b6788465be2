"""Shared fixtures for domain tests."""

import json
from pathlib import Path

import pytest

from soundtrack_player.domain.tracklist import TrackListStore


@pytest.fixture
def sample_data() -> dict:
    return {
        "score": [
            {
                "id": "a",
                "title": "A",
                "filename": "a.mp3",
                "status": "ready",
                "subtracks": [
                    {"id": "a-b", "title": "B", "filename": None, "status": "planned"}
                ],
            },
            {"id": "c", "title": "C", "filename": None, "status": "planned"},
            {"id": "d", "title": "D", "filename": "d.mp3", "status": "ready"},
        ],
        "gnomeMusic": [
            {"id": "g1", "title": "G1", "filename": "g1.mp3", "status": "ready"},
            {"id": "g2", "title": "G2", "filename": None, "status": "planned"},
        ],
        "outsideScope": [],
        "bonusUnassigned": [],
    }


@pytest.fixture
def media_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "media"
    directory.mkdir()
    return directory


@pytest.fixture
def track_list_path(media_dir: Path, sample_data: dict) -> Path:
    path = media_dir / "trackList.json"
    path.write_text(json.dumps(sample_data), encoding="utf-8")
    return path


@pytest.fixture
def store(track_list_path: Path) -> TrackListStore:
    return TrackListStore(track_list_path)

