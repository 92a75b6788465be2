"""Pytest configuration for backend tests.

Every test gets its own media directory; the config dependency is overridden
so no request touches the developer's real data.
"""

import json
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add project root to path so `web.backend` is importable
project_root = Path(__file__).parent.parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from soundtrack_player.core.config import Config  # noqa: E402
from web.backend.deps import get_config  # noqa: E402
from web.backend.main import app  # noqa: E402

MIGRATION_KEY = "test-migration-key"


@pytest.fixture
def track_list_data() -> dict:
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
        ],
        "gnomeMusic": [
            {"id": "g1", "title": "G1", "filename": "g1.mp3", "status": "ready"},
        ],
        "outsideScope": [],
        "bonusUnassigned": [],
    }


@pytest.fixture
def media_dir(tmp_path: Path, track_list_data: dict) -> Path:
    directory = tmp_path / "media"
    directory.mkdir()
    (directory / "a.mp3").write_bytes(bytes(range(256)) * 4)
    (directory / "loose.mp3").write_bytes(b"unreferenced")
    (directory / "trackList.json").write_text(json.dumps(track_list_data))
    return directory


@pytest.fixture
def config(media_dir: Path) -> Config:
    config = Config()
    config.media.media_dir = str(media_dir)
    config.security.migration_key = MIGRATION_KEY
    return config


@pytest.fixture
def client(config: Config):
    app.dependency_overrides[get_config] = lambda: config
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def saved_track_list(media_dir: Path):
    """Read trackList.json as currently on disk."""
    return lambda: json.loads((media_dir / "trackList.json").read_text())
