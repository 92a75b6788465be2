"""
Tests for CLI subcommands.
"""

import json

import pytest

from soundtrack_player import cli
from soundtrack_player.core.config import Config, load_config


@pytest.fixture
def config(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    config = Config()
    config.media.media_dir = str(tmp_path / "media")
    return config


class TestInitMedia:
    """Test seeding a sample track list."""

    def test_creates_sample_document(self, config):
        assert cli.run_init_media(config) == 0

        data = json.loads(config.media.track_list_path.read_text())
        assert list(data) == ["score", "gnomeMusic", "outsideScope", "bonusUnassigned"]
        assert data["score"][0]["subtracks"][0]["status"] == "ready"
        assert data["bonusUnassigned"][0]["status"] == "planned"

    def test_refuses_to_overwrite(self, config):
        cli.run_init_media(config)

        assert cli.run_init_media(config) == 1

    def test_force_backs_up_previous(self, config):
        cli.run_init_media(config)

        assert cli.run_init_media(config, force=True) == 0
        assert any(p.name.endswith("-pre-init.json") for p in config.media.backups_path.iterdir())


class TestMigrateIds:
    """Test the local id migration command."""

    def test_sample_ids_already_match(self, config, capsys):
        cli.run_init_media(config)

        cli.run_migrate_ids(config)

        assert "All ids already match" in capsys.readouterr().out


class TestBackups:
    """Test listing backups."""

    def test_no_backups(self, config, capsys):
        cli.run_init_media(config)

        cli.run_backups(config)

        assert "No backups" in capsys.readouterr().out


class TestServe:
    """Test launching the web server."""

    def test_app_loads_the_chosen_config_file(self, config, tmp_path, monkeypatch):
        """The app's own config lookup lands on the --config file."""
        from web.backend.deps import get_config

        config_path = tmp_path / "custom.toml"
        custom_media = tmp_path / "custom-media"
        config_path.write_text(f'[media]\nmedia_dir = "{custom_media.as_posix()}"\n')
        # Restored on teardown, including the value run_serve writes
        monkeypatch.setenv("SOUNDTRACK_CONFIG", str(tmp_path / "unused.toml"))
        monkeypatch.delenv("SOUNDTRACK_MEDIA_DIR", raising=False)
        served = {}

        def fake_run(app, **kwargs):
            served["app"] = app
            served["media_path"] = get_config().media.media_path

        monkeypatch.setattr("uvicorn.run", fake_run)

        assert cli.run_serve(load_config(config_path), config_path=config_path) == 0

        assert served["app"] == "web.backend.main:app"
        assert served["media_path"] == custom_media
