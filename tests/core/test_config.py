"""
Tests for configuration loading.
"""

import pytest

from soundtrack_player.core.config import (
    Config,
    MediaConfig,
    create_default_config,
    load_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate from the developer's environment and ~/.config."""
    for name in ("SOUNDTRACK_MEDIA_DIR", "MIGRATION_KEY", "ALLOWED_ORIGINS", "SOUNDTRACK_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))


class TestLoadConfig:
    """Test TOML loading and environment overrides."""

    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_config(tmp_path / "absent.toml")

        assert config.server.port == 3001
        assert config.security.migration_key is None
        assert config.media.media_path == tmp_path / "xdg-data" / "soundtrack-player" / "media"

    def test_reads_sections(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(
            '[media]\nmedia_dir = "/srv/media"\nbackups_to_keep = 3\naudio_formats = [".MP3", ".wav"]\n'
            '[server]\nport = 8080\n'
            '[security]\nmigration_key = "secret"\n'
            '[logging]\nlevel = "debug"\n'
        )

        config = load_config(path)

        assert config.media.track_list_path.as_posix() == "/srv/media/trackList.json"
        assert config.media.backups_to_keep == 3
        assert config.media.audio_formats == [".mp3", ".wav"]
        assert config.server.port == 8080
        assert config.security.migration_key == "secret"
        assert config.logging.level == "DEBUG"

    def test_env_overrides_toml(self, tmp_path, monkeypatch):
        path = tmp_path / "config.toml"
        path.write_text('[security]\nmigration_key = "from-file"\n')
        monkeypatch.setenv("MIGRATION_KEY", "from-env")
        monkeypatch.setenv("ALLOWED_ORIGINS", "http://a.test, http://b.test")
        monkeypatch.setenv("SOUNDTRACK_MEDIA_DIR", str(tmp_path / "m"))

        config = load_config(path)

        assert config.security.migration_key == "from-env"
        assert config.server.allowed_origins == ["http://a.test", "http://b.test"]
        assert config.media.stem_mixes_path == tmp_path / "m" / "stemMixes.json"

    def test_invalid_toml_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[media\nbroken")

        assert load_config(path).server == Config().server

    def test_invalid_media_section_falls_back(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(
            '[media]\nmedia_dir = "/srv/media"\ntemplate_path = "/srv/template.json"\nbackups_to_keep = 0\n'
        )

        config = load_config(path)

        assert config.media.backups_to_keep == 10
        assert config.media.media_dir == "/srv/media"
        assert config.media.template_path == "/srv/template.json"

    def test_default_config_is_loadable(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(create_default_config())

        config = load_config(path)

        assert config.server.allowed_origins == ["http://localhost:3000"]
        assert config.logging.console_output is True


class TestMediaConfigValidate:
    """Test media config validation."""

    def test_format_without_dot_rejected(self):
        with pytest.raises(ValueError):
            MediaConfig(audio_formats=["mp3"]).validate()
