"""
Configuration management for Soundtrack Player
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from loguru import logger


@dataclass
class MediaConfig:
    """Configuration for the media directory and the documents stored in it."""

    media_dir: str = ""  # Empty means <data dir>/media
    template_path: Optional[str] = None  # Seed document for a fresh trackList.json
    backups_to_keep: int = 10
    audio_formats: List[str] = field(default_factory=lambda: [".mp3"])
    image_formats: List[str] = field(
        default_factory=lambda: [".jpg", ".jpeg", ".png", ".gif"]
    )

    def validate(self) -> None:
        """Validate media configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if self.backups_to_keep < 1:
            raise ValueError(
                f"backups_to_keep must be at least 1, got {self.backups_to_keep}"
            )
        for ext in self.audio_formats + self.image_formats:
            if not ext.startswith("."):
                raise ValueError(f"File format must start with '.': {ext!r}")

    @property
    def media_path(self) -> Path:
        if self.media_dir:
            return Path(self.media_dir).expanduser()
        return get_data_dir() / "media"

    @property
    def track_list_path(self) -> Path:
        return self.media_path / "trackList.json"

    @property
    def stem_mixes_path(self) -> Path:
        return self.media_path / "stemMixes.json"

    @property
    def backups_path(self) -> Path:
        return self.media_path / "backups"

    @property
    def metadata_path(self) -> Path:
        return self.media_path / "metadata.json"


@dataclass
class ServerConfig:
    """Configuration for the HTTP server."""

    host: str = "127.0.0.1"
    port: int = 3001
    allowed_origins: List[str] = field(
        default_factory=lambda: ["http://localhost:3000"]
    )


@dataclass
class SecurityConfig:
    """Configuration for guarded admin endpoints."""

    migration_key: Optional[str] = None  # None disables /migrate-track-ids


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = (
        None  # Custom log file path (default: ~/.local/share/soundtrack-player/soundtrack-player.log)
    )
    max_file_size_mb: int = 10  # Maximum log file size before rotation
    backup_count: int = 5  # Number of rotated log files to keep
    console_output: bool = True  # Also output to stderr


@dataclass
class Config:
    """Main configuration object."""

    media: MediaConfig = field(default_factory=MediaConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "soundtrack-player"
    return Path.home() / ".config" / "soundtrack-player"


def _find_project_config() -> Optional[Path]:
    """Find config.toml in project root by looking for pyproject.toml.

    Returns:
        Path to config.toml in project root, or None if not found
    """
    current = Path(__file__).resolve().parent
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            config_path = parent / "config.toml"
            if config_path.exists():
                return config_path
            # Found project root but no config.toml there
            return None
    return None


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. SOUNDTRACK_CONFIG environment variable
    2. Project root (detected via pyproject.toml) - for development
    3. Current working directory
    4. XDG_CONFIG_HOME/soundtrack-player (or ~/.config/soundtrack-player)
    """
    explicit = os.environ.get("SOUNDTRACK_CONFIG")
    if explicit:
        return Path(explicit).expanduser()

    project_config = _find_project_config()
    if project_config:
        return project_config

    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "soundtrack-player"
    return Path.home() / ".local" / "share" / "soundtrack-player"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# Soundtrack Player Configuration

[media]
# Directory holding audio/image files, trackList.json, stemMixes.json and backups/
# (default: ~/.local/share/soundtrack-player/media)
# media_dir = "~/soundtrack/media"

# Document used to seed trackList.json when it does not exist yet
# template_path = "~/soundtrack/trackList.template.json"

# Number of trackList backups retained
backups_to_keep = 10

# Extensions listed by GET /tracks and considered for the album cover
audio_formats = [".mp3"]
image_formats = [".jpg", ".jpeg", ".png", ".gif"]

[server]
host = "127.0.0.1"
port = 3001
allowed_origins = ["http://localhost:3000"]

[security]
# Shared secret expected in the x-migration-key header of POST /migrate-track-ids
# migration_key = "change-me"

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/soundtrack-player/soundtrack-player.log)
# log_file = "/path/to/soundtrack-player.log"

# Maximum log file size in MB before rotation
max_file_size_mb = 10

# Number of rotated log files to keep
backup_count = 5

# Also output logs to stderr
console_output = true
""".strip()


def _apply_env_overrides(config: Config) -> Config:
    """Environment variables win over TOML values."""
    media_dir = os.environ.get("SOUNDTRACK_MEDIA_DIR")
    if media_dir:
        config.media.media_dir = media_dir

    migration_key = os.environ.get("MIGRATION_KEY")
    if migration_key:
        config.security.migration_key = migration_key

    allowed_origins = os.environ.get("ALLOWED_ORIGINS")
    if allowed_origins:
        config.server.allowed_origins = [
            origin.strip() for origin in allowed_origins.split(",") if origin.strip()
        ]

    log_level = os.environ.get("SOUNDTRACK_LOG_LEVEL")
    if log_level:
        config.logging.level = log_level.upper()

    return config


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file, falling back to defaults.

    Environment variables override TOML values:
    - SOUNDTRACK_MEDIA_DIR
    - MIGRATION_KEY
    - ALLOWED_ORIGINS (comma-separated)
    - SOUNDTRACK_LOG_LEVEL
    """
    # Load .env file from config directory if it exists
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = config_path or get_config_path()

    if not config_path.exists():
        logger.debug(f"No config file at {config_path}, using defaults")
        return _apply_env_overrides(Config())

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Error loading configuration from {config_path}: {e}")
        logger.warning("Using default configuration.")
        return _apply_env_overrides(Config())

    config = Config()

    if "media" in toml_data:
        media_data = toml_data["media"]
        config.media = MediaConfig(
            media_dir=media_data.get("media_dir", config.media.media_dir),
            template_path=media_data.get("template_path"),
            backups_to_keep=media_data.get(
                "backups_to_keep", config.media.backups_to_keep
            ),
            audio_formats=[
                ext.lower()
                for ext in media_data.get("audio_formats", config.media.audio_formats)
            ],
            image_formats=[
                ext.lower()
                for ext in media_data.get("image_formats", config.media.image_formats)
            ],
        )
        try:
            config.media.validate()
        except ValueError as e:
            logger.warning(f"Invalid media configuration: {e}")
            logger.warning("Using default media configuration.")
            config.media = MediaConfig(
                media_dir=config.media.media_dir,
                template_path=config.media.template_path,
            )

    if "server" in toml_data:
        server_data = toml_data["server"]
        config.server = ServerConfig(
            host=server_data.get("host", config.server.host),
            port=server_data.get("port", config.server.port),
            allowed_origins=server_data.get(
                "allowed_origins", config.server.allowed_origins
            ),
        )

    if "security" in toml_data:
        config.security = SecurityConfig(
            migration_key=toml_data["security"].get("migration_key"),
        )

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        log_file = logging_data.get("log_file")
        if log_file:
            log_file = str(Path(log_file).expanduser())
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level).upper(),
            log_file=log_file,
            max_file_size_mb=logging_data.get(
                "max_file_size_mb", config.logging.max_file_size_mb
            ),
            backup_count=logging_data.get(
                "backup_count", config.logging.backup_count
            ),
            console_output=logging_data.get(
                "console_output", config.logging.console_output
            ),
        )

    return _apply_env_overrides(config)


def ensure_directories(config: Config) -> None:
    """Ensure all necessary directories exist."""
    get_data_dir().mkdir(parents=True, exist_ok=True)
    config.media.media_path.mkdir(parents=True, exist_ok=True)
    config.media.backups_path.mkdir(parents=True, exist_ok=True)
