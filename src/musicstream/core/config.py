"""
Configuration management for musicstream
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from loguru import logger


@dataclass
class ServerConfig:
    """Configuration for the FastAPI backend."""

    host: str = "0.0.0.0"
    port: int = 8000
    auto_reload: bool = False
    allowed_origins: List[str] = field(
        default_factory=lambda: ["http://localhost:5173"]
    )
    session_ttl_days: int = 30
    cookie_secure: bool = False


@dataclass
class DatabaseConfig:
    """Configuration for the SQLite store."""

    path: Optional[str] = None  # default: ~/.local/share/musicstream/musicstream.db


@dataclass
class YouTubeConfig:
    """Configuration for the YouTube Data API search provider."""

    api_key: str = ""
    max_results: int = 20
    category_id: str = "10"  # Music
    timeout_seconds: float = 10.0


@dataclass
class PlayerConfig:
    """Configuration for the server-side media player."""

    enabled: bool = True
    mpv_socket_path: Optional[str] = None
    volume: int = 70
    poll_interval_ms: int = 100

    def validate(self) -> None:
        """Validate player configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if not 0 <= self.volume <= 100:
            raise ValueError(f"Invalid player volume: {self.volume}. Must be 0-100")
        if self.poll_interval_ms <= 0:
            raise ValueError(
                f"Invalid poll interval: {self.poll_interval_ms}. Must be positive"
            )


@dataclass
class HistoryConfig:
    """Configuration for recently played tracking."""

    recent_limit: int = 20


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = (
        None  # Custom log file path (default: ~/.local/share/musicstream/musicstream.log)
    )
    max_file_size_mb: int = 10  # Maximum log file size before rotation
    backup_count: int = 5  # Number of backup files to keep
    console_output: bool = False  # Also output to stderr


@dataclass
class Config:
    """Main configuration object."""

    server: ServerConfig = field(default_factory=ServerConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    youtube: YouTubeConfig = field(default_factory=YouTubeConfig)
    player: PlayerConfig = field(default_factory=PlayerConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "musicstream"
    return Path.home() / ".config" / "musicstream"


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
    1. Project root (detected via pyproject.toml) - for development
    2. Current working directory
    3. XDG_CONFIG_HOME/musicstream (or ~/.config/musicstream)
    """
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
        return Path(data_home) / "musicstream"
    return Path.home() / ".local" / "share" / "musicstream"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# musicstream configuration

[server]
host = "0.0.0.0"
port = 8000
auto_reload = false

# Frontend origins allowed by CORS (ALLOWED_ORIGINS env var overrides)
allowed_origins = ["http://localhost:5173"]

# Login session lifetime
session_ttl_days = 30

# Send session cookie only over HTTPS
cookie_secure = false

[database]
# SQLite file (default: ~/.local/share/musicstream/musicstream.db)
# path = "/path/to/musicstream.db"

[youtube]
# YouTube Data API v3 key (YOUTUBE_API_KEY env var overrides)
# api_key = "your-api-key-here"

# Results per search
max_results = 20

# YouTube video category (10 = Music)
category_id = "10"

timeout_seconds = 10.0

[player]
# Drive a local mpv process for playback
enabled = true

# Path for mpv socket (auto-generated if not specified)
# mpv_socket_path = "/tmp/musicstream-mpv.sock"

# Default volume (0-100)
volume = 70

# Progress polling interval while playing
poll_interval_ms = 100

[history]
# Number of recently played tracks returned
recent_limit = 20

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/musicstream/musicstream.log)
# log_file = "/path/to/custom/musicstream.log"

# Maximum log file size in MB before rotation
max_file_size_mb = 10

# Number of backup log files to keep
backup_count = 5

# Also output logs to stderr
console_output = false
""".strip()


def _apply_env_overrides(config: Config) -> Config:
    """Override TOML values with environment variables when present."""
    api_key = os.environ.get("YOUTUBE_API_KEY")
    if api_key:
        config.youtube.api_key = api_key

    db_path = os.environ.get("MUSICSTREAM_DB_PATH")
    if db_path:
        config.database.path = db_path

    allowed_origins = os.environ.get("ALLOWED_ORIGINS")
    if allowed_origins:
        config.server.allowed_origins = [
            origin.strip() for origin in allowed_origins.split(",") if origin.strip()
        ]

    return config


def load_config() -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values:
    - YOUTUBE_API_KEY
    - MUSICSTREAM_DB_PATH
    - ALLOWED_ORIGINS (comma-separated)
    """
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = get_config_path()

    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(create_default_config())
        logger.info(f"Created default configuration at: {config_path}")
        return _apply_env_overrides(Config())

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Error loading configuration from {config_path}: {e}")
        logger.warning("Using default configuration.")
        return _apply_env_overrides(Config())

    config = Config()

    if "server" in toml_data:
        server_data = toml_data["server"]
        config.server = ServerConfig(
            host=server_data.get("host", config.server.host),
            port=server_data.get("port", config.server.port),
            auto_reload=server_data.get("auto_reload", config.server.auto_reload),
            allowed_origins=server_data.get(
                "allowed_origins", config.server.allowed_origins
            ),
            session_ttl_days=server_data.get(
                "session_ttl_days", config.server.session_ttl_days
            ),
            cookie_secure=server_data.get("cookie_secure", config.server.cookie_secure),
        )

    if "database" in toml_data:
        db_path = toml_data["database"].get("path")
        config.database = DatabaseConfig(
            path=str(Path(db_path).expanduser()) if db_path else None
        )

    if "youtube" in toml_data:
        youtube_data = toml_data["youtube"]
        config.youtube = YouTubeConfig(
            api_key=youtube_data.get("api_key", config.youtube.api_key),
            max_results=youtube_data.get("max_results", config.youtube.max_results),
            category_id=str(
                youtube_data.get("category_id", config.youtube.category_id)
            ),
            timeout_seconds=youtube_data.get(
                "timeout_seconds", config.youtube.timeout_seconds
            ),
        )

    if "player" in toml_data:
        player_data = toml_data["player"]
        config.player = PlayerConfig(
            enabled=player_data.get("enabled", config.player.enabled),
            mpv_socket_path=player_data.get("mpv_socket_path"),
            volume=player_data.get("volume", config.player.volume),
            poll_interval_ms=player_data.get(
                "poll_interval_ms", config.player.poll_interval_ms
            ),
        )
        config.player.validate()

    if "history" in toml_data:
        config.history = HistoryConfig(
            recent_limit=toml_data["history"].get(
                "recent_limit", config.history.recent_limit
            )
        )

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level),
            log_file=logging_data.get("log_file"),
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
