"""
Configuration management for tunebridge.

This module handles loading, validating, and providing access to the
application configuration stored in config.yaml, with secrets supplied
through environment variables (optionally from a .env file).

The configuration contains:
    - YouTube Data API keys (a pool, rotated on quota exhaustion)
    - Per-request timeout and result count for the video search
    - Resolution cache capacity and prefetch batch size
    - Spotify API credentials for the track search provider
    - Lyrics request timeout
    - Log directory and console level

Environment Variables:
    YOUTUBE_API_KEY, YOUTUBE_API_KEY_2, YOUTUBE_API_KEY_3
        Appended to youtube.api_keys (duplicates removed, order kept).
    SPOTIFY_CLIENT_ID, SPOTIFY_CLIENT_SECRET
        Override the spotify section.

Example config.yaml:
    youtube:
      api_keys: ["key-one", "key-two"]
      timeout: 15
      max_results: 10

    cache:
      capacity: 100
      prefetch_batch_size: 3

    spotify:
      client_id: "your_client_id_here"
      client_secret: "your_client_secret_here"

    lyrics:
      timeout: 10

    logging:
      directory: "~/.tunebridge/logs"
      level: "INFO"
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from tunebridge.core.exceptions import ConfigError


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "config.yaml"

YOUTUBE_KEY_ENV_VARS = ("YOUTUBE_API_KEY", "YOUTUBE_API_KEY_2", "YOUTUBE_API_KEY_3")

DEFAULT_YOUTUBE_TIMEOUT = 15.0
DEFAULT_MAX_RESULTS = 10
DEFAULT_CACHE_CAPACITY = 100
DEFAULT_PREFETCH_BATCH_SIZE = 3
DEFAULT_LYRICS_TIMEOUT = 10.0


@dataclass(frozen=True)
class YouTubeConfig:
    """
    Video search provider configuration.

    Attributes:
        api_keys: Ordered credential pool. Index 0 is tried first.
        timeout: Seconds before a single search request is abandoned.
        max_results: Candidates requested per search (1-50).
    """
    api_keys: tuple[str, ...] = ()
    timeout: float = DEFAULT_YOUTUBE_TIMEOUT
    max_results: int = DEFAULT_MAX_RESULTS


@dataclass(frozen=True)
class CacheConfig:
    """
    Resolution cache configuration.

    Attributes:
        capacity: Maximum number of cached video ids (FIFO eviction).
        prefetch_batch_size: How many upcoming tracks prefetch_batch warms.
    """
    capacity: int = DEFAULT_CACHE_CAPACITY
    prefetch_batch_size: int = DEFAULT_PREFETCH_BATCH_SIZE


@dataclass(frozen=True)
class SpotifyConfig:
    """Spotify API credentials (client credentials flow)."""
    client_id: str = ""
    client_secret: str = ""

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)


@dataclass(frozen=True)
class LyricsConfig:
    timeout: float = DEFAULT_LYRICS_TIMEOUT


@dataclass(frozen=True)
class LoggingConfig:
    """
    Attributes:
        directory: Where log files go. None keeps logging console-only.
        level: Console log level name.
    """
    directory: Path | None = None
    level: str = "INFO"


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Created by load_config() and treated as immutable.

    Example:
        config = load_config()
        resolver = VideoResolver.from_config(config)
    """
    youtube: YouTubeConfig = field(default_factory=YouTubeConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    spotify: SpotifyConfig = field(default_factory=SpotifyConfig)
    lyrics: LyricsConfig = field(default_factory=LyricsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(
    config_path: Path | None = None,
    environ: dict[str, str] | None = None
) -> Config:
    """
    Load and validate configuration from config.yaml and the environment.

    Args:
        config_path: Optional explicit path to config file. If None, looks
                     for config.yaml in the current working directory and
                     falls back to defaults when it does not exist.
        environ: Environment mapping to read secrets from. Defaults to
                 os.environ after loading a .env file.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If an explicit config file is missing, the YAML is
                     invalid, a section is not a dictionary, or a field
                     has an invalid value.
    """
    if environ is None:
        load_dotenv()
        environ = dict(os.environ)

    raw_config = _read_config_file(config_path)

    youtube_config = _parse_youtube_config(_section(raw_config, "youtube"), environ)
    cache_config = _parse_cache_config(_section(raw_config, "cache"))
    spotify_config = _parse_spotify_config(_section(raw_config, "spotify"), environ)
    lyrics_config = LyricsConfig(
        timeout=_positive_number(
            _section(raw_config, "lyrics").get("timeout"),
            "lyrics.timeout",
            DEFAULT_LYRICS_TIMEOUT,
        )
    )
    logging_config = _parse_logging_config(_section(raw_config, "logging"))

    return Config(
        youtube=youtube_config,
        cache=cache_config,
        spotify=spotify_config,
        lyrics=lyrics_config,
        logging=logging_config,
    )


def _read_config_file(config_path: Path | None) -> dict[str, Any]:
    explicit = config_path is not None
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME

    if not config_path.exists():
        if explicit:
            raise ConfigError(
                f"Configuration file not found: {config_path}",
                details={"file_path": str(config_path)}
            )
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    if raw_config is None:
        return {}

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    return raw_config


def _section(raw_config: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw_config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(
            f"Section '{name}' must be a dictionary",
            details={"section": name}
        )
    return section


def _positive_number(value: Any, field_name: str, default: float) -> float:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(
            f"'{field_name}' must be a positive number",
            details={"field": field_name, "value": value}
        )
    return float(value)


def _positive_int(value: Any, field_name: str, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(
            f"'{field_name}' must be a positive integer",
            details={"field": field_name, "value": value}
        )
    return value


def _parse_youtube_config(section: dict[str, Any], environ: dict[str, str]) -> YouTubeConfig:
    """
    Build the credential pool from the file first, then the environment.

    Raises:
        ConfigError: If api_keys is not a list of strings, or timeout /
                     max_results are out of range.
    """
    raw_keys = section.get("api_keys") or []
    if isinstance(raw_keys, str):
        raw_keys = [raw_keys]
    if not isinstance(raw_keys, list) or not all(isinstance(k, str) for k in raw_keys):
        raise ConfigError(
            "'youtube.api_keys' must be a list of strings",
            details={"field": "youtube.api_keys"}
        )

    keys: list[str] = []
    for key in [*raw_keys, *(environ.get(name, "") for name in YOUTUBE_KEY_ENV_VARS)]:
        key = key.strip()
        if key and key not in keys:
            keys.append(key)

    max_results = _positive_int(section.get("max_results"), "youtube.max_results", DEFAULT_MAX_RESULTS)
    if max_results > 50:
        raise ConfigError(
            "'youtube.max_results' must be at most 50",
            details={"field": "youtube.max_results", "value": max_results}
        )

    return YouTubeConfig(
        api_keys=tuple(keys),
        timeout=_positive_number(section.get("timeout"), "youtube.timeout", DEFAULT_YOUTUBE_TIMEOUT),
        max_results=max_results,
    )


def _parse_cache_config(section: dict[str, Any]) -> CacheConfig:
    return CacheConfig(
        capacity=_positive_int(section.get("capacity"), "cache.capacity", DEFAULT_CACHE_CAPACITY),
        prefetch_batch_size=_positive_int(
            section.get("prefetch_batch_size"),
            "cache.prefetch_batch_size",
            DEFAULT_PREFETCH_BATCH_SIZE,
        ),
    )


def _parse_spotify_config(section: dict[str, Any], environ: dict[str, str]) -> SpotifyConfig:
    client_id = environ.get("SPOTIFY_CLIENT_ID") or section.get("client_id") or ""
    client_secret = environ.get("SPOTIFY_CLIENT_SECRET") or section.get("client_secret") or ""

    if not isinstance(client_id, str) or not isinstance(client_secret, str):
        raise ConfigError(
            "'spotify.client_id' and 'spotify.client_secret' must be strings",
            details={"field": "spotify"}
        )

    return SpotifyConfig(client_id=client_id.strip(), client_secret=client_secret.strip())


def _parse_logging_config(section: dict[str, Any]) -> LoggingConfig:
    directory = section.get("directory")
    path = None
    if directory is not None:
        if not isinstance(directory, str) or not directory.strip():
            raise ConfigError(
                "'logging.directory' must be a non-empty string or null",
                details={"field": "logging.directory"}
            )
        path = Path(directory.strip()).expanduser().resolve()

    level = section.get("level", "INFO")
    if not isinstance(level, str) or level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ConfigError(
            "'logging.level' must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL",
            details={"field": "logging.level", "value": level}
        )

    return LoggingConfig(directory=path, level=level.upper())
