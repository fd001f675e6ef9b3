"""
Core module for tunebridge.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - logger: Logging system with console and file outputs

Usage:
    from tunebridge.core import (
        Config, load_config,
        setup_logging, get_logger,
        TuneBridgeError, QuotaExhaustedError, ProviderError
    )
"""

from tunebridge.core.config import (
    CacheConfig,
    Config,
    LoggingConfig,
    LyricsConfig,
    SpotifyConfig,
    YouTubeConfig,
    load_config,
)
from tunebridge.core.exceptions import (
    ConfigError,
    LyricsError,
    ProviderError,
    QuotaExhaustedError,
    SpotifyError,
    TuneBridgeError,
)
from tunebridge.core.logger import (
    get_logger,
    log_resolution_miss,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    # Config
    "Config",
    "YouTubeConfig",
    "CacheConfig",
    "SpotifyConfig",
    "LyricsConfig",
    "LoggingConfig",
    "load_config",
    # Exceptions
    "TuneBridgeError",
    "ConfigError",
    "ProviderError",
    "QuotaExhaustedError",
    "SpotifyError",
    "LyricsError",
    # Logger
    "setup_logging",
    "get_logger",
    "log_resolution_miss",
    "shutdown_logging",
]
