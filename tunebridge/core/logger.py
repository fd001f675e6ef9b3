"""
Logging configuration for tunebridge.

This module sets up the logging system with multiple outputs:
    - Console: Real-time messages with tqdm-compatible formatting
    - log_full.log: Complete log of all events (DEBUG and above)
    - log_errors.log: Only ERROR and CRITICAL level messages
    - resolution_misses.log: Songs for which no acceptable video was found

File outputs are only created when a log directory is given. Without one,
logging goes to the console only (library use, tests).

Usage:
    from tunebridge.core.logger import setup_logging, get_logger

    setup_logging(Path("~/.tunebridge").expanduser())  # Call once at startup
    logger = get_logger(__name__)  # Get logger for each module

    logger.info("Resolver ready")
    log_resolution_miss(logger, "Song Title", "Artist Name")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tqdm import tqdm


LOG_FULL_FILENAME = "log_full"
LOG_ERRORS_FILENAME = "log_errors"
RESOLUTION_MISSES_FILENAME = "resolution_misses"

# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Custom formatter that adds colors to console output.

    Colors:
        - DEBUG: Blue
        - INFO: Green
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bold Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.BLUE,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        colored_levelname = f"{color}{record.levelname}{Colors.RESET}"
        return f"{colored_levelname}: {record.getMessage()}"


class TqdmLoggingHandler(logging.Handler):
    """
    Logging handler that writes to console without breaking tqdm progress bars.

    The batch command shows a tqdm bar while resolutions log their outcome;
    tqdm.write() prints messages above the active bar instead of through it.
    """

    def __init__(self, stream: TextIO = sys.stderr) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream)
        except Exception:
            self.handleError(record)


class ResolutionMissHandler(logging.Handler):
    """
    Handler that captures resolution misses for the misses report file.

    Writes entries in a simple, human-readable format:

        Song Title - Artist Name
        query: song title_artist name

    The handler looks for specific extra fields in log records:
        - 'miss_title': The song title as requested
        - 'miss_artist': The artist name as requested
        - 'miss_cache_key': The normalized cache key (optional)

    Only records containing these fields are written to the report.
    """

    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None

    def open(self) -> None:
        """Open the report file for writing (overwrites existing content)."""
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        if not hasattr(record, "miss_title"):
            return

        if self.report_file is None:
            return

        try:
            title = getattr(record, "miss_title", "Unknown")
            artist = getattr(record, "miss_artist", "Unknown")
            cache_key = getattr(record, "miss_cache_key", None)

            self.report_file.write(f"{title} - {artist}\n")
            if cache_key:
                self.report_file.write(f"query: {cache_key}\n")
            self.report_file.write("\n")
            self.report_file.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        """Close the report file handle. Safe to call multiple times."""
        if self.report_file is not None:
            try:
                self.report_file.close()
            except OSError:
                pass
            self.report_file = None
        super().close()


class ErrorOnlyFilter(logging.Filter):
    """Filter that only allows ERROR and CRITICAL level records."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(log_dir: Path | None = None, level: str = "INFO") -> None:
    """
    Configure the logging system for the application.

    This function should be called ONCE at application startup, after
    the configuration is loaded but before any other operations.

    Args:
        log_dir: Directory where log files will be created. When None,
                 only the console handler is installed.
        level: Console log level name ("DEBUG", "INFO", ...).

    Behavior:
        1. Configure root logger level to DEBUG and drop existing handlers
        2. Add the colored, tqdm-compatible console handler at `level`
        3. If log_dir is given, create it and add:
           - log_full_{timestamp}.log (DEBUG)
           - log_errors_{timestamp}.log (ERROR+ via ErrorOnlyFilter)
           - resolution_misses_{timestamp}.log (ResolutionMissHandler)
        4. Quiet chatty third-party loggers (aiohttp, spotipy, urllib3)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    for noisy in ("aiohttp", "spotipy", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    if log_dir is None:
        return

    log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    full_handler = logging.FileHandler(
        log_dir / f"{LOG_FULL_FILENAME}_{timestamp}.log", mode="w", encoding="utf-8"
    )
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    root_logger.addHandler(full_handler)

    error_handler = logging.FileHandler(
        log_dir / f"{LOG_ERRORS_FILENAME}_{timestamp}.log", mode="w", encoding="utf-8"
    )
    error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    error_handler.addFilter(ErrorOnlyFilter())
    root_logger.addHandler(error_handler)

    miss_handler = ResolutionMissHandler(
        log_dir / f"{RESOLUTION_MISSES_FILENAME}_{timestamp}.log"
    )
    miss_handler.open()
    root_logger.addHandler(miss_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.

    Returns:
        logging.Logger: A logger instance configured by setup_logging().
    """
    return logging.getLogger(name)


def format_resolved_message(title: str, artist: str, video_id: str, score: int) -> str:
    """Format a 'Resolved' message with colors."""
    return (
        f"{Colors.GREEN}Resolved{Colors.RESET}: "
        f"{title} - {artist} -> "
        f"{Colors.CYAN}{video_id}{Colors.RESET} (score: {score})"
    )


def log_resolution_miss(
    logger: logging.Logger,
    title: str,
    artist: str,
    cache_key: str | None = None
) -> None:
    """
    Log a song for which no acceptable video was found.

    Attaches the extra fields ResolutionMissHandler uses to write the
    resolution_misses report.

    Args:
        logger: The logger to use for the message.
        title: The song title as requested.
        artist: The artist name as requested.
        cache_key: Normalized cache key, written as the query line.
    """
    logger.warning(
        f"{Colors.RED}Not found{Colors.RESET}: {title} - {artist}",
        extra={
            "miss_title": title,
            "miss_artist": artist,
            "miss_cache_key": cache_key,
        }
    )


def shutdown_logging() -> None:
    """
    Flush and close every handler on the root logger.

    Called by the CLI at exit so report files are flushed.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        try:
            handler.flush()
            handler.close()
        except OSError:
            pass
        root_logger.removeHandler(handler)
