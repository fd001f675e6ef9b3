"""
Command-line interface for tunebridge.

This module implements the CLI using Click (rich-click for colored help),
exposing the resolver and the unified lookup for operators and scripts.

Commands:
    tunebridge resolve <title> <artist>   Resolve one song to a YouTube video id
    tunebridge batch <file>               Resolve "Title - Artist" lines from a file
    tunebridge unified <query>            Print the unified track JSON document
    tunebridge keys [--check]             Show or check the YouTube API key pool

Options:
    --config <path>                       Explicit config.yaml (default: ./config.yaml)
    --log-dir <path>                      Write log files there
    --verbose                             Show DEBUG messages on the console

Exit Codes:
    0   success
    1   no acceptable video found (resolve) or track not found (unified)
    2   every YouTube API key is quota-exhausted
    3   Spotify error
    4   configuration error
    5   other tunebridge error
    130 interrupted by user
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Callable, Coroutine

import rich_click as click
from tqdm import tqdm

# Configure rich-click for better help formatting
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.MAX_WIDTH = 100

from tunebridge import __version__
from tunebridge.core import (
    Config,
    ConfigError,
    QuotaExhaustedError,
    SpotifyError,
    TuneBridgeError,
    get_logger,
    load_config,
    setup_logging,
    shutdown_logging,
)
from tunebridge.unified import UnifiedMusicService
from tunebridge.youtube import SongRef, VideoResolver
from tunebridge.youtube.models import WATCH_URL_TEMPLATE

logger = get_logger(__name__)


EXIT_NOT_FOUND = 1
EXIT_QUOTA = 2
EXIT_SPOTIFY = 3
EXIT_CONFIG = 4
EXIT_ERROR = 5
EXIT_INTERRUPTED = 130


def build_resolver(config: Config) -> VideoResolver:
    return VideoResolver.from_config(config)


def build_unified_service(config: Config) -> UnifiedMusicService:
    return UnifiedMusicService.from_config(config)


def parse_song_line(line: str) -> SongRef | None:
    """
    Parse a batch file line of the form "Title - Artist".

    The last " - " separates title from artist, so titles keeping their
    own dash qualifier ("Song - Remastered - Artist") still parse. Blank
    lines and lines starting with '#' are skipped.

    Returns:
        SongRef, or None for lines to skip or without a separator.
    """
    line = line.strip()
    if not line or line.startswith("#"):
        return None
    title, separator, artist = line.rpartition(" - ")
    if not separator or not title.strip() or not artist.strip():
        return None
    return SongRef(title=title.strip(), artist=artist.strip())


def _run(ctx: click.Context, coro_factory: Callable[[], Coroutine[Any, Any, int]]) -> None:
    """Run an async command body and map tunebridge errors to exit codes."""
    try:
        exit_code = asyncio.run(coro_factory())
    except QuotaExhaustedError as e:
        click.echo(f"YouTube quota exhausted: {e.message}", err=True)
        click.echo("Service temporarily unavailable. Reset keys or try again tomorrow.", err=True)
        exit_code = EXIT_QUOTA
    except SpotifyError as e:
        click.echo(f"Spotify error: {e.message}", err=True)
        exit_code = EXIT_SPOTIFY
    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        exit_code = EXIT_CONFIG
    except TuneBridgeError as e:
        click.echo(f"Error: {e.message}", err=True)
        exit_code = EXIT_ERROR
    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        exit_code = EXIT_INTERRUPTED
    finally:
        shutdown_logging()
    ctx.exit(exit_code)


@click.group()
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Path to config.yaml (default: ./config.yaml if present)"
)
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    metavar="<dir>",
    help="Directory for log files (overrides logging.directory)"
)
@click.option("--verbose", is_flag=True, help="Show debug output")
@click.version_option(__version__, prog_name="tunebridge")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path | None,
    log_dir: Path | None,
    verbose: bool
) -> None:
    """
    tunebridge: find the official YouTube video for any song.

    \b
    EXAMPLES:
        tunebridge resolve "Blinding Lights" "The Weeknd"
        tunebridge batch queue.txt
        tunebridge unified "blinding lights"
        tunebridge keys --check
    """
    try:
        config = load_config(config_path)
    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        ctx.exit(EXIT_CONFIG)

    level = "DEBUG" if verbose else config.logging.level
    setup_logging(log_dir or config.logging.directory, level)
    ctx.obj = config


@cli.command()
@click.argument("title")
@click.argument("artist")
@click.pass_context
def resolve(ctx: click.Context, title: str, artist: str) -> None:
    """Resolve one song to its official YouTube video."""
    config: Config = ctx.obj

    async def body() -> int:
        async with build_resolver(config) as resolver:
            video_id = await resolver.resolve(title, artist)
        if video_id is None:
            click.echo(f"Not found: {title} - {artist}", err=True)
            return EXIT_NOT_FOUND
        click.echo(video_id)
        click.echo(WATCH_URL_TEMPLATE.format(video_id=video_id))
        return 0

    _run(ctx, body)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def batch(ctx: click.Context, file: Path) -> None:
    """Resolve every "Title - Artist" line of FILE, prefetching the next songs."""
    config: Config = ctx.obj
    songs = []
    for line in file.read_text(encoding="utf-8").splitlines():
        song = parse_song_line(line)
        if song is not None:
            songs.append(song)
    logger.debug(f"Loaded {len(songs)} songs from {file}")

    async def body() -> int:
        resolved = 0
        missed = []
        async with build_resolver(config) as resolver:
            try:
                for position, song in enumerate(tqdm(songs, desc="Resolving", unit="song")):
                    await resolver.prefetch_batch(songs[position + 1:])
                    video_id = await resolver.resolve(song.title, song.artist)
                    if video_id is None:
                        missed.append(song)
                        continue
                    resolved += 1
                    click.echo(f"{song.title} - {song.artist}\t{video_id}")
            finally:
                click.echo(f"Resolved {resolved}/{len(songs)} songs ({len(missed)} not found)")
        return 0 if not missed else EXIT_NOT_FOUND

    _run(ctx, body)


@cli.command()
@click.argument("query")
@click.pass_context
def unified(ctx: click.Context, query: str) -> None:
    """Print track metadata, video and lyrics for QUERY as JSON."""
    config: Config = ctx.obj

    async def body() -> int:
        async with build_unified_service(config) as service:
            data = await service.get_unified_data(query)
        if data is None:
            click.echo(f"Track not found: {query}", err=True)
            return EXIT_NOT_FOUND
        click.echo(json.dumps(data.to_dict(), indent=2, ensure_ascii=False))
        return 0

    _run(ctx, body)


@cli.command()
@click.option(
    "--check", is_flag=True,
    help="Send one search per key (costs quota) and report which are exhausted"
)
@click.pass_context
def keys(ctx: click.Context, check: bool) -> None:
    """
    Show the YouTube API key pool.

    Without --check only the configured key count is meaningful: quota
    exhaustion is tracked per process, so a fresh pool has none.
    """
    config: Config = ctx.obj

    async def body() -> int:
        async with build_resolver(config) as resolver:
            if check:
                status = await resolver.check_credentials()
            else:
                status = resolver.credential_status()
        click.echo(json.dumps({
            "total": status.total,
            "activeIndex": status.active_index,
            "exhaustedIndices": list(status.exhausted_indices),
        }))
        return 0

    _run(ctx, body)


def main() -> None:
    cli(obj=None)


if __name__ == "__main__":
    sys.exit(main())
