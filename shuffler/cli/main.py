"""
Command-line entry point.

    shuffler [--from PLAYLIST] [--to NAME] [--use-cache | --no-cache]
             [--page-size N] [--limit N] [--verbose]
"""

import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from shuffler import __version__
from shuffler.cli.progress import RichProgressReporter, spinner
from shuffler.cli.prompts import TerminalPrompts
from shuffler.config import Config
from shuffler.models.playable import MalformedIdentifierError, PlayableId
from shuffler.models.playlist import Playlist
from shuffler.schemas.requests import ShuffleRequest
from shuffler.services import (
    AuthService,
    AuthenticationError,
    PlaylistCacheError,
    PlaylistCacheStore,
    PlaylistContentFetcher,
    PlaylistError,
    PlaylistNotFoundError,
    PlaylistService,
    ShuffleError,
    ShuffleService,
)
from shuffler.services.playlist_service import build_description
from shuffler.spotify.api import SpotifyAPI
from shuffler.spotify.exceptions import SpotifyError

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

HANDLED_ERRORS = (
    SpotifyError,
    AuthenticationError,
    PlaylistError,
    PlaylistCacheError,
    MalformedIdentifierError,
    ShuffleError,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shuffler",
        description="Create a truly shuffled copy of a Spotify playlist.",
    )
    parser.add_argument(
        "-f", "--from", dest="source", metavar="PLAYLIST",
        help="playlist ID, spotify:playlist: URI or open.spotify.com URL to shuffle",
    )
    parser.add_argument(
        "-t", "--to", dest="destination_name", metavar="NAME",
        help="name of the new playlist",
    )
    cache = parser.add_mutually_exclusive_group()
    cache.add_argument(
        "--use-cache", dest="use_cache", action="store_true", default=None,
        help="use a cached copy of the playlist without asking",
    )
    cache.add_argument(
        "--no-cache", dest="use_cache", action="store_false",
        help="always fetch the playlist from Spotify",
    )
    parser.add_argument(
        "--page-size", type=int, metavar="N",
        help="items fetched per request, 1-100",
    )
    parser.add_argument(
        "--limit", dest="playlist_limit", type=int, metavar="N",
        help="playlists listed per request when choosing a playlist, 1-50",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="show debug logging",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    return parser


def configure_logging(level: str, console: Optional[Console] = None) -> None:
    """Send all log records through a single RichHandler."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _format_validation_error(error: ValidationError) -> str:
    messages = []
    for detail in error.errors():
        field = ".".join(str(part) for part in detail["loc"]) or "input"
        messages.append(f"{field}: {detail['msg']}")
    return "; ".join(messages)


def parse_request(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    config: Config,
) -> ShuffleRequest:
    """Validate parsed arguments, exiting with a usage error when invalid."""
    try:
        return ShuffleRequest(
            source=args.source,
            destination_name=args.destination_name,
            use_cache=args.use_cache,
            page_size=args.page_size if args.page_size is not None else config.page_size,
            playlist_limit=args.playlist_limit,
        )
    except ValidationError as e:
        parser.error(_format_validation_error(e))


def choose_source(
    playlists: PlaylistService,
    request: ShuffleRequest,
    config: Config,
    prompts: TerminalPrompts,
) -> Playlist:
    if request.source is not None:
        return playlists.resolve_playlist(request.source)

    limit = request.playlist_limit
    if limit is None:
        limit = prompts.ask_playlist_limit(config.playlist_limit)

    available = playlists.list_user_playlists(limit=limit)
    if not available:
        raise PlaylistNotFoundError("No playlists found in your library")
    return prompts.select_playlist(available)


def load_items(
    api: SpotifyAPI,
    source: Playlist,
    request: ShuffleRequest,
    config: Config,
    console: Console,
    prompts: TerminalPrompts,
) -> List[PlayableId]:
    """Items of ``source``, from the cache when accepted, otherwise fetched."""
    cache = PlaylistCacheStore(
        config.paths.playlist_cache_file, confirm=prompts.confirm_cached_playlist
    )
    items = cache.lookup_and_decide(source.id, request.use_cache, cache.load())
    if items is not None:
        logger.info("Using %d cached items for %s", len(items), source.id)
        return items

    fetcher = PlaylistContentFetcher(
        api,
        cache,
        page_size=request.page_size,
        progress=RichProgressReporter(console),
    )
    result = fetcher.fetch(source.id)

    if result.skipped_pages:
        offsets = ", ".join(str(offset) for offset in result.skipped_offsets)
        console.print(
            f"[yellow]{result.skipped_pages} page(s) could not be read "
            f"(offsets {offsets}); the shuffle is missing those items"
        )
    if result.cache_error is not None:
        console.print(f"[yellow]Playlist was not cached: {escape(str(result.cache_error))}")
    return result.items


def run(
    request: ShuffleRequest,
    config: Config,
    console: Console,
    prompts: TerminalPrompts,
) -> None:
    auth = AuthService(
        config.paths,
        prompt_credentials=prompts.ask_credentials,
        prompt_redirect_url=prompts.ask_redirect_url,
    )
    api = auth.get_authorized_api()
    playlists = PlaylistService(api)

    source = choose_source(playlists, request, config, prompts)
    items = load_items(api, source, request, config, console, prompts)
    if not items:
        raise ShuffleError(f"{source.name!r} has no playable items to shuffle")

    shuffled = ShuffleService.truncate_items(
        ShuffleService.shuffle_items(items), config.max_items
    )

    name = request.destination_name
    if name is None:
        name = prompts.ask_playlist_name(
            ShuffleService.default_playlist_name(config.app_info)
        )

    with spinner("Creating new playlist...", "Created playlist", console):
        destination = playlists.create_shuffled_playlist(
            name, build_description(source.name, config.app_info)
        )
    with spinner("Adding items to playlist...", "Added items to playlist", console):
        playlists.fill_playlist(destination.id, shuffled)

    console.print(f"[green]✓[/green] {escape(name)} shuffled")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = Config.from_env()
    except ValueError as e:
        parser.error(str(e))

    console = Console()
    configure_logging("DEBUG" if args.verbose else config.log_level, console)
    request = parse_request(parser, args, config)

    try:
        run(request, config, console, TerminalPrompts(console))
    except KeyboardInterrupt:
        console.print("\n[red]Aborted")
        return EXIT_INTERRUPTED
    except HANDLED_ERRORS as e:
        logger.debug("Shuffle failed", exc_info=True)
        console.print(f"[red]Error: {escape(str(e))}")
        return EXIT_FAILURE
    return 0


if __name__ == "__main__":
    sys.exit(main())
