"""
Playlist content service.

Pages through every item of a playlist, keeps the ones that can be played
(tracks and episodes with an id), and records the result in the playlist
cache. A page that cannot be fetched is skipped rather than aborting the
whole traversal; the skipped offsets are reported in the result.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from shuffler.config import DEFAULT_PAGE_SIZE
from shuffler.enums import PlayableKind
from shuffler.models.playable import MalformedIdentifierError, PlayableId
from shuffler.services.playlist_cache_service import (
    CachePersistenceError,
    PlaylistCacheStore,
)
from shuffler.spotify.exceptions import SpotifyError

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100
MAX_CONSECUTIVE_PAGE_FAILURES = 3


class ProgressReporter(Protocol):
    """Receives progress signals while a playlist is fetched."""

    def start(self, total: int, message: str) -> None: ...

    def increment(self) -> None: ...

    def finish(self, message: str) -> None: ...


class NullProgress:
    """Progress reporter that ignores everything."""

    def start(self, total: int, message: str) -> None:
        pass

    def increment(self) -> None:
        pass

    def finish(self, message: str) -> None:
        pass


@dataclass
class FetchResult:
    """Outcome of fetching one playlist."""

    items: List[PlayableId] = field(default_factory=list)
    total: int = 0
    visited: int = 0
    skipped_items: int = 0
    skipped_offsets: List[int] = field(default_factory=list)
    cache_error: Optional[CachePersistenceError] = None

    @property
    def skipped_pages(self) -> int:
        return len(self.skipped_offsets)

    @property
    def cached(self) -> bool:
        return self.cache_error is None


def playable_from_item(item: Optional[Dict[str, Any]]) -> Optional[PlayableId]:
    """
    Extract a PlayableId from a playlist item, or None if it has none.

    Items removed from the catalogue, regionally unavailable items, local
    files and anything that is neither a track nor an episode yield None.
    """
    payload = (item or {}).get("track")
    if not payload or payload.get("is_local"):
        return None

    playable_id = payload.get("id")
    if not playable_id:
        return None

    try:
        kind = PlayableKind(payload.get("type"))
    except ValueError:
        logger.debug("Skipping item of unsupported type %r", payload.get("type"))
        return None

    try:
        return PlayableId(kind, playable_id)
    except MalformedIdentifierError as e:
        logger.warning("Skipping playlist item: %s", e)
        return None


class PlaylistContentFetcher:
    """Fetches the playable items of a playlist and caches them."""

    def __init__(
        self,
        api,
        cache_store: PlaylistCacheStore,
        page_size: int = DEFAULT_PAGE_SIZE,
        progress: Optional[ProgressReporter] = None,
    ):
        """
        Initialize the fetcher.

        Args:
            api: Object providing ``get_playlist_total`` and
                ``get_playlist_items_page`` (normally a SpotifyAPI).
            cache_store: Where the fetched items are recorded.
            page_size: Items requested per page, 1 to 100.
            progress: Receives one increment per item visited.

        Raises:
            ValueError: If page_size is out of range.
        """
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")

        self._api = api
        self._cache = cache_store
        self._page_size = page_size
        self._progress = progress or NullProgress()

    def fetch(self, playlist_id: str) -> FetchResult:
        """
        Retrieve every playable item of a playlist in server order.

        Traversal ends at the first page shorter than the page size; the
        reported total only sizes the progress display. A page request that
        fails is skipped and the next page is tried. After
        MAX_CONSECUTIVE_PAGE_FAILURES failed pages in a row the traversal
        gives up.

        Returns:
            FetchResult with the items and what was skipped. A failed cache
            write is attached as ``cache_error``; the items are still returned.

        Raises:
            SpotifyError: If the playlist's total item count cannot be read.
        """
        total = self._api.get_playlist_total(playlist_id)
        result = FetchResult(total=total)
        self._progress.start(total, "Fetching playlist items...")

        offset = 0
        failures = 0
        while True:
            try:
                page = self._api.get_playlist_items_page(
                    playlist_id, offset=offset, limit=self._page_size
                )
            except SpotifyError as e:
                failures += 1
                logger.warning(
                    "Skipping items %d-%d of playlist %s: %s",
                    offset, offset + self._page_size - 1, playlist_id, e,
                )
                result.skipped_offsets.append(offset)
                if failures >= MAX_CONSECUTIVE_PAGE_FAILURES:
                    logger.error(
                        "Giving up on playlist %s after %d failed pages", playlist_id, failures
                    )
                    break
                offset += self._page_size
                continue

            failures = 0
            page_items = page.get("items") or []
            for item in page_items:
                self._progress.increment()
                result.visited += 1

                playable = playable_from_item(item)
                if playable is None:
                    result.skipped_items += 1
                    continue
                result.items.append(playable)

            if len(page_items) < self._page_size:
                break
            offset += self._page_size

        logger.info(
            "Fetched %d of %d items from playlist %s (%d unavailable, %d pages skipped)",
            len(result.items), total, playlist_id,
            result.skipped_items, result.skipped_pages,
        )

        try:
            self._cache.save(playlist_id, result.items)
        except CachePersistenceError as e:
            logger.warning("Fetched playlist could not be cached: %s", e)
            result.cache_error = e

        if result.skipped_pages:
            self._progress.finish(
                f"Fetched playlist items ({result.skipped_pages} pages could not be read)"
            )
        else:
            self._progress.finish("Fetched playlist items")
        return result
