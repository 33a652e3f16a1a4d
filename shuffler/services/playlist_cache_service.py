"""
Playlist cache service.

Keeps the last fetched contents of every playlist in a single JSON file,
keyed by playlist ID, and decides whether a cached copy is reused. The file
is always rewritten whole, through a temporary file and an atomic rename,
so an interrupted write leaves the previous cache intact.
"""

import contextlib
import json
import logging
import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from shuffler.models.playable import (
    CachedPlaylist,
    PlayableId,
    from_serializable,
    to_serializable,
)

logger = logging.getLogger(__name__)

CacheStore = Dict[str, CachedPlaylist]

_STORE_ADAPTER = TypeAdapter(CacheStore)

_AGE_UNITS = (
    ("d", 86400),
    ("h", 3600),
    ("m", 60),
    ("s", 1),
)


class PlaylistCacheError(Exception):
    """Base exception for playlist cache operations."""
    pass


class CachePersistenceError(PlaylistCacheError):
    """Raised when the cache file cannot be written."""
    pass


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_age(age: timedelta) -> str:
    """
    Render an age the way a person would say it, e.g. ``"2h 5m 3s"``.

    Negative ages render as ``"0s"``.
    """
    remaining = max(int(age.total_seconds()), 0)
    parts = []
    for suffix, size in _AGE_UNITS:
        count, remaining = divmod(remaining, size)
        if count:
            parts.append(f"{count}{suffix}")
    return " ".join(parts) or "0s"


class PlaylistCacheStore:
    """
    File-backed cache of playlist contents.

    Example:
        cache = PlaylistCacheStore(paths.playlist_cache_file, confirm=ask_user)
        items = cache.lookup_and_decide(playlist_id, None, cache.load())
        if items is None:
            ...  # fetch, then cache.save(playlist_id, fetched)
    """

    def __init__(
        self,
        cache_path: Path,
        confirm: Optional[Callable[[str], bool]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the cache store.

        Args:
            cache_path: JSON file holding the whole cache.
            confirm: Asked with the formatted age of a cached entry when the
                caller did not say whether to use the cache.
            clock: Returns the current UTC time. Defaults to the system clock.
        """
        self._path = Path(cache_path)
        self._confirm = confirm
        self._clock = clock or utc_now

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> CacheStore:
        """
        Read every cached playlist.

        A missing, unreadable or corrupt file yields an empty store. Entries
        that fail validation are dropped individually.
        """
        try:
            with open(self._path, "r", encoding="utf-8") as fh:
                raw = json.load(fh)
        except FileNotFoundError:
            logger.debug("No playlist cache at %s", self._path)
            return {}
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable playlist cache %s: %s", self._path, e)
            return {}

        if not isinstance(raw, dict):
            logger.warning("Ignoring playlist cache %s: not a JSON object", self._path)
            return {}

        store: CacheStore = {}
        for playlist_id, entry in raw.items():
            try:
                store[playlist_id] = CachedPlaylist.model_validate(entry)
            except ValidationError as e:
                logger.warning(
                    "Dropping invalid cache entry for playlist %s: %s",
                    playlist_id, e.errors()[0].get("msg", e),
                )

        logger.debug("Loaded %d cached playlists from %s", len(store), self._path)
        return store

    def lookup_and_decide(
        self,
        playlist_id: str,
        use_cache: Optional[bool],
        store: CacheStore,
    ) -> Optional[List[PlayableId]]:
        """
        Return the cached items for a playlist if they should be used.

        Args:
            playlist_id: The Spotify playlist ID.
            use_cache: True/False to decide without asking; None to ask the
                confirm callback with the entry's age.
            store: A store returned by ``load``.

        Returns:
            The cached items in their stored order, or None when there is no
            entry or its use was declined.

        Raises:
            MalformedIdentifierError: If any cached id is invalid. Nothing
                from the entry is used in that case.
        """
        record = store.get(playlist_id)
        if record is None:
            logger.debug("Cache miss for playlist %s", playlist_id)
            return None

        age = self._age_of(record)
        if use_cache is None:
            if self._confirm is None:
                logger.debug("No confirmation available, ignoring cached playlist")
                return None
            use_cache = bool(self._confirm(format_age(age)))

        if not use_cache:
            logger.info("Cached copy of playlist %s declined", playlist_id)
            return None

        items = [from_serializable(item) for item in record.items]
        logger.info(
            "Using %d cached items for playlist %s (age %s)",
            len(items), playlist_id, format_age(age),
        )
        return items

    def save(self, playlist_id: str, items: Sequence[PlayableId]) -> CachedPlaylist:
        """
        Store ``items`` as the current contents of a playlist.

        The existing file is re-read so entries for other playlists survive,
        then the whole store is written back.

        Returns:
            The record that was written.

        Raises:
            CachePersistenceError: If the cache file cannot be written.
        """
        record = CachedPlaylist(
            items=[to_serializable(item) for item in items],
            fetched_at=self._clock(),
        )

        store = self.load()
        store[playlist_id] = record
        self._write(store)

        logger.info(
            "Cached %d items for playlist %s at %s",
            len(record.items), playlist_id, self._path,
        )
        return record

    def _age_of(self, record: CachedPlaylist) -> timedelta:
        fetched_at = record.fetched_at
        if fetched_at.tzinfo is None:
            fetched_at = fetched_at.replace(tzinfo=timezone.utc)
        return max(self._clock() - fetched_at, timedelta(0))

    def _write(self, store: CacheStore) -> None:
        payload = _STORE_ADAPTER.dump_json(store, indent=2)
        tmp_path = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "wb",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as fh:
                tmp_path = fh.name
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self._path)
        except OSError as e:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_path)
            logger.error("Failed to write playlist cache %s: %s", self._path, e)
            raise CachePersistenceError(
                f"Failed to write playlist cache {self._path}: {e}"
            ) from e
