"""
Playlist service for the source and destination playlists.

Resolves the playlist to shuffle (from a command-line reference or by
listing the user's playlists) and publishes the shuffled copy.
"""

import logging
from typing import List, Sequence

from shuffler.config import AppInfo
from shuffler.models.playable import PlayableId
from shuffler.models.playlist import Playlist
from shuffler.spotify.api import SpotifyAPI
from shuffler.spotify.exceptions import SpotifyError, SpotifyNotFoundError
from shuffler.spotify.url_parser import parse_spotify_playlist_url

logger = logging.getLogger(__name__)

# Consecutive failed listing pages after which listing stops
MAX_CONSECUTIVE_PAGE_FAILURES = 3


class PlaylistError(Exception):
    """Base exception for playlist operations."""
    pass


class PlaylistNotFoundError(PlaylistError):
    """Raised when a playlist cannot be found."""
    pass


class PlaylistPublishError(PlaylistError):
    """Raised when the shuffled playlist cannot be created or filled."""
    pass


def build_description(source_name: str, app_info: AppInfo) -> str:
    """Description attached to the shuffled copy."""
    return (
        f"True shuffle of {source_name}, created with {app_info.name} "
        f"{app_info.homepage}"
    )


class PlaylistService:
    """Service for Spotify playlist lookups and publishing."""

    def __init__(self, api: SpotifyAPI):
        """
        Initialize the playlist service.

        Args:
            api: An authenticated SpotifyAPI instance.
        """
        self._api = api

    def resolve_playlist(self, reference: str) -> Playlist:
        """
        Look up a playlist from an ID, URI or open.spotify.com URL.

        Raises:
            PlaylistNotFoundError: If the reference is invalid or the
                playlist does not exist.
            PlaylistError: If the lookup fails for other reasons.
        """
        playlist_id = parse_spotify_playlist_url(reference)
        if playlist_id is None:
            raise PlaylistNotFoundError(f"Invalid playlist ID: {reference!r}")

        try:
            playlist = Playlist.from_spotify(self._api.get_playlist(playlist_id))
        except SpotifyNotFoundError:
            raise PlaylistNotFoundError(f"Playlist not found: {playlist_id}")
        except SpotifyError as e:
            logger.error("Failed to get playlist %s: %s", playlist_id, e)
            raise PlaylistError(f"Could not get source playlist info: {e}")

        logger.debug("Resolved playlist %s", playlist)
        return playlist

    def list_user_playlists(self, limit: int = 5) -> List[Playlist]:
        """
        Fetch all playlists in the user's library, ``limit`` at a time.

        A page that fails is skipped and listing continues with the next
        one; listing ends at the first short page, or after
        MAX_CONSECUTIVE_PAGE_FAILURES failed pages in a row.

        Raises:
            ValueError: If limit is not between 1 and 50.
        """
        if not 1 <= limit <= 50:
            raise ValueError("limit must be between 1 and 50")

        playlists: List[Playlist] = []
        offset = 0
        failures = 0

        while True:
            try:
                page = self._api.get_user_playlists_page(offset=offset, limit=limit)
            except SpotifyError as e:
                failures += 1
                logger.warning(
                    "Error fetching playlists at offset %d, skipping to next batch: %s",
                    offset, e,
                )
                if failures >= MAX_CONSECUTIVE_PAGE_FAILURES:
                    logger.error("Giving up listing playlists after %d failed pages", failures)
                    break
                offset += limit
                continue

            failures = 0
            items = page.get("items") or []
            for item in items:
                if item and item.get("id"):
                    playlists.append(Playlist.from_spotify(item))

            if len(items) < limit:
                break
            offset += limit

        logger.debug("Retrieved %d user playlists", len(playlists))
        return playlists

    def create_shuffled_playlist(self, name: str, description: str) -> Playlist:
        """
        Create the private destination playlist.

        Raises:
            PlaylistPublishError: If the playlist cannot be created.
        """
        try:
            data = self._api.create_playlist(
                name, public=False, collaborative=False, description=description
            )
        except SpotifyError as e:
            logger.error("Failed to create playlist %r: %s", name, e)
            raise PlaylistPublishError(f"Failed to create playlist: {e}")
        return Playlist.from_spotify(data)

    def fill_playlist(self, playlist_id: str, items: Sequence[PlayableId]) -> None:
        """
        Add ``items`` to the top of a playlist, in order.

        Raises:
            PlaylistPublishError: If the items cannot be added.
        """
        if not items:
            logger.warning("Nothing to add to playlist %s", playlist_id)
            return

        try:
            self._api.add_items(playlist_id, [item.uri for item in items], position=0)
        except SpotifyError as e:
            logger.error("Failed to fill playlist %s: %s", playlist_id, e)
            raise PlaylistPublishError(f"Failed to add items to playlist: {e}")
