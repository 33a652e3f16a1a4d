"""
Spotify API data operations.

Thin wrapper over ``spotipy.Spotify`` exposing exactly the calls shuffler
needs: paging through playlists and playlist items, reading a playlist's
size, and creating and filling the shuffled copy. Every call goes through
``api_error_handler`` so callers only ever see ``SpotifyError`` subclasses.
"""

import logging
from typing import Callable, Dict, List, Any, Optional

import spotipy

from .auth import TokenInfo, SpotifyAuthManager
from .error_handling import api_error_handler
from .exceptions import SpotifyTokenExpiredError

logger = logging.getLogger(__name__)

# Silence spotipy's verbose logging
logging.getLogger("spotipy").setLevel(logging.WARNING)

# Playlist items are requested as both tracks and episodes so podcast
# episodes come back with their real type instead of a track stand-in.
PLAYABLE_TYPES = ("track", "episode")

_ITEM_FIELDS = "items(track(id,type,uri,is_local)),total,next"


class SpotifyAPI:
    """
    Spotify Web API client for data operations.

    Token refresh is delegated to the auth manager; when a refresh happens
    the optional ``on_token_refresh`` callback receives the new token so it
    can be persisted.

    Example:
        auth_manager = SpotifyAuthManager(credentials)
        api = SpotifyAPI(token_info, auth_manager, on_token_refresh=store)
        page = api.get_playlist_items_page(playlist_id, offset=0, limit=50)
    """

    # Maximum number of items accepted by a single add-items request
    BATCH_SIZE = 100

    def __init__(
        self,
        token_info: TokenInfo,
        auth_manager: Optional[SpotifyAuthManager] = None,
        auto_refresh: bool = True,
        on_token_refresh: Optional[Callable[[TokenInfo], None]] = None,
    ):
        """
        Initialize the API client.

        Args:
            token_info: TokenInfo with an access token.
            auth_manager: Optional auth manager for token refresh.
            auto_refresh: Whether to automatically refresh expired tokens.
            on_token_refresh: Called with the new token after a refresh.

        Raises:
            SpotifyTokenExpiredError: If token is expired and cannot be refreshed.
        """
        self._auth_manager = auth_manager
        self._auto_refresh = auto_refresh and auth_manager is not None
        self._on_token_refresh = on_token_refresh
        self._token_info = token_info
        self._user_id: Optional[str] = None

        self._ensure_valid_token()
        self._sp = spotipy.Spotify(auth=self._token_info.access_token)
        logger.debug("SpotifyAPI initialized with valid token")

    @property
    def token_info(self) -> TokenInfo:
        """Get the current token info (may have been refreshed)."""
        return self._token_info

    def _ensure_valid_token(self) -> None:
        """
        Ensure the token is valid, refreshing if necessary.

        Raises:
            SpotifyTokenExpiredError: If token cannot be made valid.
        """
        if not self._token_info.is_expired:
            return

        if not self._auto_refresh:
            raise SpotifyTokenExpiredError("Token expired and auto-refresh disabled")

        logger.info("Token expired, refreshing...")
        self._token_info = self._auth_manager.ensure_valid_token(self._token_info)
        self._sp = spotipy.Spotify(auth=self._token_info.access_token)
        if self._on_token_refresh:
            self._on_token_refresh(self._token_info)

    # =========================================================================
    # User Operations
    # =========================================================================

    @api_error_handler
    def get_current_user(self) -> Dict[str, Any]:
        """
        Get the current user's profile.

        Raises:
            SpotifyAPIError: If the request fails.
        """
        self._ensure_valid_token()
        user = self._sp.current_user()
        self._user_id = user["id"]
        logger.debug("Retrieved user: %s", user.get("display_name", "Unknown"))
        return user

    def get_user_id(self) -> str:
        """Get the current user's ID, caching the result."""
        if self._user_id is None:
            self.get_current_user()
        return self._user_id

    # =========================================================================
    # Playlist Operations
    # =========================================================================

    @api_error_handler
    def get_user_playlists_page(self, offset: int = 0, limit: int = 50) -> Dict[str, Any]:
        """
        Get one page of the current user's playlists.

        Returns:
            Paging object with ``items``, ``total`` and ``next``.

        Raises:
            SpotifyAPIError: If the request fails.
        """
        self._ensure_valid_token()
        page = self._sp.current_user_playlists(limit=limit, offset=offset)
        logger.debug(
            "Retrieved %d playlists at offset %d", len(page.get("items") or []), offset
        )
        return page

    @api_error_handler
    def get_playlist(self, playlist_id: str) -> Dict[str, Any]:
        """
        Get a single playlist's metadata.

        Raises:
            SpotifyNotFoundError: If playlist doesn't exist.
            SpotifyAPIError: If the request fails.
        """
        self._ensure_valid_token()
        playlist = self._sp.playlist(
            playlist_id,
            fields="id,name,owner(id),tracks(total)",
            additional_types=PLAYABLE_TYPES,
        )
        logger.debug("Retrieved playlist: %s", playlist.get("name", "Unknown"))
        return playlist

    @api_error_handler
    def get_playlist_total(self, playlist_id: str) -> int:
        """
        Get the number of items the server reports for a playlist.

        Raises:
            SpotifyNotFoundError: If playlist doesn't exist.
            SpotifyAPIError: If the request fails.
        """
        self._ensure_valid_token()
        playlist = self._sp.playlist(
            playlist_id, fields="tracks(total)", additional_types=PLAYABLE_TYPES
        )
        meta = playlist.get("tracks") or playlist.get("items") or {}
        return int(meta.get("total") or 0)

    @api_error_handler
    def get_playlist_items_page(
        self, playlist_id: str, offset: int = 0, limit: int = 50
    ) -> Dict[str, Any]:
        """
        Get one page of a playlist's items.

        Args:
            playlist_id: The Spotify playlist ID.
            offset: Index of the first item to return.
            limit: Maximum number of items to return (1-100).

        Returns:
            Paging object whose ``items`` each carry a ``track`` payload
            (a track or an episode, or None for unavailable items).

        Raises:
            SpotifyAPIError: If the request fails.
        """
        self._ensure_valid_token()
        return self._sp.playlist_items(
            playlist_id,
            fields=_ITEM_FIELDS,
            limit=limit,
            offset=offset,
            additional_types=PLAYABLE_TYPES,
        )

    @api_error_handler
    def create_playlist(
        self,
        name: str,
        public: bool = False,
        collaborative: bool = False,
        description: str = "",
    ) -> Dict[str, Any]:
        """
        Create a playlist owned by the current user.

        Returns:
            The new playlist object.

        Raises:
            SpotifyAPIError: If the request fails.
        """
        self._ensure_valid_token()
        user_id = self.get_user_id()
        playlist = self._sp.user_playlist_create(
            user_id,
            name,
            public=public,
            collaborative=collaborative,
            description=description,
        )
        logger.info("Created playlist %s (%s)", name, playlist.get("id"))
        return playlist

    @api_error_handler
    def add_items(
        self, playlist_id: str, uris: List[str], position: Optional[int] = None
    ) -> List[str]:
        """
        Add items to a playlist in batches of BATCH_SIZE.

        Args:
            playlist_id: The Spotify playlist ID.
            uris: Track or episode URIs in the desired order.
            position: Insert position of the first item; None appends.

        Returns:
            Snapshot IDs returned for each batch.

        Raises:
            SpotifyAPIError: If the request fails.
        """
        self._ensure_valid_token()
        snapshots = []
        for i in range(0, len(uris), self.BATCH_SIZE):
            batch = uris[i : i + self.BATCH_SIZE]
            batch_position = None if position is None else position + i
            result = self._sp.playlist_add_items(playlist_id, batch, position=batch_position)
            snapshots.append(result.get("snapshot_id") if result else None)

        logger.info("Added %d items to playlist %s", len(uris), playlist_id)
        return snapshots
