"""
Spotify API integration module.

Architecture:
    - credentials.py: SpotifyCredentials (environment or credentials file)
    - auth.py: SpotifyAuthManager, TokenInfo and the token file helpers
    - api.py: SpotifyAPI for data operations
    - error_handling.py: retry/backoff decorator used by SpotifyAPI
    - url_parser.py: playlist URL/URI parsing and ID validation
    - exceptions.py: Exception hierarchy

Usage:
    from shuffler.spotify import (
        SpotifyCredentials,
        SpotifyAuthManager,
        SpotifyAPI,
        load_token,
    )

    credentials = SpotifyCredentials.from_env()
    auth_manager = SpotifyAuthManager(credentials)
    api = SpotifyAPI(load_token(token_path), auth_manager)
    page = api.get_playlist_items_page(playlist_id, offset=0, limit=50)
"""

from .credentials import SpotifyCredentials

from .auth import (
    SpotifyAuthManager,
    TokenInfo,
    DEFAULT_SCOPES,
    load_token,
    save_token,
)

from .api import SpotifyAPI

from .url_parser import parse_spotify_playlist_url, is_valid_spotify_id

from .exceptions import (
    SpotifyError,
    SpotifyAuthError,
    SpotifyCredentialsError,
    SpotifyTokenError,
    SpotifyTokenExpiredError,
    SpotifyAPIError,
    SpotifyRateLimitError,
    SpotifyNotFoundError,
)


__all__ = [
    # Credentials
    'SpotifyCredentials',

    # Auth
    'SpotifyAuthManager',
    'TokenInfo',
    'DEFAULT_SCOPES',
    'load_token',
    'save_token',

    # API
    'SpotifyAPI',

    # URL parsing
    'parse_spotify_playlist_url',
    'is_valid_spotify_id',

    # Exceptions
    'SpotifyError',
    'SpotifyAuthError',
    'SpotifyCredentialsError',
    'SpotifyTokenError',
    'SpotifyTokenExpiredError',
    'SpotifyAPIError',
    'SpotifyRateLimitError',
    'SpotifyNotFoundError',
]
