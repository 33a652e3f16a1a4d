"""
Shuffler Services Package

Usage:
    from shuffler.services import PlaylistCacheStore, PlaylistContentFetcher

    cache = PlaylistCacheStore(paths.playlist_cache_file, confirm=ask)
    items = cache.lookup_and_decide(playlist_id, use_cache, cache.load())
    if items is None:
        items = PlaylistContentFetcher(api, cache).fetch(playlist_id).items
"""

# Auth Service
from shuffler.services.auth_service import (
    AuthService,
    AuthenticationError,
)

# Playlist Cache Service
from shuffler.services.playlist_cache_service import (
    PlaylistCacheStore,
    PlaylistCacheError,
    CachePersistenceError,
    format_age,
)

# Playlist Content Service
from shuffler.services.playlist_content_service import (
    PlaylistContentFetcher,
    FetchResult,
    NullProgress,
    ProgressReporter,
)

# Playlist Service
from shuffler.services.playlist_service import (
    PlaylistService,
    PlaylistError,
    PlaylistNotFoundError,
    PlaylistPublishError,
)

# Shuffle Service
from shuffler.services.shuffle_service import (
    ShuffleService,
    ShuffleError,
)

__all__ = [
    # Auth
    "AuthService",
    "AuthenticationError",
    # Playlist cache
    "PlaylistCacheStore",
    "PlaylistCacheError",
    "CachePersistenceError",
    "format_age",
    # Playlist content
    "PlaylistContentFetcher",
    "FetchResult",
    "NullProgress",
    "ProgressReporter",
    # Playlist
    "PlaylistService",
    "PlaylistError",
    "PlaylistNotFoundError",
    "PlaylistPublishError",
    # Shuffle
    "ShuffleService",
    "ShuffleError",
]
