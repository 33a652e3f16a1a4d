"""
Shuffler Models Package.

Usage:
    from shuffler.models import PlayableId, CachedPlaylist, Playlist
"""

from shuffler.models.playable import (
    MalformedIdentifierError,
    PlayableId,
    SerializedPlayable,
    CachedPlaylist,
    to_serializable,
    from_serializable,
)
from shuffler.models.playlist import Playlist

__all__ = [
    "MalformedIdentifierError",
    "PlayableId",
    "SerializedPlayable",
    "CachedPlaylist",
    "to_serializable",
    "from_serializable",
    "Playlist",
]
