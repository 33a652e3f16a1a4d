"""
Enums shared by the models, the cache file and the API layer.
"""

from enum import StrEnum


class PlayableKind(StrEnum):
    """Kinds of item a playlist can hold."""
    TRACK = "track"
    EPISODE = "episode"
