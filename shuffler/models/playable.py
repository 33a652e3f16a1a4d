"""
Playable item identifiers and the cached playlist record.

A ``PlayableId`` is what the rest of the program passes around: a validated
track or episode id that knows how to render itself as a Spotify URI.
``SerializedPlayable`` and ``CachedPlaylist`` are the shapes written to the
cache file. They are deliberately lenient on load; ids are only checked when
they are turned back into ``PlayableId`` values.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from shuffler.enums import PlayableKind
from shuffler.spotify.url_parser import is_valid_spotify_id


class MalformedIdentifierError(ValueError):
    """Raised when an id is not a valid Spotify id for its kind."""

    def __init__(self, kind: PlayableKind, value: str):
        super().__init__(f"Invalid {kind} id: {value!r}")
        self.kind = kind
        self.value = value


@dataclass(frozen=True)
class PlayableId:
    """A track or episode reference, independent of any API session."""

    kind: PlayableKind
    id: str

    def __post_init__(self):
        if not is_valid_spotify_id(self.id):
            raise MalformedIdentifierError(self.kind, self.id)

    @property
    def uri(self) -> str:
        """The ``spotify:<kind>:<id>`` form accepted by the Web API."""
        return f"spotify:{self.kind.value}:{self.id}"

    @classmethod
    def track(cls, track_id: str) -> "PlayableId":
        return cls(PlayableKind.TRACK, track_id)

    @classmethod
    def episode(cls, episode_id: str) -> "PlayableId":
        return cls(PlayableKind.EPISODE, episode_id)

    def __str__(self) -> str:
        return self.uri


class SerializedPlayable(BaseModel):
    """Cache-file form of a ``PlayableId``."""

    id: str
    kind: PlayableKind


class CachedPlaylist(BaseModel):
    """Items of a playlist as they were when it was last fetched."""

    items: List[SerializedPlayable] = Field(default_factory=list)
    fetched_at: datetime


def to_serializable(playable: PlayableId) -> SerializedPlayable:
    """Flatten a ``PlayableId`` for the cache file."""
    if playable.kind is PlayableKind.TRACK:
        return SerializedPlayable(id=playable.id, kind=PlayableKind.TRACK)
    elif playable.kind is PlayableKind.EPISODE:
        return SerializedPlayable(id=playable.id, kind=PlayableKind.EPISODE)
    raise AssertionError(f"Unhandled playable kind: {playable.kind!r}")


def from_serializable(record: SerializedPlayable) -> PlayableId:
    """
    Rebuild a ``PlayableId`` from its cache-file form.

    Raises:
        MalformedIdentifierError: If the stored id is not valid for its kind.
    """
    if record.kind is PlayableKind.TRACK:
        return PlayableId.track(record.id)
    elif record.kind is PlayableKind.EPISODE:
        return PlayableId.episode(record.id)
    raise AssertionError(f"Unhandled playable kind: {record.kind!r}")
