"""
Request validation schemas using Pydantic.

Command-line arguments are collected into a ShuffleRequest so every
invalid value is reported before anything talks to Spotify.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shuffler.config import DEFAULT_PAGE_SIZE
from shuffler.spotify.url_parser import parse_spotify_playlist_url


class ShuffleRequest(BaseModel):
    """What to shuffle, where to put it, and how to fetch it."""

    model_config = ConfigDict(extra="ignore")

    source: Optional[str] = Field(
        default=None, description="Playlist ID, URI or URL to shuffle"
    )
    destination_name: Optional[str] = Field(
        default=None, description="Name of the playlist to create"
    )
    use_cache: Optional[bool] = None
    page_size: Annotated[int, Field(ge=1, le=100)] = DEFAULT_PAGE_SIZE
    playlist_limit: Optional[Annotated[int, Field(ge=1, le=50)]] = None

    @field_validator("source")
    @classmethod
    def validate_source(cls, v: Optional[str]) -> Optional[str]:
        """Normalize the source to a bare playlist ID."""
        if v is None:
            return None
        playlist_id = parse_spotify_playlist_url(v)
        if playlist_id is None:
            raise ValueError(f"Invalid playlist ID: {v!r}")
        return playlist_id

    @field_validator("destination_name")
    @classmethod
    def validate_destination_name(cls, v: Optional[str]) -> Optional[str]:
        """Ensure a given playlist name is not blank."""
        if v is None:
            return None
        if not v.strip():
            raise ValueError("Playlist name cannot be empty")
        return v.strip()
