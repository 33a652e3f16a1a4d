from typing import Dict, Any, Optional
from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)


@dataclass
class Playlist:
    """A playlist as shown in the selection menu and used as a shuffle source."""

    id: str
    name: str
    owner_id: Optional[str] = None
    total_tracks: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.id:
            logger.error("Playlist ID is required")
            raise ValueError("Playlist ID is required")

    @classmethod
    def from_spotify(cls, playlist_data: Dict[str, Any]) -> "Playlist":
        """Build a Playlist from a Web API playlist object (full or simplified)."""
        total_tracks_meta = playlist_data.get(
            "tracks", playlist_data.get("items", {})
        )
        total_tracks = (
            total_tracks_meta.get("total")
            if isinstance(total_tracks_meta, dict)
            else None
        )

        return cls(
            id=playlist_data["id"],
            name=playlist_data.get("name") or "",
            owner_id=(playlist_data.get("owner") or {}).get("id"),
            total_tracks=total_tracks,
        )

    def __str__(self) -> str:
        if self.total_tracks is None:
            return f"{self.name} ({self.id})"
        return f"{self.name} ({self.id}) - {self.total_tracks} tracks"
