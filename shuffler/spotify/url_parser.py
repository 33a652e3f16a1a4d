"""
Spotify URL and URI parser utility.

Extracts playlist IDs from the formats a user is likely to paste on the
command line, and validates bare IDs for any resource type.
"""

import re
import logging
from typing import Optional

logger = logging.getLogger(__name__)

# Spotify base62 ID format: 22 alphanumeric characters
SPOTIFY_ID_PATTERN = re.compile(r"[a-zA-Z0-9]{22}")

# Patterns for extracting playlist ID from various URL formats
_URL_PATTERNS = [
    # https://open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M?si=abc123
    # open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M
    re.compile(
        r"(?:https?://)?open\.spotify\.com/(?:intl-[a-z]{2}/)?playlist/"
        r"([a-zA-Z0-9]{22})/?(?:\?.*)?$"
    ),
    # spotify:playlist:37i9dQZF1DXcBWIGoYBM5M
    re.compile(r"^spotify:playlist:([a-zA-Z0-9]{22})$"),
]


def is_valid_spotify_id(value: str) -> bool:
    """Return True if ``value`` is a bare 22-character base62 Spotify ID."""
    if not isinstance(value, str):
        return False
    return SPOTIFY_ID_PATTERN.fullmatch(value) is not None


def parse_spotify_playlist_url(input_string: str) -> Optional[str]:
    """
    Extract a Spotify playlist ID from a URL, URI, or bare ID.

    Supports these formats:
        - https://open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M
        - https://open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M?si=abc123
        - https://open.spotify.com/intl-de/playlist/37i9dQZF1DXcBWIGoYBM5M
        - open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M
        - spotify:playlist:37i9dQZF1DXcBWIGoYBM5M
        - 37i9dQZF1DXcBWIGoYBM5M  (bare ID)

    Args:
        input_string: The URL, URI, or ID to parse.

    Returns:
        The 22-character playlist ID, or None if the input
        does not match any known format.
    """
    if not input_string or not isinstance(input_string, str):
        return None

    cleaned = input_string.strip()
    if not cleaned:
        return None

    if is_valid_spotify_id(cleaned):
        logger.debug("Parsed bare playlist ID: %s", cleaned)
        return cleaned

    for pattern in _URL_PATTERNS:
        match = pattern.match(cleaned)
        if match:
            playlist_id = match.group(1)
            logger.debug("Parsed playlist ID from URL/URI: %s", playlist_id)
            return playlist_id

    logger.debug("Could not parse playlist ID from: %r", cleaned)
    return None
