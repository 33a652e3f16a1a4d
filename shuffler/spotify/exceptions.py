"""
Exceptions raised by the Spotify layer.

Everything the API wrapper and the auth manager raise derives from
``SpotifyError``, so callers that only need to know "the remote side failed"
can catch that single class.
"""

from typing import Optional


class SpotifyError(Exception):
    """Base exception for all Spotify-related errors."""
    pass


class SpotifyAuthError(SpotifyError):
    """Raised when the user cannot be authorized."""
    pass


class SpotifyCredentialsError(SpotifyAuthError):
    """Raised when client credentials are missing or unusable."""
    pass


class SpotifyTokenError(SpotifyAuthError):
    """Raised when a token cannot be exchanged, refreshed or parsed."""
    pass


class SpotifyTokenExpiredError(SpotifyTokenError):
    """Raised when a token has expired and cannot be refreshed."""
    pass


class SpotifyAPIError(SpotifyError):
    """Raised when a Web API call fails."""

    def __init__(self, message: str, http_status: Optional[int] = None):
        super().__init__(message)
        self.http_status = http_status


class SpotifyRateLimitError(SpotifyAPIError):
    """Raised when still rate limited after all retries."""

    def __init__(self, message: str, retry_after: Optional[int] = None):
        super().__init__(message, http_status=429)
        self.retry_after = retry_after


class SpotifyNotFoundError(SpotifyAPIError):
    """Raised when a playlist or item does not exist."""

    def __init__(self, message: str):
        super().__init__(message, http_status=404)
