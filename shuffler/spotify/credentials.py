"""
Spotify client credentials.

The command-line flow needs the client ID, secret and redirect URI of a
Spotify app the user registered themselves. They come from the environment
(optionally via a ``.env`` file) or from the credentials file written on the
first run.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .exceptions import SpotifyCredentialsError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpotifyCredentials:
    """
    Immutable container for Spotify OAuth credentials.

    Attributes:
        client_id: The Spotify application client ID.
        client_secret: The Spotify application client secret.
        redirect_uri: The OAuth callback URL registered for the app.

    Example:
        credentials = SpotifyCredentials.from_env()
        if credentials is None:
            credentials = SpotifyCredentials.from_file(paths.credentials_file)
    """

    client_id: str
    client_secret: str
    redirect_uri: str

    def __post_init__(self):
        """Validate credentials on creation."""
        if not self.client_id:
            raise ValueError("client_id is required")
        if not self.client_secret:
            raise ValueError("client_secret is required")
        if not self.redirect_uri:
            raise ValueError("redirect_uri is required")

    @classmethod
    def from_env(cls) -> Optional["SpotifyCredentials"]:
        """
        Create credentials from environment variables.

        Returns:
            SpotifyCredentials, or None if any variable is unset.
        """
        try:
            return cls(
                client_id=os.getenv("SPOTIFY_CLIENT_ID", ""),
                client_secret=os.getenv("SPOTIFY_CLIENT_SECRET", ""),
                redirect_uri=os.getenv("SPOTIFY_REDIRECT_URI", ""),
            )
        except ValueError:
            return None

    @classmethod
    def from_file(cls, path: Path) -> Optional["SpotifyCredentials"]:
        """
        Load credentials saved by ``save``.

        Returns:
            SpotifyCredentials, or None if the file is missing or incomplete.
        """
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read credentials file %s: %s", path, e)
            return None

        if not isinstance(data, dict):
            return None

        try:
            return cls(
                client_id=data.get("id", ""),
                client_secret=data.get("secret", ""),
                redirect_uri=data.get("redirect_uri", ""),
            )
        except ValueError as e:
            logger.warning("Ignoring incomplete credentials file %s: %s", path, e)
            return None

    def save(self, path: Path) -> None:
        """
        Write credentials to ``path``, readable by the owner only.

        Raises:
            SpotifyCredentialsError: If the file cannot be written.
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as fh:
                json.dump(self.to_dict(), fh, indent=2)
            os.chmod(path, 0o600)
        except OSError as e:
            raise SpotifyCredentialsError(
                f"Could not save credentials to {path}: {e}"
            ) from e
        logger.info("Saved Spotify credentials to %s", path)

    def to_dict(self) -> dict:
        return {
            "id": self.client_id,
            "secret": self.client_secret,
            "redirect_uri": self.redirect_uri,
        }
