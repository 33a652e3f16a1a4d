"""
Spotify authentication and token management.

Handles the authorization-code flow for a terminal program: building the
authorize URL, reading the code back out of the URL the user pastes after
approving access, exchanging and refreshing tokens, and keeping the token
in a JSON file between runs.
"""

import json
import logging
import os
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Any, Optional
from urllib.parse import urlencode, urlparse, parse_qs

import requests

from .credentials import SpotifyCredentials
from .exceptions import SpotifyAuthError, SpotifyTokenError

logger = logging.getLogger(__name__)


# Scopes needed to read the source playlist and write the shuffled copy
DEFAULT_SCOPES = [
    "playlist-read-private",
    "playlist-read-collaborative",
    "playlist-modify-private",
    "playlist-modify-public",
]

# Tokens this close to expiry are treated as expired
EXPIRY_MARGIN_SECONDS = 60


@dataclass
class TokenInfo:
    """
    An access token plus what is needed to renew it.

    ``expires_at`` is an absolute UNIX timestamp so the token file stays
    meaningful between runs.
    """

    access_token: str
    token_type: str
    expires_at: float
    refresh_token: Optional[str] = None
    scope: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenInfo":
        """
        Build a TokenInfo from a token endpoint response or the token file.

        Raises:
            SpotifyTokenError: If the data is not a token object.
        """
        if not isinstance(data, dict):
            raise SpotifyTokenError(
                f"Expected a token object, got {type(data).__name__}"
            )

        missing = sorted({"access_token", "token_type"} - data.keys())
        if missing:
            raise SpotifyTokenError(f"Token is missing {', '.join(missing)}")

        expires_at = data.get("expires_at")
        if expires_at is None:
            expires_at = time.time() + int(data.get("expires_in", 3600))

        return cls(
            access_token=data["access_token"],
            token_type=data["token_type"],
            expires_at=float(expires_at),
            refresh_token=data.get("refresh_token"),
            scope=data.get("scope"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}

    @property
    def is_expired(self) -> bool:
        """True once the token is within EXPIRY_MARGIN_SECONDS of expiring."""
        return time.time() >= self.expires_at - EXPIRY_MARGIN_SECONDS



def load_token(path: Path) -> Optional[TokenInfo]:
    """
    Read a token saved by ``save_token``.

    Returns:
        TokenInfo, or None if there is no usable token file.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError:
        logger.debug("No token file at %s", path)
        return None
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Ignoring unreadable token file %s: %s", path, e)
        return None

    try:
        return TokenInfo.from_dict(data)
    except SpotifyTokenError as e:
        logger.warning("Ignoring invalid token file %s: %s", path, e)
        return None


def save_token(path: Path, token_info: TokenInfo) -> None:
    """
    Write the token to ``path``, readable by the owner only.

    Raises:
        SpotifyTokenError: If the file cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(token_info.to_dict(), fh, indent=2)
        os.chmod(path, 0o600)
    except OSError as e:
        raise SpotifyTokenError(f"Could not save token to {path}: {e}") from e
    logger.debug("Saved token to %s", path)


class SpotifyAuthManager:
    """
    Authorization-code flow against the Spotify accounts service.

    Holds only the app credentials; tokens are passed in and returned.

    Example:
        auth_manager = SpotifyAuthManager(credentials)

        # Ask the user to open this and paste back where they land
        auth_url = auth_manager.get_auth_url(state)
        code = auth_manager.parse_response_url(pasted_url, state)
        token_info = auth_manager.exchange_code(code)

        # Later runs
        token_info = auth_manager.ensure_valid_token(token_info)
    """

    _AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
    _TOKEN_URL = "https://accounts.spotify.com/api/token"
    _REQUEST_TIMEOUT = 30

    def __init__(self, credentials: SpotifyCredentials, scopes: Optional[list] = None):
        """
        Initialize the auth manager.

        Args:
            credentials: SpotifyCredentials instance with OAuth credentials.
            scopes: Optional list of OAuth scopes. Defaults to DEFAULT_SCOPES.
        """
        self._credentials = credentials
        self._scopes = scopes or DEFAULT_SCOPES
        self._scope_string = " ".join(self._scopes)

    @property
    def credentials(self) -> SpotifyCredentials:
        return self._credentials

    def get_auth_url(self, state: Optional[str] = None) -> str:
        """
        Generate the Spotify authorization URL.

        Args:
            state: Optional state parameter echoed back on redirect.

        Returns:
            The authorization URL the user should open.
        """
        params = {
            "client_id": self._credentials.client_id,
            "response_type": "code",
            "redirect_uri": self._credentials.redirect_uri,
            "scope": self._scope_string,
        }
        if state:
            params["state"] = state

        url = f"{self._AUTHORIZE_URL}?{urlencode(params)}"
        logger.debug("Generated auth URL: %s...", url[:50])
        return url

    def parse_response_url(self, response_url: str, state: Optional[str] = None) -> str:
        """
        Pull the authorization code out of the URL Spotify redirected to.

        Args:
            response_url: The full URL from the browser's address bar.
            state: The state passed to ``get_auth_url``, if any.

        Returns:
            The authorization code.

        Raises:
            SpotifyAuthError: If access was denied, the state does not
                match, or the URL carries no code.
        """
        query = parse_qs(urlparse((response_url or "").strip()).query)

        if "error" in query:
            raise SpotifyAuthError(
                f"Authorization was denied: {query['error'][0]}"
            )
        if state is not None and query.get("state", [None])[0] != state:
            raise SpotifyAuthError(
                "State mismatch in redirect URL. Make sure you pasted the "
                "URL from this login attempt."
            )

        code = query.get("code", [None])[0]
        if not code:
            raise SpotifyAuthError(
                "No authorization code found. Make sure you pasted the full "
                "URL from your browser, with the URI parameters."
            )
        return code

    def exchange_code(self, code: str) -> TokenInfo:
        """
        Exchange an authorization code for tokens.

        Args:
            code: The authorization code from the redirect URL.

        Returns:
            TokenInfo with access and refresh tokens.

        Raises:
            SpotifyAuthError: If code is missing.
            SpotifyTokenError: If token exchange fails.
        """
        if not code:
            raise SpotifyAuthError("Authorization code is required")

        token_data = self._request_token(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self._credentials.redirect_uri,
            },
            "Token exchange",
        )
        token_info = TokenInfo.from_dict(token_data)
        logger.info("Successfully exchanged code for token")
        return token_info

    def refresh_token(self, token_info: TokenInfo) -> TokenInfo:
        """
        Refresh an expired token.

        Args:
            token_info: The TokenInfo with a refresh_token.

        Returns:
            New TokenInfo with fresh access token.

        Raises:
            SpotifyTokenError: If refresh fails or no refresh_token available.
        """
        if not token_info.refresh_token:
            raise SpotifyTokenError("Cannot refresh: no refresh_token available")

        new_token_data = self._request_token(
            {
                "grant_type": "refresh_token",
                "refresh_token": token_info.refresh_token,
            },
            "Token refresh",
        )

        # A refresh_token is only returned when it was rotated
        if "refresh_token" not in new_token_data:
            new_token_data["refresh_token"] = token_info.refresh_token

        new_token_info = TokenInfo.from_dict(new_token_data)
        logger.info("Successfully refreshed token")
        return new_token_info

    def ensure_valid_token(self, token_info: TokenInfo) -> TokenInfo:
        """
        Ensure a token is valid, refreshing if necessary.

        Raises:
            SpotifyTokenError: If token cannot be made valid.
        """
        if not token_info.is_expired:
            return token_info

        logger.info("Token expired, attempting refresh")
        return self.refresh_token(token_info)

    def _request_token(self, data: Dict[str, str], operation: str) -> Dict[str, Any]:
        """POST to the token endpoint and return the decoded body."""
        try:
            response = requests.post(
                self._TOKEN_URL,
                data=data,
                auth=(
                    self._credentials.client_id,
                    self._credentials.client_secret,
                ),
                timeout=self._REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            logger.error("%s failed: %s", operation, e, exc_info=True)
            raise SpotifyTokenError(f"{operation} failed: {e}") from e

        if response.status_code != 200:
            try:
                error_msg = response.json().get("error_description", response.text)
            except ValueError:
                error_msg = response.text
            raise SpotifyTokenError(f"{operation} failed: {error_msg}")

        try:
            token_data = response.json()
        except ValueError as e:
            raise SpotifyTokenError(f"{operation} returned invalid JSON") from e

        if not token_data:
            raise SpotifyTokenError(f"No token returned from {operation.lower()}")
        return token_data
