"""
Authentication service for the command-line OAuth flow.

Finds the user's Spotify app credentials (environment, then the saved
credentials file, then asking), and produces an authorized SpotifyAPI from
the saved token, a refreshed token, or a fresh login.
"""

import logging
import secrets
import webbrowser
from typing import Callable, Optional

from shuffler.config import AppPaths
from shuffler.spotify.api import SpotifyAPI
from shuffler.spotify.auth import (
    SpotifyAuthManager,
    TokenInfo,
    load_token,
    save_token,
)
from shuffler.spotify.credentials import SpotifyCredentials
from shuffler.spotify.exceptions import SpotifyAuthError, SpotifyTokenError

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Raised when the user cannot be authenticated."""
    pass


def _open_browser(url: str) -> bool:
    try:
        return webbrowser.open(url)
    except webbrowser.Error:
        return False


class AuthService:
    """Service for getting an authorized Spotify session."""

    def __init__(
        self,
        paths: AppPaths,
        prompt_credentials: Callable[[], SpotifyCredentials],
        prompt_redirect_url: Callable[[str], str],
        open_browser: Optional[Callable[[str], bool]] = None,
    ):
        """
        Initialize the auth service.

        Args:
            paths: Where the credentials and token files live.
            prompt_credentials: Asks the user for their app credentials.
            prompt_redirect_url: Shown the authorize URL, returns the URL the
                browser was redirected to.
            open_browser: Tries to open the authorize URL. Defaults to the
                system web browser.
        """
        self._paths = paths
        self._prompt_credentials = prompt_credentials
        self._prompt_redirect_url = prompt_redirect_url
        self._open_browser = open_browser or _open_browser

    def load_credentials(self) -> SpotifyCredentials:
        """
        Find the Spotify app credentials, asking for them on first run.

        Raises:
            AuthenticationError: If newly entered credentials cannot be saved.
        """
        credentials = SpotifyCredentials.from_env()
        if credentials is not None:
            logger.debug("Using Spotify credentials from the environment")
            return credentials

        credentials = SpotifyCredentials.from_file(self._paths.credentials_file)
        if credentials is not None:
            logger.debug("Using saved Spotify credentials")
            return credentials

        credentials = self._prompt_credentials()
        try:
            credentials.save(self._paths.credentials_file)
        except SpotifyAuthError as e:
            raise AuthenticationError(str(e))
        return credentials

    def get_token(self, auth_manager: SpotifyAuthManager) -> TokenInfo:
        """
        Return a usable token: the saved one, refreshed if needed, or a new
        one from an interactive login.

        Raises:
            AuthenticationError: If login fails.
        """
        token_info = load_token(self._paths.token_file)
        if token_info is not None:
            try:
                valid = auth_manager.ensure_valid_token(token_info)
            except SpotifyTokenError as e:
                logger.info("Saved token could not be refreshed, logging in again: %s", e)
            else:
                if valid is not token_info:
                    self._store_token(valid)
                return valid

        return self.login(auth_manager)

    def login(self, auth_manager: SpotifyAuthManager) -> TokenInfo:
        """
        Run the authorization-code flow in the terminal.

        Raises:
            AuthenticationError: If the pasted URL is unusable or the code
                cannot be exchanged.
        """
        state = secrets.token_urlsafe(16)
        auth_url = auth_manager.get_auth_url(state)
        if not self._open_browser(auth_url):
            logger.debug("Could not open a browser for the authorize URL")

        response_url = self._prompt_redirect_url(auth_url)
        try:
            code = auth_manager.parse_response_url(response_url, state)
            token_info = auth_manager.exchange_code(code)
        except SpotifyAuthError as e:
            logger.error("Login failed: %s", e)
            raise AuthenticationError(f"Failed to login: {e}")

        self._store_token(token_info)
        return token_info

    def get_authorized_api(self) -> SpotifyAPI:
        """
        Build a SpotifyAPI for the current user.

        Raises:
            AuthenticationError: If no valid session can be established.
        """
        auth_manager = SpotifyAuthManager(self.load_credentials())
        token_info = self.get_token(auth_manager)
        try:
            return SpotifyAPI(
                token_info, auth_manager, on_token_refresh=self._store_token
            )
        except SpotifyAuthError as e:
            raise AuthenticationError(f"Failed to create Spotify session: {e}")

    def _store_token(self, token_info: TokenInfo) -> None:
        try:
            save_token(self._paths.token_file, token_info)
        except SpotifyTokenError as e:
            # The session still works for this run
            logger.warning("%s", e)
