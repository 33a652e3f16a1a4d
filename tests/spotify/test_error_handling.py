"""
Tests for the api_error_handler decorator and its helpers.

Retries are exercised with time.sleep patched out.
"""

import pytest
import requests
import spotipy
from unittest.mock import Mock, patch

from shuffler.spotify.error_handling import (
    MAX_DELAY,
    MAX_RETRIES,
    _calculate_backoff_delay,
    _classify_error,
    _get_retry_delay,
    api_error_handler,
)
from shuffler.spotify.exceptions import (
    SpotifyAPIError,
    SpotifyNotFoundError,
    SpotifyRateLimitError,
    SpotifyTokenError,
    SpotifyTokenExpiredError,
)


def _spotify_exception(status, headers=None):
    return spotipy.SpotifyException(status, -1, f"HTTP {status}", headers=headers)


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("shuffler.spotify.error_handling.time.sleep") as mock_sleep:
        yield mock_sleep


class TestClassifyError:
    """Tests for _classify_error."""

    @pytest.mark.parametrize("status,category", [
        (404, "not_found"),
        (401, "token_expired"),
        (429, "rate_limited"),
        (500, "server_error"),
        (503, "server_error"),
        (400, "client_error"),
        (403, "client_error"),
    ])
    def test_spotify_exceptions(self, status, category):
        assert _classify_error(_spotify_exception(status)) == category

    def test_network_error(self):
        assert _classify_error(requests.ConnectionError("down")) == "network_error"

    def test_unexpected(self):
        assert _classify_error(KeyError("boom")) == "unexpected"


class TestRetryDelay:
    """Tests for backoff calculation."""

    def test_backoff_doubles(self):
        assert [_calculate_backoff_delay(i) for i in range(4)] == [1, 2, 4, 8]

    def test_backoff_capped(self):
        assert _calculate_backoff_delay(10) == MAX_DELAY

    def test_rate_limit_honours_retry_after(self):
        error = _spotify_exception(429, headers={"Retry-After": "7"})

        assert _get_retry_delay(error, "rate_limited", 0) == 7

    def test_rate_limit_without_header_uses_default(self):
        assert _get_retry_delay(_spotify_exception(429), "rate_limited", 0) == 5


class TestApiErrorHandler:
    """Tests for the decorator itself."""

    def test_returns_result(self):
        func = Mock(return_value="ok", __name__="func")

        assert api_error_handler(func)() == "ok"

    def test_retries_server_error_then_succeeds(self, no_sleep):
        func = Mock(side_effect=[_spotify_exception(502), "ok"], __name__="func")

        assert api_error_handler(func)() == "ok"
        assert func.call_count == 2
        no_sleep.assert_called_once_with(1)

    def test_server_error_exhausts_retries(self, no_sleep):
        func = Mock(side_effect=_spotify_exception(500), __name__="func")

        with pytest.raises(SpotifyAPIError) as exc_info:
            api_error_handler(func)()

        assert exc_info.value.http_status == 500
        assert func.call_count == MAX_RETRIES + 1
        assert no_sleep.call_count == MAX_RETRIES

    def test_rate_limit_exhausts_retries(self):
        error = _spotify_exception(429, headers={"Retry-After": "2"})
        func = Mock(side_effect=error, __name__="func")

        with pytest.raises(SpotifyRateLimitError) as exc_info:
            api_error_handler(func)()

        assert exc_info.value.retry_after == 2
        assert exc_info.value.http_status == 429

    def test_network_error_retried(self):
        func = Mock(side_effect=[requests.Timeout("slow"), "ok"], __name__="func")

        assert api_error_handler(func)() == "ok"

    def test_not_found_not_retried(self, no_sleep):
        func = Mock(side_effect=_spotify_exception(404), __name__="func")

        with pytest.raises(SpotifyNotFoundError):
            api_error_handler(func)()

        assert func.call_count == 1
        no_sleep.assert_not_called()

    def test_unauthorized_maps_to_token_expired(self):
        func = Mock(side_effect=_spotify_exception(401), __name__="func")

        with pytest.raises(SpotifyTokenExpiredError):
            api_error_handler(func)()

    def test_unexpected_error_wrapped(self):
        func = Mock(side_effect=KeyError("items"), __name__="func")

        with pytest.raises(SpotifyAPIError, match="Unexpected error") as exc_info:
            api_error_handler(func)()

        assert isinstance(exc_info.value.__cause__, KeyError)

    def test_spotify_errors_pass_through(self):
        """Errors already raised by the Spotify layer are not wrapped."""
        error = SpotifyTokenError("refresh failed")
        func = Mock(side_effect=error, __name__="func")

        with pytest.raises(SpotifyTokenError) as exc_info:
            api_error_handler(func)()

        assert exc_info.value is error
        assert func.call_count == 1
