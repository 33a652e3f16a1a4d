"""
Pytest configuration and shared fixtures for shuffler tests.

This module provides the fixtures used across test modules: valid Spotify
ids, playlist item payloads, a fixed clock, and a cache store rooted in a
temporary directory.
"""

import time
from datetime import datetime, timezone

import pytest
from unittest.mock import Mock

from shuffler.config import AppInfo, AppPaths
from shuffler.models.playable import PlayableId
from shuffler.services.playlist_cache_service import PlaylistCacheStore
from shuffler.spotify.auth import TokenInfo
from shuffler.spotify.credentials import SpotifyCredentials

PLAYLIST_ID = "37i9dQZF1DXcBWIGoYBM5M"
OTHER_PLAYLIST_ID = "5ABHKGoOzxkaa28ttQV9sE"


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch, tmp_path):
    """Keep real credentials and config directories out of every test."""
    for name in (
        "SPOTIFY_CLIENT_ID",
        "SPOTIFY_CLIENT_SECRET",
        "SPOTIFY_REDIRECT_URI",
        "SHUFFLER_APP_NAME",
        "SHUFFLER_APP_AUTHOR",
        "SHUFFLER_CONFIG_DIR",
        "SHUFFLER_PAGE_SIZE",
        "SHUFFLER_PLAYLIST_LIMIT",
        "SHUFFLER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


# =============================================================================
# Identifiers and payloads
# =============================================================================

@pytest.fixture
def playlist_id():
    return PLAYLIST_ID


@pytest.fixture
def other_playlist_id():
    return OTHER_PLAYLIST_ID


@pytest.fixture
def make_id():
    """Factory for distinct valid 22-character ids."""
    def _make(n):
        return f"t{n:021d}"
    return _make


@pytest.fixture
def make_track(make_id):
    def _make(n):
        return PlayableId.track(make_id(n))
    return _make


@pytest.fixture
def make_item(make_id):
    """Factory for a playlist item as returned by the playlist items endpoint."""
    def _make(n, kind="track", **overrides):
        payload = {
            "id": make_id(n),
            "type": kind,
            "uri": f"spotify:{kind}:{make_id(n)}",
            "is_local": False,
        }
        payload.update(overrides)
        return {"track": payload}
    return _make


@pytest.fixture
def make_page(make_item):
    """Factory for a paging object holding items numbered from ``start``."""
    def _make(start, count, total=None):
        return {
            "items": [make_item(start + i) for i in range(count)],
            "total": total,
            "next": None,
        }
    return _make


# =============================================================================
# Time and storage
# =============================================================================

@pytest.fixture
def now():
    return datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(now):
    """A clock stuck at ``now``; tests may change ``clock.return_value``."""
    return Mock(return_value=now)


@pytest.fixture
def app_paths(tmp_path):
    return AppPaths(root=tmp_path / "shuffler")


@pytest.fixture
def cache_store(app_paths, clock):
    """Cache store in a temporary directory with no confirmation callback."""
    return PlaylistCacheStore(app_paths.playlist_cache_file, clock=clock)


@pytest.fixture
def app_info():
    return AppInfo()


# =============================================================================
# Auth
# =============================================================================

@pytest.fixture
def credentials():
    """Valid SpotifyCredentials for testing."""
    return SpotifyCredentials(
        client_id="test_client_id",
        client_secret="test_client_secret",
        redirect_uri="http://localhost:8888/callback",
    )


@pytest.fixture
def valid_token_data():
    """Valid token dictionary."""
    return {
        "access_token": "test_access_token",
        "token_type": "Bearer",
        "expires_at": time.time() + 3600,
        "expires_in": 3600,
        "refresh_token": "test_refresh_token",
        "scope": "playlist-read-private",
    }


@pytest.fixture
def expired_token_data():
    """Expired token dictionary."""
    return {
        "access_token": "expired_access_token",
        "token_type": "Bearer",
        "expires_at": time.time() - 100,
        "refresh_token": "test_refresh_token",
    }


@pytest.fixture
def token_info(valid_token_data):
    return TokenInfo.from_dict(valid_token_data)


@pytest.fixture
def expired_token_info(expired_token_data):
    return TokenInfo.from_dict(expired_token_data)
