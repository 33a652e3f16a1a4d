"""
Tests for the ShuffleRequest schema.
"""

import pytest
from pydantic import ValidationError

from shuffler.schemas import ShuffleRequest

PLAYLIST_ID = "37i9dQZF1DXcBWIGoYBM5M"


class TestShuffleRequestDefaults:
    """Tests for an empty request."""

    def test_defaults(self):
        request = ShuffleRequest()

        assert request.source is None
        assert request.destination_name is None
        assert request.use_cache is None
        assert request.page_size == 50
        assert request.playlist_limit is None

    def test_extra_fields_ignored(self):
        request = ShuffleRequest(verbose=True)

        assert not hasattr(request, "verbose")


class TestShuffleRequestSource:
    """Tests for source normalization."""

    @pytest.mark.parametrize("source", [
        PLAYLIST_ID,
        f"spotify:playlist:{PLAYLIST_ID}",
        f"https://open.spotify.com/playlist/{PLAYLIST_ID}?si=xyz",
    ])
    def test_normalized_to_id(self, source):
        assert ShuffleRequest(source=source).source == PLAYLIST_ID

    def test_invalid_source(self):
        with pytest.raises(ValidationError, match="Invalid playlist ID"):
            ShuffleRequest(source="not-a-playlist")


class TestShuffleRequestDestination:
    """Tests for destination name validation."""

    def test_stripped(self):
        assert ShuffleRequest(destination_name="  Road trip ").destination_name == "Road trip"

    def test_blank_rejected(self):
        with pytest.raises(ValidationError, match="Playlist name cannot be empty"):
            ShuffleRequest(destination_name="   ")


class TestShuffleRequestBounds:
    """Tests for numeric bounds."""

    @pytest.mark.parametrize("page_size", [1, 100])
    def test_page_size_bounds_accepted(self, page_size):
        assert ShuffleRequest(page_size=page_size).page_size == page_size

    @pytest.mark.parametrize("page_size", [0, 101, -5])
    def test_page_size_out_of_range(self, page_size):
        with pytest.raises(ValidationError):
            ShuffleRequest(page_size=page_size)

    @pytest.mark.parametrize("limit", [0, 51])
    def test_playlist_limit_out_of_range(self, limit):
        with pytest.raises(ValidationError):
            ShuffleRequest(playlist_limit=limit)

    def test_playlist_limit_accepted(self):
        assert ShuffleRequest(playlist_limit=50).playlist_limit == 50
