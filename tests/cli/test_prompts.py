"""
Tests for the terminal prompts.

Rich's prompt classes are patched so no input is read.
"""

import io

import pytest
from rich.console import Console
from unittest.mock import patch

from shuffler.cli.prompts import TerminalPrompts
from shuffler.models.playlist import Playlist
from shuffler.spotify.credentials import SpotifyCredentials


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=120)


@pytest.fixture
def prompts(console):
    return TerminalPrompts(console)


class TestConfirmCachedPlaylist:
    """Tests for confirm_cached_playlist."""

    @patch("shuffler.cli.prompts.Confirm.ask", return_value=True)
    def test_question_mentions_age(self, mock_ask, prompts):
        assert prompts.confirm_cached_playlist("2h 5m") is True

        question = mock_ask.call_args[0][0]
        assert question == "A cached version of this playlist from 2h 5m ago was found. Use this?"


class TestAskPlaylistLimit:
    """Tests for ask_playlist_limit."""

    @patch("shuffler.cli.prompts.IntPrompt.ask", side_effect=[0, 99, 12])
    def test_reasks_until_in_range(self, mock_ask, prompts, console):
        assert prompts.ask_playlist_limit(5) == 12

        assert mock_ask.call_count == 3
        assert mock_ask.call_args.kwargs["default"] == 5
        assert "between 1 and 50" in console.file.getvalue()


class TestSelectPlaylist:
    """Tests for select_playlist."""

    @patch("shuffler.cli.prompts.IntPrompt.ask", return_value=2)
    def test_returns_chosen_playlist(self, mock_ask, prompts, console):
        playlists = [Playlist("a", "First", total_tracks=3), Playlist("b", "Second")]

        assert prompts.select_playlist(playlists) is playlists[1]

        assert mock_ask.call_args.kwargs["choices"] == ["1", "2"]
        output = console.file.getvalue()
        assert "First" in output
        assert "Second" in output


class TestAskPlaylistName:
    """Tests for ask_playlist_name."""

    @patch("shuffler.cli.prompts.Prompt.ask", side_effect=["  ", " Party "])
    def test_strips_and_rejects_blank(self, mock_ask, prompts):
        assert prompts.ask_playlist_name("shuffler::abcdefgh") == "Party"

        assert mock_ask.call_args.kwargs["default"] == "shuffler::abcdefgh"


class TestAskCredentials:
    """Tests for ask_credentials."""

    @patch(
        "shuffler.cli.prompts.Prompt.ask",
        side_effect=["", "secret", "http://localhost/cb", "id", "secret", "http://localhost/cb"],
    )
    def test_reasks_until_complete(self, mock_ask, prompts, console):
        credentials = prompts.ask_credentials()

        assert credentials == SpotifyCredentials("id", "secret", "http://localhost/cb")
        assert "developer.spotify.com/dashboard" in console.file.getvalue()
        assert "client_id is required" in console.file.getvalue()

    @patch("shuffler.cli.prompts.Prompt.ask", return_value="x")
    def test_secret_is_hidden(self, mock_ask, prompts):
        prompts.ask_credentials()

        secret_call = mock_ask.call_args_list[1]
        assert secret_call.kwargs["password"] is True


class TestAskRedirectUrl:
    """Tests for ask_redirect_url."""

    @patch("shuffler.cli.prompts.Prompt.ask", return_value="http://localhost/cb?code=abc")
    def test_shows_url(self, mock_ask, prompts, console):
        url = "https://accounts.spotify.com/authorize?client_id=abc"

        assert prompts.ask_redirect_url(url) == "http://localhost/cb?code=abc"
        assert url in console.file.getvalue()
