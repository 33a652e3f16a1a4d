"""
Interactive prompts, built on Rich.

Every question the program can ask lives here so the services receive
plain callables and never touch the terminal themselves.
"""

from typing import List, Optional

from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from shuffler.models.playlist import Playlist
from shuffler.spotify.credentials import SpotifyCredentials

FIRST_RUN_MESSAGE = (
    "You're running shuffler for the first time! In order to use this tool, "
    "you have to create a Spotify app, which you can do at "
    "https://developer.spotify.com/dashboard. Once you've done this, provide "
    "the client ID and secret here."
)

LIMIT_MESSAGE = (
    "Specify a limit below 50 for the user playlist fetch.\n"
    "If you don't see the playlist you wish to shuffle after this, abort "
    "with ^C and try a lower limit."
)


class TerminalPrompts:
    """Questions asked on the terminal."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def confirm_cached_playlist(self, age: str) -> bool:
        return Confirm.ask(
            f"A cached version of this playlist from {age} ago was found. Use this?",
            console=self.console,
            default=True,
        )

    def ask_playlist_limit(self, default: int) -> int:
        self.console.print(LIMIT_MESSAGE)
        while True:
            limit = IntPrompt.ask("Choose a limit", console=self.console, default=default)
            if 1 <= limit <= 50:
                return limit
            self.console.print("[prompt.invalid]Please enter a number between 1 and 50")

    def select_playlist(self, playlists: List[Playlist]) -> Playlist:
        """Show a numbered table of playlists and return the chosen one."""
        table = Table(title="Your playlists")
        table.add_column("#", justify="right", style="cyan")
        table.add_column("Name")
        table.add_column("Items", justify="right")
        for idx, playlist in enumerate(playlists, 1):
            total = "" if playlist.total_tracks is None else str(playlist.total_tracks)
            table.add_row(str(idx), playlist.name, total)
        self.console.print(table)

        choices = [str(idx) for idx in range(1, len(playlists) + 1)]
        selection = IntPrompt.ask(
            "Which playlist to shuffle?",
            console=self.console,
            choices=choices,
            show_choices=False,
        )
        return playlists[selection - 1]

    def ask_playlist_name(self, default: str) -> str:
        while True:
            name = Prompt.ask("New playlist name?", console=self.console, default=default)
            if name.strip():
                return name.strip()
            self.console.print("[prompt.invalid]The name cannot be empty")

    def ask_credentials(self) -> SpotifyCredentials:
        self.console.print(FIRST_RUN_MESSAGE)
        while True:
            client_id = Prompt.ask("Enter the client ID", console=self.console)
            client_secret = Prompt.ask(
                "Enter the client secret", console=self.console, password=True
            )
            redirect_uri = Prompt.ask(
                "Enter the redirect URI (this can be anything, really)",
                console=self.console,
            )
            try:
                return SpotifyCredentials(
                    client_id=client_id.strip(),
                    client_secret=client_secret.strip(),
                    redirect_uri=redirect_uri.strip(),
                )
            except ValueError as e:
                self.console.print(f"[prompt.invalid]{e}")

    def ask_redirect_url(self, auth_url: str) -> str:
        self.console.print("Opened the following URL in your browser:")
        self.console.print(auth_url, soft_wrap=True, markup=False, highlight=False)
        return Prompt.ask(
            "Log in, then paste the URL you were redirected to",
            console=self.console,
        )
