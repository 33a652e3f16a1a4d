"""
shuffler - create a truly shuffled copy of a Spotify playlist.

The package is split the same way the command runs:
    - spotify/: credentials, OAuth token handling and the Web API wrapper
    - models/: playable identifiers and the cached playlist record
    - services/: cache store, content fetcher, playlist and shuffle logic
    - schemas/: validation of command-line input
    - cli/: argument parsing, prompts, progress display and the driver
"""

__version__ = "0.3.0"
