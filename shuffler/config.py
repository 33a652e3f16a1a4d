"""
Runtime configuration.

Settings are read from the environment (a ``.env`` file in the working
directory is loaded first) with defaults suitable for interactive use. The
application identity decides where persisted files live and is passed
around explicitly instead of being a module constant.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

# Page size used when fetching playlist items (the API allows 1-100)
DEFAULT_PAGE_SIZE = 50

# Page size used when listing the user's playlists (the API allows 1-50)
DEFAULT_PLAYLIST_LIMIT = 5

# The add-items endpoint accepts at most 100 URIs per request
MAX_ITEMS_PER_REQUEST = 100

DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class AppInfo:
    """Name and author of the application, used to namespace its files."""

    name: str = "shuffler"
    author: str = "ppege"

    @property
    def homepage(self) -> str:
        return f"https://github.com/{self.author}/{self.name}"


@dataclass(frozen=True)
class AppPaths:
    """Locations of the files shuffler persists between runs."""

    root: Path

    @classmethod
    def for_app(cls, app_info: AppInfo, base_dir: Optional[Path] = None) -> "AppPaths":
        """
        Resolve the per-application directory.

        ``base_dir`` wins when given; otherwise ``$XDG_CONFIG_HOME`` or
        ``~/.config`` is used, with the application name appended.
        """
        if base_dir is not None:
            return cls(root=Path(base_dir))

        xdg_home = os.getenv("XDG_CONFIG_HOME")
        config_home = Path(xdg_home) if xdg_home else Path.home() / ".config"
        return cls(root=config_home / app_info.name)

    @property
    def credentials_file(self) -> Path:
        return self.root / "preferences" / "credentials.json"

    @property
    def token_file(self) -> Path:
        return self.root / "preferences" / "token.json"

    @property
    def playlist_cache_file(self) -> Path:
        return self.root / "cache" / "playlists.json"


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


def _env_log_level(name: str, default: str) -> str:
    value = (os.getenv(name) or "").strip().upper() or default
    if value not in logging.getLevelNamesMapping():
        raise ValueError(f"{name} must be a logging level name, got {value!r}")
    return value


@dataclass(frozen=True)
class Config:
    """Base configuration."""

    app_info: AppInfo = field(default_factory=AppInfo)
    paths: Optional[AppPaths] = None
    page_size: int = DEFAULT_PAGE_SIZE
    playlist_limit: int = DEFAULT_PLAYLIST_LIMIT
    max_items: int = MAX_ITEMS_PER_REQUEST
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self):
        if self.paths is None:
            object.__setattr__(self, "paths", AppPaths.for_app(self.app_info))

    @classmethod
    def from_env(cls) -> "Config":
        """
        Build a Config from ``SHUFFLER_*`` environment variables.

        Raises:
            ValueError: If a numeric variable is not an integer or the log
                level is not a known level name.
        """
        app_info = AppInfo(
            name=os.getenv("SHUFFLER_APP_NAME") or AppInfo.name,
            author=os.getenv("SHUFFLER_APP_AUTHOR") or AppInfo.author,
        )
        config_dir = os.getenv("SHUFFLER_CONFIG_DIR")

        return cls(
            app_info=app_info,
            paths=AppPaths.for_app(
                app_info, Path(config_dir).expanduser() if config_dir else None
            ),
            page_size=_env_int("SHUFFLER_PAGE_SIZE", DEFAULT_PAGE_SIZE),
            playlist_limit=_env_int("SHUFFLER_PLAYLIST_LIMIT", DEFAULT_PLAYLIST_LIMIT),
            log_level=_env_log_level("SHUFFLER_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        )
