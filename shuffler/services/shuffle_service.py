"""
Shuffle service.

A uniform random permutation of the playlist items, cut down to what a
single add-items request accepts, plus the default name for the new
playlist.
"""

import logging
import random
import string
from typing import List, Optional, Sequence, TypeVar

from shuffler.config import AppInfo, MAX_ITEMS_PER_REQUEST

logger = logging.getLogger(__name__)

T = TypeVar("T")

NAME_SUFFIX_LENGTH = 8


class ShuffleError(Exception):
    """Base exception for shuffle operations."""
    pass


class ShuffleService:
    """Stateless helpers for shuffling playlist items."""

    @staticmethod
    def shuffle_items(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
        """
        Return a uniformly shuffled copy of ``items``.

        Args:
            items: Items in playlist order. Not modified.
            rng: Random source; a fresh ``random.Random`` when omitted.
        """
        if rng is None:
            rng = random.Random()

        shuffled = list(items)
        rng.shuffle(shuffled)
        logger.debug("Shuffled %d items", len(shuffled))
        return shuffled

    @staticmethod
    def truncate_items(items: Sequence[T], limit: int = MAX_ITEMS_PER_REQUEST) -> List[T]:
        """
        Keep at most ``limit`` items.

        Raises:
            ShuffleError: If limit is not positive.
        """
        if limit <= 0:
            raise ShuffleError(f"limit must be positive, got {limit}")

        if len(items) > limit:
            logger.info("Keeping %d of %d shuffled items", limit, len(items))
        return list(items[:limit])

    @staticmethod
    def default_playlist_name(app_info: AppInfo, rng: Optional[random.Random] = None) -> str:
        """Suggest a name such as ``shuffler::a8Xk2pQz`` for the new playlist."""
        if rng is None:
            rng = random.Random()

        alphabet = string.ascii_letters + string.digits
        suffix = "".join(rng.choice(alphabet) for _ in range(NAME_SUFFIX_LENGTH))
        return f"{app_info.name}::{suffix}"
