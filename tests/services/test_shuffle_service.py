"""
Tests for ShuffleService.
"""

import random
import re

import pytest

from shuffler.config import AppInfo
from shuffler.services import ShuffleError, ShuffleService


class TestShuffleItems:
    """Tests for shuffle_items."""

    def test_is_permutation(self):
        items = list(range(50))

        shuffled = ShuffleService.shuffle_items(items, random.Random(1))

        assert sorted(shuffled) == items
        assert shuffled != items

    def test_input_not_modified(self):
        items = list(range(10))

        ShuffleService.shuffle_items(items, random.Random(2))

        assert items == list(range(10))

    def test_deterministic_with_seed(self):
        items = list(range(20))

        first = ShuffleService.shuffle_items(items, random.Random(7))
        second = ShuffleService.shuffle_items(items, random.Random(7))

        assert first == second

    def test_empty(self):
        assert ShuffleService.shuffle_items([]) == []


class TestTruncateItems:
    """Tests for truncate_items."""

    def test_truncates_to_limit(self):
        assert ShuffleService.truncate_items(list(range(150))) == list(range(100))

    def test_short_list_unchanged(self):
        assert ShuffleService.truncate_items([1, 2, 3], limit=5) == [1, 2, 3]

    @pytest.mark.parametrize("limit", [0, -1])
    def test_non_positive_limit(self, limit):
        with pytest.raises(ShuffleError):
            ShuffleService.truncate_items([1], limit=limit)


class TestDefaultPlaylistName:
    """Tests for default_playlist_name."""

    def test_format(self):
        name = ShuffleService.default_playlist_name(AppInfo())

        assert re.fullmatch(r"shuffler::[A-Za-z0-9]{8}", name)

    def test_uses_app_name(self):
        name = ShuffleService.default_playlist_name(AppInfo(name="mixer"), random.Random(3))

        assert name.startswith("mixer::")
