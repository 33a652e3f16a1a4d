"""
Tests for PlayableId and its cache-file form.
"""

import pytest

from shuffler.enums import PlayableKind
from shuffler.models.playable import (
    MalformedIdentifierError,
    PlayableId,
    SerializedPlayable,
    from_serializable,
    to_serializable,
)

TRACK_ID = "4uLU6hMCjMI75M1A2tKUQC"
EPISODE_ID = "512ojhOuo1ktJprKbVcKyQ"


class TestPlayableId:
    """Tests for PlayableId construction."""

    def test_track_uri(self):
        playable = PlayableId.track(TRACK_ID)

        assert playable.kind is PlayableKind.TRACK
        assert playable.uri == f"spotify:track:{TRACK_ID}"
        assert str(playable) == playable.uri

    def test_episode_uri(self):
        assert PlayableId.episode(EPISODE_ID).uri == f"spotify:episode:{EPISODE_ID}"

    def test_equality_includes_kind(self):
        assert PlayableId.track(TRACK_ID) == PlayableId.track(TRACK_ID)
        assert PlayableId.track(TRACK_ID) != PlayableId.episode(TRACK_ID)

    def test_malformed_id_rejected(self):
        with pytest.raises(MalformedIdentifierError) as exc_info:
            PlayableId.track("not-a-valid-id")

        assert exc_info.value.kind is PlayableKind.TRACK
        assert exc_info.value.value == "not-a-valid-id"
        assert isinstance(exc_info.value, ValueError)

    def test_is_hashable(self):
        assert len({PlayableId.track(TRACK_ID), PlayableId.track(TRACK_ID)}) == 1


class TestSerialization:
    """Tests for to_serializable / from_serializable."""

    @pytest.mark.parametrize("playable", [
        PlayableId.track(TRACK_ID),
        PlayableId.episode(EPISODE_ID),
    ])
    def test_round_trip(self, playable):
        record = to_serializable(playable)

        assert record.id == playable.id
        assert record.kind is playable.kind
        assert from_serializable(record) == playable

    def test_serialized_form(self):
        record = to_serializable(PlayableId.episode(EPISODE_ID))

        assert record.model_dump(mode="json") == {"id": EPISODE_ID, "kind": "episode"}

    @pytest.mark.parametrize("value", [
        "not-a-valid-id",
        TRACK_ID + "\n",
        "",
    ])
    def test_from_serializable_malformed(self, value):
        record = SerializedPlayable(id=value, kind=PlayableKind.TRACK)

        with pytest.raises(MalformedIdentifierError):
            from_serializable(record)
