from __future__ import annotations

import pytest

from neuromood.music.player import MusicPlayer
from neuromood.music.track_source import FALLBACK_TRACKS, TrackSource


@pytest.fixture
def player() -> MusicPlayer:
    return MusicPlayer(TrackSource(api_key=""))


def test_sync_loads_queue_for_emotion(player: MusicPlayer) -> None:
    assert player.sync("happy")
    assert player.genre == "upbeat happy music"
    assert player.tracks == FALLBACK_TRACKS["upbeat happy music"]
    assert player.current is None
    assert not player.sync("happy")


def test_sync_ignores_missing_emotion(player: MusicPlayer) -> None:
    assert not player.sync(None)
    assert player.tracks == []


def test_play_without_queue_does_nothing(player: MusicPlayer) -> None:
    assert player.play() is None
    assert not player.is_playing


def test_play_pause_and_wraparound(player: MusicPlayer) -> None:
    player.sync("sad")
    first = player.play()
    assert first == player.tracks[0]
    assert player.now_playing == first.title

    player.next_track()
    player.next_track()
    assert player.current == player.tracks[2]
    assert player.next_track() == player.tracks[0]

    player.pause()
    assert player.now_playing is None
    assert player.current == player.tracks[0]


def test_play_specific_track(player: MusicPlayer) -> None:
    player.sync("calm")
    track = player.tracks[1]
    assert player.play(track.id) == track
    with pytest.raises(KeyError):
        player.play("missing")


def test_emotion_change_while_playing_switches_track(player: MusicPlayer) -> None:
    player.sync("happy")
    player.play()
    player.sync("angry")

    assert player.is_playing
    assert player.current == FALLBACK_TRACKS["calming ambient music"][0]


def test_emotion_change_while_paused_clears_selection(player: MusicPlayer) -> None:
    player.sync("happy")
    player.play()
    player.pause()
    player.sync("fear")
    assert player.current is None


@pytest.mark.parametrize("requested, expected", [(50, 50), (150, 100), (-10, 0), (33.7, 33)])
def test_volume_is_clamped(player: MusicPlayer, requested: float, expected: int) -> None:
    assert player.set_volume(requested) == expected
    assert player.is_muted == (expected == 0)


def test_toggle_mute(player: MusicPlayer) -> None:
    assert player.toggle_mute()
    assert not player.toggle_mute()


def test_state_shape(player: MusicPlayer) -> None:
    player.sync("surprise")
    state = player.state()
    assert state["genre"] == "inspirational orchestral music"
    assert state["description"] == "Inspirational music for this moment of wonder"
    assert len(state["tracks"]) == 3
    assert state["current"] is None
    assert state["volume"] == 70
