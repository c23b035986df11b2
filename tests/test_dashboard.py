from __future__ import annotations

from neuromood.config.settings import EMOTION_LABELS
from neuromood.dashboard import DEFAULT_COLOR, EMOTION_COLORS, build_dashboard, emotion_color
from neuromood.eeg.emotion_monitor import EmotionMonitor
from neuromood.eeg.scheduler import ManualScheduler
from neuromood.music.player import MusicPlayer
from neuromood.music.track_source import TrackSource


def test_every_label_has_a_color() -> None:
    assert set(EMOTION_COLORS) == set(EMOTION_LABELS)
    assert emotion_color("happy") == "#FFD700"
    assert emotion_color(None) == DEFAULT_COLOR
    assert emotion_color("bored") == DEFAULT_COLOR


def test_dashboard_before_any_detection(monitor: EmotionMonitor) -> None:
    assert build_dashboard(monitor) == {
        "emotion": None,
        "color": DEFAULT_COLOR,
        "eeg_data": None,
        "music_playing": None,
    }


def test_dashboard_after_detection(monitor: EmotionMonitor, scheduler: ManualScheduler) -> None:
    player = MusicPlayer(TrackSource(api_key=""))
    monitor.connect()
    scheduler.advance(1.0)
    player.sync(monitor.detected_emotion)
    player.play()

    dashboard = build_dashboard(monitor, player)
    assert dashboard["emotion"] == "happy"
    assert dashboard["color"] == "#FFD700"
    assert len(dashboard["eeg_data"]) == 8
    assert dashboard["music_playing"] == "Happy Vibes"
