from typing import Any, Dict, Optional

from neuromood.eeg.emotion_monitor import EmotionMonitor
from neuromood.music.player import MusicPlayer

EMOTION_COLORS = {
    'happy': '#FFD700',
    'sad': '#4169E1',
    'angry': '#FF6347',
    'calm': '#90EE90',
    'fear': '#8A2BE2',
    'surprise': '#FF69B4',
    'neutral': '#A9A9A9',
}
DEFAULT_COLOR = '#FFFFFF'


def emotion_color(emotion: Optional[str]) -> str:
    if not emotion:
        return DEFAULT_COLOR
    return EMOTION_COLORS.get(emotion, DEFAULT_COLOR)


def build_dashboard(monitor: EmotionMonitor, player: Optional[MusicPlayer] = None) -> Dict[str, Any]:
    emotion = monitor.detected_emotion
    sample = monitor.latest_sample
    return {
        'emotion': emotion,
        'color': emotion_color(emotion),
        'eeg_data': list(sample.channels) if sample else None,
        'music_playing': player.now_playing if player else None,
    }
