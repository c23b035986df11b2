import logging
from typing import Any, Dict, List, Optional

from neuromood.music.genre import describe_music, select_genre
from neuromood.music.track_source import Track, TrackSource

logger = logging.getLogger(__name__)


class MusicPlayer:
    """Playback queue that follows the detected emotion."""

    def __init__(self, track_source: TrackSource):
        self.track_source = track_source
        self.emotion: Optional[str] = None
        self.genre: Optional[str] = None
        self.tracks: List[Track] = []
        self.current: Optional[Track] = None
        self.is_playing = False
        self.volume = 70
        self.is_muted = False

    def sync(self, emotion: Optional[str]) -> bool:
        """Refresh the queue when the emotion changed. Returns True if it did."""
        if not emotion or emotion == self.emotion:
            return False

        self.emotion = emotion
        self.genre = select_genre(emotion)
        self.tracks = self.track_source.search(self.genre)
        logger.info(f"Loaded {len(self.tracks)} tracks for {emotion} ({self.genre})")

        if self.tracks and self.is_playing:
            self.current = self.tracks[0]
        elif self.current not in self.tracks:
            self.current = None
        return True

    def play(self, track_id: Optional[str] = None) -> Optional[Track]:
        if track_id is not None:
            matches = [t for t in self.tracks if t.id == track_id]
            if not matches:
                raise KeyError(f"Track {track_id!r} is not in the queue")
            self.current = matches[0]
        elif self.current is None:
            if not self.tracks:
                return None
            self.current = self.tracks[0]

        self.is_playing = True
        logger.info(f"Playing {self.current.title} ({self.current.id})")
        return self.current

    def pause(self) -> None:
        self.is_playing = False

    def next_track(self) -> Optional[Track]:
        if self.current is None or not self.tracks:
            return None
        ids = [t.id for t in self.tracks]
        index = ids.index(self.current.id) if self.current.id in ids else -1
        return self.play(self.tracks[(index + 1) % len(self.tracks)].id)

    def set_volume(self, volume: float) -> int:
        self.volume = int(max(0, min(100, volume)))
        self.is_muted = self.volume == 0
        return self.volume

    def toggle_mute(self) -> bool:
        self.is_muted = not self.is_muted
        return self.is_muted

    @property
    def now_playing(self) -> Optional[str]:
        if self.is_playing and self.current is not None:
            return self.current.title
        return None

    def state(self) -> Dict[str, Any]:
        return {
            'emotion': self.emotion,
            'genre': self.genre or select_genre(self.emotion),
            'description': describe_music(self.emotion),
            'tracks': [t.to_dict() for t in self.tracks],
            'current': self.current.to_dict() if self.current else None,
            'is_playing': self.is_playing,
            'volume': self.volume,
            'is_muted': self.is_muted,
        }
