import logging
import traceback
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional

import requests

from neuromood.config.settings import (
    MAX_TRACKS,
    TRACK_SEARCH_TIMEOUT,
    YOUTUBE_API_KEY,
    YOUTUBE_SEARCH_URL,
)
from neuromood.errors import TransportError
from neuromood.music.genre import DEFAULT_GENRE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Track:
    id: str
    title: str
    thumbnail: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return asdict(self)


def _thumbnail(video_id: str) -> str:
    return f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg"


def _tracks(*entries) -> List[Track]:
    return [Track(video_id, title, _thumbnail(video_id)) for video_id, title in entries]


# Static playlists used when the search API is unavailable
FALLBACK_TRACKS: Dict[str, List[Track]] = {
    'upbeat happy music': _tracks(
        ('dQw4w9WgXcQ', 'Happy Vibes'),
        ('y6120QOlsfU', 'Uplifting Rhythm'),
        ('L_jWHffIx5E', 'Sunny Day'),
    ),
    'melancholic piano music': _tracks(
        ('rR94NDIfGmA', 'Rainy Day Piano'),
        ('4N3N1MlvVc4', 'Melancholy Sonata'),
        ('wAPCSnAhhC8', 'Nostalgic Memories'),
    ),
    'calming ambient music': _tracks(
        ('DWcJFNfaw9c', 'Tranquil Waters'),
        ('lTRiuFIWV54', 'Forest Ambience'),
        ('hHW1oY26kxQ', 'Peaceful Horizon'),
    ),
    'relaxing meditation music': _tracks(
        ('5qap5aO4i9A', 'Zen Garden'),
        ('DfG6VKnjrVw', 'Inner Peace'),
        ('lFcSrYw-ARY', 'Mindful Moments'),
    ),
    'soothing acoustic music': _tracks(
        ('jdYJf_ybyVo', 'Gentle Guitar'),
        ('HSOtku1j600', 'Acoustic Dreams'),
        ('KkOF8UiB7u8', 'Campfire Melodies'),
    ),
    'inspirational orchestral music': _tracks(
        ('oN2Xs-MvxLw', 'Epic Journey'),
        ('FK30dkXOTck', 'New Horizons'),
        ('XYKUeZQbMF0', 'Awakening'),
    ),
    'lofi study beats': _tracks(
        ('5qap5aO4i9A', 'Chill Beats to Study To'),
        ('bmVKaAV_7-A', 'Lofi Cafe'),
        ('DWcJFNfaw9c', 'Late Night Study Session'),
    ),
}


def match_fallback_key(query: str) -> str:
    """First fallback genre that the query contains or is contained in."""
    normalized = query.strip().casefold()
    if normalized:
        for key in FALLBACK_TRACKS:
            if key in normalized or normalized in key:
                return key
    return DEFAULT_GENRE


def fallback_tracks(query: str) -> List[Track]:
    return list(FALLBACK_TRACKS[match_fallback_key(query)])


class TrackSource:
    """Finds tracks for a genre query on YouTube, with a static offline fallback."""

    def __init__(
        self,
        api_key: str = YOUTUBE_API_KEY,
        search_url: str = YOUTUBE_SEARCH_URL,
        timeout: float = TRACK_SEARCH_TIMEOUT,
        max_results: int = MAX_TRACKS,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.search_url = search_url
        self.timeout = timeout
        self.max_results = max_results
        self.session = session or requests.Session()

    def search(self, genre_query: str) -> List[Track]:
        if not genre_query or not genre_query.strip():
            raise ValueError("Missing query parameter")

        try:
            tracks = self._remote_search(genre_query)
        except TransportError as e:
            logger.warning(f"Track search failed, using fallback playlist: {e}")
            tracks = fallback_tracks(genre_query)
        return tracks[:self.max_results]

    def _remote_search(self, query: str) -> List[Track]:
        if not self.api_key:
            raise TransportError("YouTube API key missing")

        params = {
            'part': 'snippet',
            'q': query,
            'type': 'video',
            'maxResults': self.max_results,
            'key': self.api_key,
        }
        try:
            response = self.session.get(self.search_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            raise TransportError(f"YouTube search error: {e}") from e

        try:
            tracks = [self._parse_item(item) for item in payload['items']]
        except (AttributeError, KeyError, TypeError) as e:
            logger.debug(traceback.format_exc())
            raise TransportError(f"Malformed YouTube search payload: {e}") from e

        if not tracks:
            raise TransportError(f"No results for {query!r}")
        logger.info(f"Found {len(tracks)} tracks for {query!r}")
        return tracks

    @staticmethod
    def _parse_item(item) -> Track:
        snippet = item['snippet']
        thumbnail = (snippet.get('thumbnails') or {}).get('medium', {}).get('url')
        return Track(id=item['id']['videoId'], title=snippet['title'], thumbnail=thumbnail)
