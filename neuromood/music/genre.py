from typing import Optional

DEFAULT_GENRE = 'lofi study beats'
DEFAULT_DESCRIPTION = 'Music to match your mood'

EMOTION_TO_GENRE = {
    'happy': 'upbeat happy music',
    'sad': 'melancholic piano music',
    'angry': 'calming ambient music',
    'calm': 'relaxing meditation music',
    'fear': 'soothing acoustic music',
    'surprise': 'inspirational orchestral music',
    'neutral': DEFAULT_GENRE,
}

MUSIC_DESCRIPTIONS = {
    'happy': 'Uplifting tunes to boost your happiness',
    'sad': 'Comforting melodies for reflection',
    'angry': 'Calming sounds to ease tension',
    'calm': 'Peaceful ambient music to maintain tranquility',
    'fear': 'Soothing melodies to provide reassurance',
    'surprise': 'Inspirational music for this moment of wonder',
    'neutral': 'Pleasant background music for focus',
}


def select_genre(emotion: Optional[str]) -> str:
    """Genre search query for an emotion; lofi when nothing is detected yet."""
    if not emotion:
        return DEFAULT_GENRE
    return EMOTION_TO_GENRE.get(emotion, DEFAULT_GENRE)


def describe_music(emotion: Optional[str]) -> str:
    if not emotion:
        return DEFAULT_DESCRIPTION
    return MUSIC_DESCRIPTIONS.get(emotion, DEFAULT_DESCRIPTION)
