import math
import time
import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple

import numpy as np

from neuromood.config.settings import (
    BUFFER_SIZE,
    CHANNEL_COUNT,
    CHANNEL_NAMES,
    DEFAULT_EMOTION,
    PATTERN_JITTER,
    SIGNAL_MAX,
    SIGNAL_MIN,
)

logger = logging.getLogger(__name__)

# Base channel levels per emotion (raw units, eeg1..eeg8)
EMOTION_PATTERNS: Dict[str, Tuple[float, ...]] = {
    # Higher activity in left frontal region (eeg1, eeg2)
    'happy': (40, 30, 25, 20, 15, 15, 10, 10),
    # Higher activity in right frontal region (eeg5, eeg6)
    'sad': (15, 20, 20, 25, 35, 40, 30, 25),
    # Higher overall activity
    'angry': (35, 40, 35, 35, 35, 40, 45, 40),
    # Lower overall activity, more balanced
    'calm': (15, 15, 20, 20, 15, 15, 15, 15),
    # High temporal and parietal activity
    'fear': (30, 35, 40, 35, 45, 40, 35, 45),
    # Burst of activity
    'surprise': (45, 40, 35, 30, 35, 40, 45, 35),
    'neutral': (25, 25, 25, 25, 25, 25, 25, 25),
}


@dataclass(frozen=True)
class Sample:
    """One reading of all channels at a capture time."""

    channels: Tuple[float, ...]
    timestamp: float

    def __post_init__(self):
        if len(self.channels) != CHANNEL_COUNT:
            raise ValueError(f"Expected {CHANNEL_COUNT} channels, got {len(self.channels)}")
        if not all(math.isfinite(value) for value in self.channels):
            raise ValueError(f"Channel values must be finite: {self.channels}")

    def as_dict(self) -> Dict[str, float]:
        return dict(zip(CHANNEL_NAMES, self.channels))


class SampleBuffer:
    """Bounded FIFO of samples; the oldest sample is evicted when full."""

    def __init__(self, capacity: int = BUFFER_SIZE):
        if capacity <= 0:
            raise ValueError(f"Buffer capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._samples = deque(maxlen=capacity)

    def append(self, sample: Sample) -> None:
        if self._samples and sample.timestamp < self._samples[-1].timestamp:
            raise ValueError(
                f"Sample timestamp {sample.timestamp} is older than "
                f"the newest buffered sample {self._samples[-1].timestamp}"
            )
        self._samples.append(sample)

    def snapshot(self) -> Tuple[Sample, ...]:
        """Return an immutable copy of the buffered samples, oldest first."""
        return tuple(self._samples)

    def latest(self) -> Optional[Sample]:
        return self._samples[-1] if self._samples else None

    def __len__(self) -> int:
        return len(self._samples)


class SampleGenerator:
    """Produces simulated EEG samples, uniformly random or biased toward an emotion."""

    def __init__(self, seed: Optional[int] = None, clock: Callable[[], float] = time.time):
        self._rng = np.random.default_rng(seed)
        self._clock = clock
        self._last_timestamp = -math.inf

    def _timestamp(self) -> float:
        # never hand out a timestamp older than the previous one
        self._last_timestamp = max(self._clock(), self._last_timestamp)
        return self._last_timestamp

    def generate(self, emotion: Optional[str] = None) -> Sample:
        if emotion is None:
            values = self._rng.uniform(SIGNAL_MIN, SIGNAL_MAX, CHANNEL_COUNT)
        else:
            base = np.asarray(EMOTION_PATTERNS.get(emotion, EMOTION_PATTERNS[DEFAULT_EMOTION]), dtype=float)
            values = base + self._rng.uniform(-PATTERN_JITTER, PATTERN_JITTER, CHANNEL_COUNT)
        return Sample(channels=tuple(float(v) for v in values), timestamp=self._timestamp())

    def generate_window(self, size: int, emotion: Optional[str] = None) -> Sequence[Sample]:
        return [self.generate(emotion) for _ in range(size)]
