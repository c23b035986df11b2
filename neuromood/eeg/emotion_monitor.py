import time
import logging
import threading
from typing import Any, Dict, Optional

from neuromood.config.settings import (
    ACQUISITION_INTERVAL,
    BUFFER_SIZE,
    CLASSIFICATION_INTERVAL,
    DEFAULT_EMOTION,
    EMOTION_LABELS,
)
from neuromood.eeg.data_acquisition import Sample, SampleBuffer, SampleGenerator
from neuromood.eeg.scheduler import CancellationToken, Scheduler, ThreadScheduler
from neuromood.ml.emotion_classifier import EmotionClassifier

logger = logging.getLogger(__name__)


class EmotionMonitor:
    """Session holding the sample buffer and the current emotion.

    Acquisition and classification run on two independent timers. Every
    mutation happens under one lock; classification reads a snapshot of the
    buffer and re-checks the connection token before publishing.
    """

    def __init__(
        self,
        classifier: EmotionClassifier,
        scheduler: Optional[Scheduler] = None,
        generator: Optional[SampleGenerator] = None,
        buffer_size: int = BUFFER_SIZE,
        acquisition_interval: float = ACQUISITION_INTERVAL,
        classification_interval: float = CLASSIFICATION_INTERVAL,
    ):
        self.classifier = classifier
        self.scheduler = scheduler or ThreadScheduler()
        self.generator = generator or SampleGenerator()
        self.buffer = SampleBuffer(buffer_size)
        self.acquisition_interval = acquisition_interval
        self.classification_interval = classification_interval
        self.simulated_emotion: Optional[str] = None
        self.classifications = 0
        self._detected_emotion: Optional[str] = None
        self._updated_at: Optional[float] = None
        self._token: Optional[CancellationToken] = None
        self._lock = threading.Lock()

    @property
    def is_connected(self) -> bool:
        with self._lock:
            return self._token is not None and not self._token.cancelled

    @property
    def detected_emotion(self) -> Optional[str]:
        """Last published label, or None before the first classification."""
        with self._lock:
            return self._detected_emotion

    @property
    def current_emotion(self) -> str:
        with self._lock:
            return self._detected_emotion or DEFAULT_EMOTION

    @property
    def latest_sample(self) -> Optional[Sample]:
        with self._lock:
            return self.buffer.latest()

    @property
    def buffer_length(self) -> int:
        with self._lock:
            return len(self.buffer)

    def set_simulated_emotion(self, emotion: Optional[str]) -> None:
        if emotion is not None and emotion not in EMOTION_LABELS:
            raise ValueError(f"Unknown emotion: {emotion!r}")
        with self._lock:
            self.simulated_emotion = emotion
        logger.info(f"Simulated emotion set to {emotion or 'random'}")

    def connect(self, simulated_emotion: Optional[str] = None) -> bool:
        """Start both timers. Returns False if already connected."""
        if simulated_emotion is not None:
            self.set_simulated_emotion(simulated_emotion)

        with self._lock:
            if self._token is not None and not self._token.cancelled:
                logger.info("Monitor already connected")
                return False
            token = CancellationToken()
            self._token = token

        self.scheduler.every(self.acquisition_interval, lambda: self.acquire_sample(token), token)
        self.scheduler.every(self.classification_interval, lambda: self.run_classification_cycle(token), token)
        logger.info(
            f"Monitor connected (acquisition every {self.acquisition_interval}s, "
            f"classification every {self.classification_interval}s)"
        )
        return True

    def disconnect(self) -> None:
        """Cancel both timers; nothing is appended or published after this returns."""
        with self._lock:
            if self._token is None:
                return
            self._token.cancel()
        logger.info("Monitor disconnected")

    def acquire_sample(self, token: Optional[CancellationToken] = None) -> Optional[Sample]:
        with self._lock:
            emotion = self.simulated_emotion
        sample = self.generator.generate(emotion)
        with self._lock:
            if token is not None and token.cancelled:
                return None
            self.buffer.append(sample)
        return sample

    def run_classification_cycle(self, token: Optional[CancellationToken] = None) -> Optional[str]:
        """Classify the current window and publish the label. Returns None when skipped."""
        with self._lock:
            if token is not None and token.cancelled:
                return None
            window = self.buffer.snapshot()

        if not window:
            logger.debug("Classification skipped: buffer is empty")
            return None

        emotion = self.classifier.classify_window(window)

        with self._lock:
            if token is not None and token.cancelled:
                logger.debug(f"Dropping stale classification result: {emotion}")
                return None
            changed = emotion != self._detected_emotion
            self._detected_emotion = emotion
            self._updated_at = time.time()
            self.classifications += 1

        if changed:
            logger.info(f"Emotion changed to {emotion}")
        return emotion

    def state(self) -> Dict[str, Any]:
        with self._lock:
            latest = self.buffer.latest()
            return {
                'emotion': self._detected_emotion or DEFAULT_EMOTION,
                'detected': self._detected_emotion is not None,
                'connected': self._token is not None and not self._token.cancelled,
                'simulated_emotion': self.simulated_emotion,
                'buffer_length': len(self.buffer),
                'eeg_data': list(latest.channels) if latest else [],
                'classifications': self.classifications,
                'updated_at': self._updated_at,
            }
