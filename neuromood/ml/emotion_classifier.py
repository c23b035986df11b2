import enum
import math
import logging
import threading
import traceback
from typing import Dict, Mapping, Optional, Sequence

from neuromood.config.settings import (
    CLASSIFIER_SEED,
    DEFAULT_EMOTION,
    EMOTION_LABELS,
    ERROR_THRESHOLD,
    LEARNING_RATE,
    TRAINING_ITERATIONS,
)
from neuromood.eeg.data_acquisition import Sample
from neuromood.eeg.signal_processing import SignalProcessor
from neuromood.errors import NotReadyError
from neuromood.ml.emotion_model import TRAINING_DATA, EmotionModel, train

logger = logging.getLogger(__name__)


class ClassifierState(enum.Enum):
    UNINITIALIZED = 'uninitialized'
    TRAINING = 'training'
    READY = 'ready'


def select_label(scores: Mapping[str, float]) -> str:
    """Pick the highest-scoring label; on an exact tie the first-listed label wins."""
    best_label = None
    best_score = None
    for label in EMOTION_LABELS:
        score = scores[label]
        if not math.isfinite(score):
            raise FloatingPointError(f"Non-finite score for {label}: {score}")
        if best_score is None or score > best_score:
            best_label = label
            best_score = score
    return best_label


class EmotionClassifier:
    """Owns the emotion network from training through inference."""

    def __init__(
        self,
        examples=TRAINING_DATA,
        seed: Optional[int] = CLASSIFIER_SEED,
        iterations: int = TRAINING_ITERATIONS,
        error_thresh: float = ERROR_THRESHOLD,
        learning_rate: float = LEARNING_RATE,
        processor: Optional[SignalProcessor] = None,
    ):
        self.examples = examples
        self.seed = seed
        self.iterations = iterations
        self.error_thresh = error_thresh
        self.learning_rate = learning_rate
        self.processor = processor or SignalProcessor()
        self.train_error: Optional[str] = None
        self._model: Optional[EmotionModel] = None
        self._state = ClassifierState.UNINITIALIZED
        self._lock = threading.Lock()

    @property
    def state(self) -> ClassifierState:
        with self._lock:
            return self._state

    @property
    def is_ready(self) -> bool:
        return self.state is ClassifierState.READY

    @property
    def model(self) -> Optional[EmotionModel]:
        return self._model

    def initialize(self) -> Optional[EmotionModel]:
        """Train the network once. Returns None if another thread is already training."""
        with self._lock:
            if self._state is ClassifierState.READY:
                return self._model
            if self._state is ClassifierState.TRAINING:
                return None
            self._state = ClassifierState.TRAINING
            self.train_error = None

        logger.info("Training emotion classifier...")
        try:
            model = train(
                self.examples,
                seed=self.seed,
                iterations=self.iterations,
                error_thresh=self.error_thresh,
                learning_rate=self.learning_rate,
            )
        except Exception as e:
            logger.error(f"Error training classifier: {e}")
            logger.error(traceback.format_exc())
            with self._lock:
                self.train_error = str(e) or 'Unknown error during training'
                self._state = ClassifierState.UNINITIALIZED
            return None

        with self._lock:
            self._model = model
            self._state = ClassifierState.READY
        logger.info(f"Emotion classifier ready (error={model.error:.5f}, iterations={model.iterations})")
        return model

    def start_training(self) -> threading.Thread:
        """Train on a background thread; classify() answers neutral until it finishes."""
        thread = threading.Thread(target=self.initialize, name='classifier-training', daemon=True)
        thread.start()
        return thread

    def _require_model(self) -> EmotionModel:
        with self._lock:
            if self._state is not ClassifierState.READY or self._model is None:
                raise NotReadyError(f"Classifier is {self._state.value}")
            return self._model

    def scores(self, features: Mapping[str, float]) -> Optional[Dict[str, float]]:
        try:
            model = self._require_model()
        except NotReadyError:
            return None
        return model.scores(features)

    def classify(self, features: Mapping[str, float]) -> str:
        """Return the detected emotion for a normalized feature vector; never raises."""
        try:
            model = self._require_model()
        except NotReadyError as e:
            logger.debug(f"Classification skipped: {e}")
            return DEFAULT_EMOTION

        try:
            return select_label(model.scores(features))
        except Exception as e:
            logger.error(f"Classification error: {e}")
            logger.error(traceback.format_exc())
            return DEFAULT_EMOTION

    def classify_window(self, samples: Sequence[Sample]) -> str:
        """Extract, normalize and classify a window of raw samples."""
        features = self.processor.compute_features(samples)
        return self.classify(features)
