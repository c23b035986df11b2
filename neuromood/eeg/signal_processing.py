import math
import logging
from typing import Dict, Mapping, Sequence

import numpy as np

from neuromood.config.settings import CHANNEL_NAMES, SIGNAL_MAX, SIGNAL_MIN
from neuromood.eeg.data_acquisition import Sample
from neuromood.errors import DomainError, EmptyInputError

logger = logging.getLogger(__name__)


def extract_features(samples: Sequence[Sample]) -> Dict[str, float]:
    """Average each channel over the window."""
    if not samples:
        raise EmptyInputError("No EEG data provided for feature extraction")

    data = np.asarray([sample.channels for sample in samples], dtype=np.float64)
    means = data.mean(axis=0)
    return {name: float(value) for name, value in zip(CHANNEL_NAMES, means)}


def _check_domain(low: float, high: float) -> None:
    if not (math.isfinite(low) and math.isfinite(high)):
        raise DomainError(f"Normalization bounds must be finite, got [{low}, {high}]")
    if high <= low:
        raise DomainError(f"Normalization requires high > low, got [{low}, {high}]")


def normalize_features(
    features: Mapping[str, float],
    low: float = SIGNAL_MIN,
    high: float = SIGNAL_MAX,
) -> Dict[str, float]:
    """Map features from [low, high] to [0, 1], clamping out-of-range values."""
    _check_domain(low, high)
    bad = [name for name, value in features.items() if not math.isfinite(value)]
    if bad:
        raise DomainError(f"Non-finite feature values for {', '.join(bad)}")

    span = high - low
    return {
        name: float(np.clip((value - low) / span, 0.0, 1.0))
        for name, value in features.items()
    }


class SignalProcessor:
    """Window-to-classifier-input pipeline for a fixed normalization domain."""

    def __init__(self, low: float = SIGNAL_MIN, high: float = SIGNAL_MAX):
        _check_domain(low, high)
        self.low = low
        self.high = high

    def compute_features(self, samples: Sequence[Sample]) -> Dict[str, float]:
        features = extract_features(samples)
        normalized = normalize_features(features, self.low, self.high)
        logger.debug(f"Computed features from {len(samples)} samples: {normalized}")
        return normalized
