from __future__ import annotations

import math

import pytest

from neuromood.config.settings import CHANNEL_COUNT, CHANNEL_NAMES
from neuromood.eeg.data_acquisition import Sample
from neuromood.eeg.signal_processing import SignalProcessor, extract_features, normalize_features
from neuromood.errors import DomainError, EmptyInputError


def _window(*rows):
    return [Sample(channels=tuple(row), timestamp=float(i)) for i, row in enumerate(rows)]


def test_extract_features_averages_each_channel() -> None:
    window = _window([0.0] * CHANNEL_COUNT, [10.0] * CHANNEL_COUNT, [float(i) for i in range(CHANNEL_COUNT)])
    features = extract_features(window)

    assert list(features) == CHANNEL_NAMES
    assert features["eeg1"] == pytest.approx(10.0 / 3)
    assert features["eeg8"] == pytest.approx(17.0 / 3)


def test_extract_features_rejects_empty_window() -> None:
    with pytest.raises(EmptyInputError, match="No EEG data"):
        extract_features([])


def test_empty_input_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        extract_features([])


def test_normalize_maps_bounds_to_unit_interval() -> None:
    result = normalize_features({"eeg1": -50.0, "eeg2": 0.0, "eeg3": 50.0})
    assert result == {"eeg1": 0.0, "eeg2": 0.5, "eeg3": 1.0}


def test_normalize_clamps_out_of_range_values() -> None:
    result = normalize_features({"eeg1": -80.0, "eeg2": 120.0})
    assert result == {"eeg1": 0.0, "eeg2": 1.0}


@pytest.mark.parametrize("low, high", [(1.0, 1.0), (5.0, -5.0), (-math.inf, 1.0), (0.0, math.nan)])
def test_normalize_rejects_bad_domain(low: float, high: float) -> None:
    with pytest.raises(DomainError):
        normalize_features({"eeg1": 0.0}, low, high)


def test_processor_rejects_bad_domain_up_front() -> None:
    with pytest.raises(DomainError):
        SignalProcessor(low=10.0, high=0.0)


def test_processor_outputs_normalized_means() -> None:
    window = _window([40.0] * CHANNEL_COUNT, [20.0] * CHANNEL_COUNT)
    features = SignalProcessor().compute_features(window)
    assert all(value == pytest.approx(0.8) for value in features.values())


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_normalize_rejects_non_finite_features(value: float) -> None:
    with pytest.raises(DomainError, match="eeg2"):
        normalize_features({"eeg1": 0.0, "eeg2": value})
