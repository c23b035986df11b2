from __future__ import annotations

from types import SimpleNamespace
from typing import List, Optional

import pytest

from neuromood.eeg.data_acquisition import SampleGenerator
from neuromood.eeg.emotion_monitor import EmotionMonitor
from neuromood.eeg.scheduler import ManualScheduler
from neuromood.ml.emotion_classifier import EmotionClassifier


class StubClassifier:
    """Stands in for EmotionClassifier; records every window it is handed."""

    def __init__(self, label: str = "happy") -> None:
        self.label = label
        self.windows: List[int] = []
        self.state = SimpleNamespace(value="ready")
        self.train_error: Optional[str] = None
        self.on_classify = None

    def classify_window(self, samples) -> str:
        self.windows.append(len(samples))
        if self.on_classify is not None:
            self.on_classify()
        return self.label


@pytest.fixture(scope="session")
def trained_classifier() -> EmotionClassifier:
    classifier = EmotionClassifier(seed=0)
    assert classifier.initialize() is not None
    return classifier


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def stub_classifier() -> StubClassifier:
    return StubClassifier()


@pytest.fixture
def monitor(scheduler: ManualScheduler, stub_classifier: StubClassifier) -> EmotionMonitor:
    generator = SampleGenerator(seed=1, clock=lambda: scheduler.now)
    return EmotionMonitor(
        stub_classifier,
        scheduler=scheduler,
        generator=generator,
        buffer_size=10,
        acquisition_interval=0.25,
        classification_interval=1.0,
    )
