import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import torch
import torch.nn as nn
import torch.optim as optim

from neuromood.config.settings import (
    CHANNEL_NAMES,
    EMOTION_LABELS,
    ERROR_THRESHOLD,
    HIDDEN_LAYERS,
    LEARNING_RATE,
    TRAINING_ITERATIONS,
)
from neuromood.errors import EmptyInputError

logger = logging.getLogger(__name__)

TrainingExample = Tuple[Mapping[str, float], str]


def _example(values: Sequence[float], label: str) -> TrainingExample:
    return dict(zip(CHANNEL_NAMES, values)), label


# Hand-written normalized patterns, two per emotion, laid over the
# simulated signal patterns in eeg.data_acquisition.EMOTION_PATTERNS
TRAINING_DATA: List[TrainingExample] = [
    # Happy: left frontal (eeg1, eeg2) dominant, falling off to the right
    _example([0.90, 0.80, 0.75, 0.70, 0.65, 0.65, 0.60, 0.60], 'happy'),
    _example([0.88, 0.82, 0.73, 0.70, 0.66, 0.63, 0.61, 0.58], 'happy'),
    # Sad: right frontal (eeg5, eeg6) dominant
    _example([0.65, 0.70, 0.70, 0.75, 0.85, 0.90, 0.80, 0.75], 'sad'),
    _example([0.67, 0.68, 0.72, 0.74, 0.83, 0.91, 0.79, 0.77], 'sad'),
    # Angry
    _example([0.85, 0.90, 0.85, 0.85, 0.85, 0.90, 0.95, 0.90], 'angry'),
    _example([0.83, 0.91, 0.86, 0.84, 0.86, 0.88, 0.96, 0.89], 'angry'),
    # Calm
    _example([0.65, 0.65, 0.70, 0.70, 0.65, 0.65, 0.65, 0.65], 'calm'),
    _example([0.64, 0.66, 0.69, 0.71, 0.66, 0.64, 0.65, 0.66], 'calm'),
    # Fear
    _example([0.80, 0.85, 0.90, 0.85, 0.95, 0.90, 0.85, 0.95], 'fear'),
    _example([0.81, 0.84, 0.91, 0.86, 0.94, 0.89, 0.86, 0.94], 'fear'),
    # Surprise
    _example([0.95, 0.90, 0.85, 0.80, 0.85, 0.90, 0.95, 0.85], 'surprise'),
    _example([0.94, 0.91, 0.84, 0.81, 0.86, 0.89, 0.94, 0.86], 'surprise'),
    # Neutral
    _example([0.75, 0.75, 0.75, 0.75, 0.75, 0.75, 0.75, 0.75], 'neutral'),
    _example([0.74, 0.76, 0.75, 0.74, 0.76, 0.75, 0.74, 0.76], 'neutral'),
]


class EmotionNet(nn.Module):
    """Feed-forward network with sigmoid activations on every layer."""

    def __init__(self, input_size=len(CHANNEL_NAMES), hidden_layers=HIDDEN_LAYERS, output_size=len(EMOTION_LABELS)):
        super().__init__()
        layers = []
        size = input_size
        for hidden in hidden_layers:
            layers += [nn.Linear(size, hidden), nn.Sigmoid()]
            size = hidden
        layers += [nn.Linear(size, output_size), nn.Sigmoid()]
        self.layers = nn.Sequential(*layers)

    def forward(self, x):
        return self.layers(x)


class EmotionModel:
    """A trained EmotionNet plus the outcome of its training run."""

    def __init__(self, net: EmotionNet, error: float, iterations: int):
        self.net = net
        self.error = error
        self.iterations = iterations
        self.net.eval()

    @property
    def converged(self) -> bool:
        return self.error < ERROR_THRESHOLD

    def scores(self, features: Mapping[str, float]) -> Dict[str, float]:
        """Run the network forward and return one score per emotion label."""
        inputs = torch.tensor([[float(features[name]) for name in CHANNEL_NAMES]], dtype=torch.float32)
        with torch.no_grad():
            outputs = self.net(inputs)[0]
        return {label: float(score) for label, score in zip(EMOTION_LABELS, outputs)}


def _to_tensors(examples: Sequence[TrainingExample]):
    inputs = []
    targets = []
    for features, label in examples:
        if label not in EMOTION_LABELS:
            raise ValueError(f"Unknown emotion label in training data: {label!r}")
        inputs.append([float(features[name]) for name in CHANNEL_NAMES])
        target = [0.0] * len(EMOTION_LABELS)
        target[EMOTION_LABELS.index(label)] = 1.0
        targets.append(target)
    return torch.tensor(inputs, dtype=torch.float32), torch.tensor(targets, dtype=torch.float32)


def train(
    examples: Sequence[TrainingExample] = TRAINING_DATA,
    seed: Optional[int] = None,
    iterations: int = TRAINING_ITERATIONS,
    error_thresh: float = ERROR_THRESHOLD,
    learning_rate: float = LEARNING_RATE,
) -> EmotionModel:
    """Train a fresh network on labeled, normalized feature vectors.

    Stops once the mean squared error drops below error_thresh or after
    iterations passes over the data, whichever comes first. A run that
    exhausts its budget still returns a usable model.
    """
    if not examples:
        raise EmptyInputError("No training examples provided")

    X, y = _to_tensors(examples)

    if seed is None:
        net = EmotionNet()
    else:
        # seed only the weight initialization, leave the global RNG alone
        with torch.random.fork_rng(devices=[]):
            torch.manual_seed(seed)
            net = EmotionNet()

    criterion = nn.MSELoss()
    optimizer = optim.Adam(net.parameters(), lr=learning_rate)

    net.train()
    error = float('inf')
    iteration = 0
    for iteration in range(1, iterations + 1):
        optimizer.zero_grad()
        loss = criterion(net(X), y)
        error = loss.item()
        if error < error_thresh:
            break
        loss.backward()
        optimizer.step()

    if error < error_thresh:
        logger.info(f"Training converged: error={error:.5f} after {iteration} iterations")
    else:
        logger.warning(f"Training stopped at iteration budget: error={error:.5f} after {iteration} iterations")

    return EmotionModel(net, error, iteration)
