import logging
import argparse
from typing import Dict, Optional

from neuromood.config.settings import CLASSIFIER_SEED, EMOTION_LABELS
from neuromood.eeg.data_acquisition import SampleGenerator
from neuromood.ml.emotion_classifier import EmotionClassifier

logger = logging.getLogger(__name__)


def evaluate_model(
    classifier: EmotionClassifier,
    generator: SampleGenerator,
    windows_per_label: int = 20,
    window_size: int = 20,
) -> Dict[str, float]:
    """Per-label accuracy of classify_window over windows biased toward each label."""
    if windows_per_label <= 0 or window_size <= 0:
        raise ValueError("windows_per_label and window_size must be positive")

    accuracy = {}
    for label in EMOTION_LABELS:
        hits = 0
        for _ in range(windows_per_label):
            window = generator.generate_window(window_size, label)
            if classifier.classify_window(window) == label:
                hits += 1
        accuracy[label] = hits / windows_per_label
    return accuracy


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Train the emotion classifier and report accuracy on simulated windows")
    parser.add_argument('--seed', type=int, default=CLASSIFIER_SEED, help="seed for weight initialization")
    parser.add_argument('--windows', type=int, default=20, help="evaluation windows per label")
    parser.add_argument('--window-size', type=int, default=20, help="samples per evaluation window")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    classifier = EmotionClassifier(seed=args.seed)
    model = classifier.initialize()
    if model is None:
        logger.error(f"Training failed: {classifier.train_error}")
        return 1

    logger.info(f"Final error: {model.error:.5f} after {model.iterations} iterations "
                f"({'converged' if model.converged else 'budget exhausted'})")

    accuracy = evaluate_model(classifier, SampleGenerator(seed=args.seed), args.windows, args.window_size)
    for label, value in accuracy.items():
        logger.info(f"{label:>9}: {value:.2%}")
    logger.info(f"Mean accuracy: {sum(accuracy.values()) / len(accuracy):.2%}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
