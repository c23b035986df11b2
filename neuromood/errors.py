class NeuroMoodError(Exception):
    """Base error for the NeuroMood service."""


class EmptyInputError(NeuroMoodError, ValueError):
    """Raised when feature extraction or training gets no data."""


class DomainError(NeuroMoodError, ValueError):
    """Raised when normalization bounds are invalid (high <= low)."""


class TransportError(NeuroMoodError):
    """Raised when a remote call (chat completion, track search) fails."""


class NotReadyError(NeuroMoodError):
    """Raised internally when classification is requested before training finished."""
