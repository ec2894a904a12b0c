"""
Exceptions raised by the scam URL pipeline.

Every failure surfaces synchronously to the caller; nothing here retries.
"""


class ScamURLError(Exception):
    """Base class for all pipeline errors."""


class InvalidURLError(ScamURLError, ValueError):
    """The URL cannot be parsed into a hostname."""


class DatasetError(ScamURLError):
    """The dataset source is missing, malformed, or has an unusable row."""


class TrainingError(ScamURLError):
    """The training set is empty or inconsistent."""


class ModelNotFoundError(ScamURLError, FileNotFoundError):
    """No trained model exists at the storage location."""


class IncompatibleModelError(ModelNotFoundError):
    """The stored model is unreadable or was trained on a different feature layout."""
