"""
Error types raised by the bagging ensemble.

Both subclass the built-in exceptions the rest of the package raises, so
callers catching ``ValueError`` / ``RuntimeError`` keep working.
"""


class UntrainedModelError(RuntimeError):
    """Raised when a classifier is queried before ``train`` was called."""


class InvalidConfigurationError(ValueError):
    """Raised when an ensemble is trained with an invalid configuration."""
