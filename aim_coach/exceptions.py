"""
Exceptions Module
================
Error taxonomy for attempt ingestion and analysis.
"""

from typing import Optional


class AimCoachError(Exception):
    """Base class for all aim coach errors."""


class EmptyBatchError(AimCoachError):
    """Raised when no valid attempts remain after ingestion."""

    def __init__(self, message: str = "No valid attempts in batch", dropped: int = 0):
        super().__init__(message)
        self.dropped = dropped


class MalformedRowError(AimCoachError):
    """Raised for a single input row that cannot become an Attempt."""

    def __init__(self, row_number: int, reason: str):
        super().__init__(f"Row {row_number}: {reason}")
        self.row_number = row_number
        self.reason = reason


class InvalidWindowError(AimCoachError):
    """Raised when a rolling window size is below 1."""

    def __init__(self, window_size: Optional[int]):
        super().__init__(f"Window size must be >= 1, got {window_size!r}")
        self.window_size = window_size


class ConfigurationError(AimCoachError):
    """Raised for unreadable settings or an unknown sport."""
