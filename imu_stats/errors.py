"""Error kinds raised by the windowed statistics core."""

from __future__ import annotations


class ImuStatsError(ValueError):
    """Base class for run-aborting errors of the core."""


class PreconditionError(ImuStatsError):
    """The sample stream cannot produce even one window."""

    def __init__(self, total_samples: int, window_length: int):
        self.total_samples = total_samples
        self.window_length = window_length
        super().__init__(
            f"insufficient samples for one window: total_samples={total_samples} "
            f"< window_length={window_length}"
        )


class InvalidWindowError(ImuStatsError):
    """A work unit received a window that does not match the configured shape."""
