from __future__ import annotations


class LinearBackoff:
    """Linear backoff for retry delays.

    Attempt index i (starting at 0) sleeps (i + 1) units before the next
    attempt, so the default unit of one second gives 1s, 2s, 3s, ..."""

    def __init__(self, unit_seconds: float = 1.0) -> None:
        if unit_seconds < 0:
            raise ValueError("unit_seconds must be >= 0")
        self._unit = unit_seconds

    def get_sleep(self, attempt: int) -> float:
        """Calculate the sleep duration in seconds after a failed attempt."""
        return (max(attempt, 0) + 1) * self._unit
