"""Caller-supplied time budget threaded through page-level OCR calls."""

import time

from .errors import DeadlineExceeded


class Deadline:
    """A monotonic-clock deadline.

    Args:
        timeout_seconds: Total budget in seconds. ``None`` means unbounded.
    """

    def __init__(self, timeout_seconds: float | None = None) -> None:
        self.timeout_seconds = timeout_seconds
        self._expires_at = (
            time.monotonic() + timeout_seconds if timeout_seconds is not None else None
        )

    def remaining(self) -> float | None:
        """Return the seconds left, or ``None`` for an unbounded deadline."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0.0

    def check(self, stage: str = "processing") -> None:
        """Raise if the budget is spent.

        Args:
            stage: Short description of the work about to start, used
                in the error message.

        Raises:
            DeadlineExceeded: If no time is left.
        """
        if self.expired():
            raise DeadlineExceeded(
                f"Deadline of {self.timeout_seconds}s exceeded before {stage}"
            )
