from __future__ import annotations


class ClickEngineError(Exception):
    """Base class for clickengine errors."""


class InsufficientFunds(ClickEngineError):
    """Raised by ``ProgressionState.spend`` when the balance is too low."""

    def __init__(self, amount: float, available: float) -> None:
        super().__init__(f"Cannot spend {amount!r}: only {available!r} available")
        self.amount = amount
        self.available = available


class SkinLocked(ClickEngineError):
    """Raised when activating a skin that has not been unlocked."""


class InvalidScore(ClickEngineError):
    """A leaderboard score that is not a non-negative number."""


class StorageError(ClickEngineError):
    """The leaderboard database could not be read or written."""


class LeaderboardError(ClickEngineError):
    """A leaderboard request failed or returned an unusable payload."""
