from __future__ import annotations

import logging
import sqlite3
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from clickengine.errors import StorageError
from clickengine.leaderboard.scores import compare_scores, normalize_score

logger = logging.getLogger(__name__)

TOP_LIMIT = 100

_SCHEMA = """
CREATE TABLE IF NOT EXISTS leaderboard (
    username TEXT PRIMARY KEY,
    score TEXT NOT NULL,
    last_updated TEXT NOT NULL
)
"""

# Scores are normalized digit strings without leading zeros, so ordering by
# length then text is numeric ordering at any size.
_TOP_QUERY = """
SELECT username, score, last_updated FROM leaderboard
ORDER BY length(score) DESC, score DESC, username ASC
LIMIT ?
"""


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of a score submission."""

    username: str
    score: str
    previous_score: str | None
    new_high_score: bool


class LeaderboardStore:
    """High-score table keyed by username, backed by sqlite."""

    def __init__(self, path: str | Path = ":memory:") -> None:
        self.path = str(path)
        self._lock = threading.Lock()
        try:
            self._conn = sqlite3.connect(self.path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            with self._conn:
                self._conn.execute(_SCHEMA)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open leaderboard database {self.path}: {e}") from e

    def close(self) -> None:
        self._conn.close()

    def submit(self, username: str, score: Any) -> SubmitResult:
        """Record *score* for *username*, keeping the higher of old and new.

        Raises InvalidScore for unusable scores and StorageError on database
        failures.
        """
        digits = normalize_score(score)
        now = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        try:
            with self._lock, self._conn:
                row = self._conn.execute(
                    "SELECT score FROM leaderboard WHERE username = ? LIMIT 1",
                    (username,),
                ).fetchone()
                previous = row["score"] if row else None
                is_new_high = previous is None or compare_scores(digits, previous) > 0
                kept = digits if is_new_high else previous
                self._conn.execute(
                    "INSERT INTO leaderboard (username, score, last_updated) "
                    "VALUES (?, ?, ?) "
                    "ON CONFLICT(username) DO UPDATE SET "
                    "score = excluded.score, last_updated = excluded.last_updated",
                    (username, kept, now),
                )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to submit score for {username!r}: {e}") from e

        if is_new_high:
            logger.info(
                "New high score: username=%s new_score=%s previous_score=%s",
                username,
                digits,
                previous or "0",
            )
        return SubmitResult(
            username=username,
            score=kept,
            previous_score=previous,
            new_high_score=is_new_high,
        )

    def top(self, limit: int = TOP_LIMIT) -> list[dict[str, str]]:
        """Ranked rows, highest score first."""
        try:
            with self._lock:
                rows = self._conn.execute(_TOP_QUERY, (limit,)).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read leaderboard: {e}") from e
        return [
            {
                "username": r["username"],
                "score": r["score"],
                "last_updated": r["last_updated"],
            }
            for r in rows
        ]

    def get_score(self, username: str) -> str | None:
        try:
            with self._lock:
                row = self._conn.execute(
                    "SELECT score FROM leaderboard WHERE username = ?", (username,)
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read score for {username!r}: {e}") from e
        return row["score"] if row else None
