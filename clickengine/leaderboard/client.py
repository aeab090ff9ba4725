from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Callable

from clickengine.errors import LeaderboardError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class LeaderboardEntry:
    """One ranked leaderboard row. Scores are exact integers."""

    rank: int
    username: str
    score: int
    last_updated: str = ""


def parse_entries(payload: Any) -> list[LeaderboardEntry]:
    """Validate a ranked-list response body."""
    if not isinstance(payload, list):
        raise LeaderboardError(f"Expected a list of entries, got {type(payload).__name__}")
    entries: list[LeaderboardEntry] = []
    for i, row in enumerate(payload):
        if not isinstance(row, dict):
            raise LeaderboardError(f"Entry {i} is not an object")
        username = row.get("username")
        raw_score = row.get("score")
        if not isinstance(username, str):
            raise LeaderboardError(f"Entry {i} has no username")
        # Parse from the decimal string, never through float
        text = str(raw_score).strip() if isinstance(raw_score, (str, int)) else ""
        if not text.isdigit():
            raise LeaderboardError(f"Entry {i} has invalid score {raw_score!r}")
        entries.append(
            LeaderboardEntry(
                rank=i + 1,
                username=username,
                score=int(text),
                last_updated=str(row.get("last_updated") or ""),
            )
        )
    return entries


class LeaderboardClient:
    """Pushes scores to and fetches rankings from the leaderboard endpoint."""

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        opener: Callable[..., Any] | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._open = opener or urllib.request.urlopen

    def submit(self, username: str, score: int) -> list[LeaderboardEntry]:
        """Submit *score* for *username*; returns the updated ranking."""
        body = json.dumps({"username": username, "score": int(score)}).encode("utf-8")
        return self._request("POST", body)

    def fetch(self) -> list[LeaderboardEntry]:
        return self._request("GET")

    def _request(self, method: str, body: bytes | None = None) -> list[LeaderboardEntry]:
        headers = {"Content-Type": "application/json"} if body is not None else {}
        try:
            # Request() rejects relative or unknown-scheme URLs with ValueError
            req = urllib.request.Request(self.url, data=body, headers=headers, method=method)
            with self._open(req, timeout=self.timeout) as response:
                status = getattr(response, "status", 200)
                raw = response.read()
        except urllib.error.HTTPError as e:
            raise LeaderboardError(f"HTTP error! status: {e.code}") from e
        except (urllib.error.URLError, OSError, http.client.HTTPException, ValueError) as e:
            raise LeaderboardError(f"Leaderboard request failed: {e}") from e

        if status >= 400:
            raise LeaderboardError(f"HTTP error! status: {status}")
        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise LeaderboardError(f"Invalid leaderboard response: {e}") from e
        return parse_entries(payload)
