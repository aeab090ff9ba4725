"""Tests for leaderboard client module."""
import http.client
import io
import json
import urllib.error

import pytest

from clickengine.errors import LeaderboardError
from clickengine.leaderboard.client import LeaderboardClient, LeaderboardEntry, parse_entries

URL = "http://localhost:5000/leaderboard"


class _Response:
    def __init__(self, body, status=200):
        self.status = status
        self._body = body if isinstance(body, bytes) else json.dumps(body).encode("utf-8")

    def read(self):
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class _Opener:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def __call__(self, req, timeout=None):
        self.requests.append((req, timeout))
        if self.error is not None:
            raise self.error
        return self.response


ROWS = [
    {"username": "ada", "score": "90071992547409930", "last_updated": "2024-01-01 00:00:00"},
    {"username": "bob", "score": "12", "last_updated": "2024-01-02 00:00:00"},
]


def test_parse_entries():
    entries = parse_entries(ROWS)
    assert entries[0] == LeaderboardEntry(1, "ada", 90071992547409930, "2024-01-01 00:00:00")
    assert entries[1].rank == 2


@pytest.mark.parametrize(
    "payload",
    [
        {"error": "Database error"},
        [1],
        [{"score": "1"}],
        [{"username": "ada", "score": "1.5"}],
        [{"username": "ada", "score": None}],
    ],
)
def test_parse_entries_rejects(payload):
    with pytest.raises(LeaderboardError):
        parse_entries(payload)


def test_submit_posts_json():
    opener = _Opener(_Response(ROWS))
    client = LeaderboardClient(URL, timeout=3.0, opener=opener)
    entries = client.submit("ada", 1234)
    assert [e.username for e in entries] == ["ada", "bob"]

    req, timeout = opener.requests[0]
    assert timeout == 3.0
    assert req.get_method() == "POST"
    assert req.get_header("Content-type") == "application/json"
    assert json.loads(req.data) == {"username": "ada", "score": 1234}


def test_fetch_uses_get():
    opener = _Opener(_Response([]))
    assert LeaderboardClient(URL, opener=opener).fetch() == []
    assert opener.requests[0][0].get_method() == "GET"


def test_http_error_status():
    error = urllib.error.HTTPError(URL, 500, "Server Error", {}, io.BytesIO(b""))
    client = LeaderboardClient(URL, opener=_Opener(error=error))
    with pytest.raises(LeaderboardError, match="HTTP error! status: 500"):
        client.fetch()


def test_error_status_without_exception():
    client = LeaderboardClient(URL, opener=_Opener(_Response([], status=503)))
    with pytest.raises(LeaderboardError, match="503"):
        client.fetch()


def test_network_failure():
    client = LeaderboardClient(URL, opener=_Opener(error=urllib.error.URLError("refused")))
    with pytest.raises(LeaderboardError, match="request failed"):
        client.submit("ada", 1)


def test_invalid_json_body():
    client = LeaderboardClient(URL, opener=_Opener(_Response(b"<html>")))
    with pytest.raises(LeaderboardError, match="Invalid leaderboard response"):
        client.fetch()


class _TruncatedResponse(_Response):
    def read(self):
        raise http.client.IncompleteRead(b"[{")


def test_relative_url():
    client = LeaderboardClient("leaderboard.php")
    with pytest.raises(LeaderboardError, match="request failed"):
        client.fetch()
    with pytest.raises(LeaderboardError):
        client.submit("ada", 1)


def test_truncated_response():
    client = LeaderboardClient(URL, opener=_Opener(_TruncatedResponse([])))
    with pytest.raises(LeaderboardError, match="request failed"):
        client.fetch()


def test_bad_status_line():
    client = LeaderboardClient(URL, opener=_Opener(error=http.client.BadStatusLine("garbage")))
    with pytest.raises(LeaderboardError):
        client.submit("ada", 1)
