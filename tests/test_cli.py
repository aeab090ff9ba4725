"""Tests for the command-line play loop and entry point."""
import io
import json
import time

import pytest

from clickengine import cli
from clickengine.cli import format_leaderboard, play, run_command
from clickengine.definition import default_definition
from clickengine.leaderboard.client import LeaderboardEntry
from clickengine.persistence import STATE_KEY, JsonFileStore, MemoryStore, PersistenceGateway
from clickengine.session import GameSession


def _make_session(store=None, name="Ada") -> GameSession:
    defn = default_definition()
    session = GameSession(
        defn,
        PersistenceGateway(store if store is not None else MemoryStore(), defn),
        clock=lambda: 0.0,
        runner=lambda fn: fn(),
    )
    if name:
        session.state.set_player_name(name)
    return session


def _make_idle_session(clock):
    defn = default_definition()
    return GameSession(
        defn,
        PersistenceGateway(MemoryStore(), defn),
        clock=clock,
        runner=lambda fn: fn(),
    )


def _run(session, line, confirm=lambda: False) -> tuple[bool, str]:
    out = io.StringIO()
    keep_going = run_command(session, line, out, confirm=confirm)
    return keep_going, out.getvalue()


# ── run_command ──────────────────────────────────────────────────────


def test_name_required_first():
    session = _make_session(name=None)
    _, text = _run(session, "click")
    assert "Set your name first" in text
    assert session.state.currency == 0

    _, text = _run(session, "name Ada Lovelace")
    assert "Welcome, Ada Lovelace!" in text
    _, text = _run(session, "name Bob")
    assert "already set" in text


def test_click():
    session = _make_session()
    _, text = _run(session, "click 5")
    assert session.state.currency == 5
    assert text.strip() == "Clicks: 5"

    _run(session, "c")
    assert session.state.currency == 6


def test_click_bad_count():
    session = _make_session()
    _, text = _run(session, "click lots")
    assert "Not a number" in text
    assert session.state.currency == 0


def test_purchases():
    session = _make_session()
    _, text = _run(session, "mult")
    assert "Need 10 clicks." in text

    _run(session, "click 10")
    _, text = _run(session, "mult")
    assert "Multiplier: 2.0x" in text

    _, text = _run(session, "auto")
    assert text.startswith("Need")


def test_skins():
    session = _make_session()
    _, text = _run(session, "skins")
    assert "antonsa" in text
    assert "henry" not in text

    _, text = _run(session, "skin antonsa")
    assert "Skin: antonsa" in text
    assert session.state.currency == 100_000

    _, text = _run(session, "skin ghost")
    assert "Cannot select" in text
    _, text = _run(session, "skin")
    assert "Usage" in text


def test_type_cheat_code():
    session = _make_session()
    _run(session, "type sigmaboy")
    assert session.state.cheat_unlocked is True
    # each key press also counts as a click
    assert session.state.currency == 8
    _, text = _run(session, "skins")
    assert "henry" in text


def test_reset_needs_confirmation():
    session = _make_session()
    _run(session, "click 3")
    _, text = _run(session, "reset", confirm=lambda: False)
    assert text == ""
    assert session.state.currency == 3

    _, text = _run(session, "reset", confirm=lambda: True)
    assert "Progress wiped." in text
    assert session.state.currency == 0
    assert session.state.player_name == ""


def test_status_and_help():
    session = _make_session()
    _, text = _run(session, "status")
    assert "Player: Ada" in text
    _, text = _run(session, "help")
    assert "Commands:" in text


def test_top_without_client():
    _, text = _run(_make_session(), "top")
    assert "Leaderboard is empty" in text


def test_quit_and_unknown():
    session = _make_session()
    assert _run(session, "quit")[0] is False
    assert _run(session, "")[0] is True
    keep_going, text = _run(session, "dance")
    assert keep_going is True
    assert "Unknown command" in text


# ── play loop ────────────────────────────────────────────────────────


def test_play_saves_on_exit():
    store = MemoryStore()
    session = _make_session(store, name=None)
    lines = io.StringIO("name Ada\nclick 3\nquit\nclick 100\n")
    out = io.StringIO()
    play(session, lines, out)

    assert session.state.currency == 3
    saved = json.loads(store.data[STATE_KEY])
    assert saved["currency"] == 3
    assert saved["playerName"] == "Ada"
    assert "Enter your name to start" in out.getvalue()


def test_play_timers_run_while_idle():
    now = [0.0]
    session = _make_idle_session(lambda: now[0])
    session.state.auto_units = 1

    def lines():
        yield "name Ada"
        # no input for three tick intervals
        for t in (1.0, 2.0, 3.0):
            now[0] = t
            deadline = time.monotonic() + 5.0
            while session.state.currency < t and time.monotonic() < deadline:
                time.sleep(0.005)
        yield "quit"

    play(session, lines(), io.StringIO(), poll=0.005)
    assert session.state.currency == 3
    assert session.state.player_name == "Ada"


# ── formatting ───────────────────────────────────────────────────────


def test_format_leaderboard():
    entries = [
        LeaderboardEntry(1, "ada", 2_500_000),
        LeaderboardEntry(2, "bob", 12),
    ]
    text = format_leaderboard(entries, highlight="bob")
    lines = text.splitlines()
    assert len(lines) == 3
    assert "2.5 M" in lines[1]
    assert lines[2].endswith("<")
    assert not lines[1].endswith("<")


def test_format_leaderboard_empty():
    assert format_leaderboard([]) == "Leaderboard is empty"


# ── main ─────────────────────────────────────────────────────────────


@pytest.fixture
def quiet_main(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda *a, **k: None)
    for var in ("CLICKENGINE_LEADERBOARD_URL", "CLICKENGINE_SAVE_PATH", "CLICKENGINE_PORT"):
        monkeypatch.delenv(var, raising=False)


def test_main_no_command(quiet_main, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main([])
    assert exc.value.code == 0
    assert "usage" in capsys.readouterr().out


def test_main_status(quiet_main, tmp_path, capsys):
    path = tmp_path / "save.json"
    defn = default_definition()
    session = _make_session(JsonFileStore(path))
    session.state.add_currency(1234)
    session.flush()

    cli.main(["status", "--save", str(path)])
    out = capsys.readouterr().out
    assert "Player: Ada" in out
    assert "Clicks: 1,234" in out
    assert "One thousand two hundred thirty-four" in out
    assert defn.config.name in out


def test_main_top_requires_url(quiet_main, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["top"])
    assert exc.value.code == 1
    assert "no leaderboard URL" in capsys.readouterr().err
