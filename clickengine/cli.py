from __future__ import annotations

import argparse
import shlex
import sys
from typing import Callable, TextIO

from clickengine.config import Settings
from clickengine.definition import GameDefinition, default_definition
from clickengine.errors import ClickEngineError, LeaderboardError
from clickengine.events import (
    BuyAutoUnit,
    BuyMultiplier,
    Click,
    KeyPress,
    ResetGame,
    SelectSkin,
    SetPlayerName,
)
from clickengine.formatting import format_compact, format_status
from clickengine.leaderboard.client import LeaderboardClient, LeaderboardEntry
from clickengine.log import configure_logging
from clickengine.persistence import JsonFileStore, PersistenceGateway
from clickengine.session import GameSession, SessionTicker

_PLAY_HELP = """\
Commands:
  click [n]      click n times (default 1)
  auto           buy an auto clicker
  mult           buy a multiplier
  skins          list skins
  skin <id>      select, buy or claim a skin
  name <name>    set your player name
  type <text>    type keys on the keyboard
  status         show your progress
  top            show the leaderboard
  reset          wipe all progress
  quit           save and exit"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clickengine",
        description="clickengine: clicker game and leaderboard server",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO)")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    sub = parser.add_subparsers(dest="command")

    play = sub.add_parser("play", help="Play in the terminal")
    play.add_argument("--save", default=None, help="Save file path")
    play.add_argument("--url", default=None, help="Leaderboard URL")

    status = sub.add_parser("status", help="Show saved progress")
    status.add_argument("--save", default=None, help="Save file path")

    serve = sub.add_parser("serve", help="Run the leaderboard server")
    serve.add_argument("--host", default=None, help="Bind address")
    serve.add_argument("--port", type=int, default=None, help="Port")
    serve.add_argument("--db", default=None, help="sqlite database path")

    top = sub.add_parser("top", help="Print the leaderboard")
    top.add_argument("--url", default=None, help="Leaderboard URL")

    return parser


def format_leaderboard(entries: list[LeaderboardEntry], highlight: str = "") -> str:
    if not entries:
        return "Leaderboard is empty"
    lines = [f"{'#':>4}  {'Player':<24} {'Score':>12}"]
    for e in entries:
        marker = " <" if highlight and e.username == highlight else ""
        lines.append(f"{e.rank:>4}  {e.username:<24} {format_compact(e.score):>12}{marker}")
    return "\n".join(lines)


def _format_skins(session: GameSession) -> str:
    lines = []
    for s in session.economy.skin_statuses():
        if not s.visible:
            continue
        marker = "*" if s.selected else " "
        lines.append(f" {marker} {s.id:<14} {s.display_name:<16} {s.action}")
    return "\n".join(lines)


def _confirm_reset() -> bool:
    answer = input("Are you sure you want to reset the game? All progress will be lost! [y/N] ")
    return answer.strip().lower() in ("y", "yes")


def run_command(
    session: GameSession,
    line: str,
    out: TextIO,
    confirm: Callable[[], bool] = _confirm_reset,
) -> bool:
    """Execute one play-loop command. Returns False when the loop should stop."""
    try:
        words = shlex.split(line)
    except ValueError:
        words = line.split()
    if not words:
        return True
    cmd, args = words[0].lower(), words[1:]
    state = session.state

    if cmd in ("quit", "exit", "q"):
        return False
    if cmd == "help":
        print(_PLAY_HELP, file=out)
    elif cmd == "name":
        if session.dispatch(SetPlayerName(" ".join(args))):
            print(f"Welcome, {state.player_name}!", file=out)
        else:
            print("Name is empty or already set.", file=out)
    elif not state.player_name:
        print("Set your name first: name <your name>", file=out)
    elif cmd in ("click", "c"):
        try:
            count = int(args[0]) if args else 1
        except ValueError:
            print(f"Not a number: {args[0]!r}", file=out)
            return True
        for _ in range(max(count, 0)):
            session.dispatch(Click())
        print(f"Clicks: {format_compact(state.currency)}", file=out)
    elif cmd == "auto":
        if session.dispatch(BuyAutoUnit()):
            print(f"Auto clickers: {state.auto_units}", file=out)
        else:
            print(f"Need {format_compact(state.auto_unit_cost)} clicks.", file=out)
    elif cmd == "mult":
        if session.dispatch(BuyMultiplier()):
            print(f"Multiplier: {state.multiplier:.1f}x", file=out)
        else:
            print(f"Need {format_compact(state.multiplier_cost)} clicks.", file=out)
    elif cmd == "skins":
        print(_format_skins(session), file=out)
    elif cmd == "skin":
        if not args:
            print("Usage: skin <id>", file=out)
        elif session.dispatch(SelectSkin(args[0])):
            print(f"Skin: {state.active_skin}", file=out)
        else:
            print(f"Cannot select {args[0]!r}.", file=out)
    elif cmd == "type":
        for ch in " ".join(args):
            session.dispatch(KeyPress(ch))
    elif cmd == "status":
        print(format_status(state, session.definition), file=out)
    elif cmd == "top":
        print(format_leaderboard(session.refresh_leaderboard(), state.player_name), file=out)
    elif cmd == "reset":
        if session.dispatch(ResetGame(confirmed=confirm())):
            print("Progress wiped.", file=out)
    else:
        print(f"Unknown command {cmd!r}; try 'help'.", file=out)
    return True


def play(
    session: GameSession,
    lines: TextIO = sys.stdin,
    out: TextIO = sys.stdout,
    poll: float = 0.1,
) -> None:
    """Run the command loop while a ticker keeps the timers going between lines."""
    print(format_status(session.state, session.definition), file=out)
    if not session.state.player_name:
        print("Enter your name to start: name <your name>", file=out)
    print("Type 'help' for commands.", file=out)

    ticker = SessionTicker(session, poll)
    ticker.start()
    try:
        for line in lines:
            with ticker.lock:
                keep_going = run_command(session, line, out)
            if not keep_going:
                break
    finally:
        ticker.stop()
        session.flush()


def _build_session(
    definition: GameDefinition, settings: Settings, save: str | None, url: str | None
) -> GameSession:
    store = JsonFileStore(save or settings.save_path)
    gateway = PersistenceGateway(store, definition)
    leaderboard_url = url or settings.leaderboard_url
    client = LeaderboardClient(leaderboard_url) if leaderboard_url else None
    return GameSession(definition, gateway, leaderboard=client)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    settings = Settings.from_env()
    configure_logging(args.log_level or settings.log_level, args.log_file)
    definition = default_definition()

    if args.command == "play":
        play(_build_session(definition, settings, args.save, args.url))

    elif args.command == "status":
        gateway = PersistenceGateway(
            JsonFileStore(args.save or settings.save_path), definition
        )
        print(format_status(gateway.load(), definition))

    elif args.command == "serve":
        from clickengine.leaderboard.server import create_app
        from clickengine.leaderboard.store import LeaderboardStore

        try:
            store = LeaderboardStore(args.db or settings.leaderboard_db)
        except ClickEngineError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        app = create_app(store)
        app.run(host=args.host or settings.host, port=args.port or settings.port)

    elif args.command == "top":
        url = args.url or settings.leaderboard_url
        if not url:
            print("Error: no leaderboard URL (use --url or CLICKENGINE_LEADERBOARD_URL)", file=sys.stderr)
            sys.exit(1)
        try:
            entries = LeaderboardClient(url).fetch()
        except LeaderboardError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        print(format_leaderboard(entries))


if __name__ == "__main__":
    main()
