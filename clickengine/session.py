from __future__ import annotations

import logging
import math
import threading
import time
from typing import Any, Callable

from clickengine.cheat import CheatSequenceDetector
from clickengine.definition import GameDefinition
from clickengine.economy import EconomyEngine
from clickengine.errors import LeaderboardError
from clickengine.events import (
    BuyAutoUnit,
    BuyMultiplier,
    Click,
    GameEvent,
    KeyPress,
    ResetGame,
    SelectSkin,
    SetPlayerName,
)
from clickengine.leaderboard.client import LeaderboardClient, LeaderboardEntry
from clickengine.persistence import PersistenceGateway

logger = logging.getLogger(__name__)

Runner = Callable[[Callable[[], None]], Any]


def _run_in_thread(fn: Callable[[], None]) -> threading.Thread:
    thread = threading.Thread(target=fn, name="leaderboard-sync", daemon=True)
    thread.start()
    return thread


class _Interval:
    """A repeating timer driven by an external clock."""

    def __init__(self, period: float, start: float) -> None:
        self.period = period
        self.last_fire = start

    def due(self, now: float) -> bool:
        """True at most once per call; missed periods are not caught up.

        The schedule stays on multiples of *period* from the start time, so
        polling at an uneven rate does not slow the cadence down.
        """
        elapsed = now - self.last_fire
        if elapsed < self.period:
            return False
        self.last_fire += self.period * (elapsed // self.period)
        return True


class GameSession:
    """One player's running game: state, rules, timers and persistence.

    Input events go through ``dispatch``; timer work happens in ``advance``.
    Every handler runs to completion before the next one starts.
    """

    def __init__(
        self,
        definition: GameDefinition,
        gateway: PersistenceGateway,
        leaderboard: LeaderboardClient | None = None,
        clock: Callable[[], float] = time.monotonic,
        runner: Runner | None = None,
    ) -> None:
        self.definition = definition
        self.gateway = gateway
        self.leaderboard = leaderboard
        self.clock = clock
        self._runner = runner or _run_in_thread

        self.state = gateway.load()
        self.economy = EconomyEngine(definition, self.state)
        self.detector = CheatSequenceDetector(definition.config.cheat_code, self.state)
        self.rankings: list[LeaderboardEntry] = []
        self._saved_revision = self.state.revision

        cfg = definition.config
        now = clock()
        self._tick_timer = _Interval(cfg.tick_interval, now)
        self._save_timer = _Interval(cfg.save_interval, now)
        self._sync_timer = _Interval(cfg.leaderboard_interval, now)

        self._handlers: dict[type, Callable[[Any], Any]] = {
            Click: self._on_click,
            KeyPress: self._on_key,
            BuyAutoUnit: self._on_buy_auto_unit,
            BuyMultiplier: self._on_buy_multiplier,
            SelectSkin: self._on_select_skin,
            SetPlayerName: self._on_set_player_name,
            ResetGame: self._on_reset,
        }

    # ── Input ────────────────────────────────────────────────────────

    def dispatch(self, event: GameEvent) -> Any:
        """Route *event* to its handler and return the handler's result."""
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported event: {event!r}")
        return handler(event)

    def _on_click(self, event: Click) -> float:
        return self.economy.click()

    def _on_key(self, event: KeyPress) -> bool:
        """Feed the cheat detector; plain key presses also count as clicks."""
        unlocked = self.detector.feed(event)
        if unlocked:
            self.flush()
        if not event.repeat and not event.text_input_focused and self.state.player_name:
            self.economy.click()
        return unlocked

    def _on_buy_auto_unit(self, event: BuyAutoUnit) -> bool:
        return self._flush_if(self.economy.buy_auto_unit())

    def _on_buy_multiplier(self, event: BuyMultiplier) -> bool:
        return self._flush_if(self.economy.buy_multiplier())

    def _on_select_skin(self, event: SelectSkin) -> bool:
        before = self.state.revision
        ok = self.economy.select_skin(event.skin_id)
        if self.state.revision != before:
            self.flush()
        return ok

    def _on_set_player_name(self, event: SetPlayerName) -> bool:
        ok = self.state.set_player_name(event.name)
        if ok:
            logger.info("New player started game: %s", self.state.player_name)
        return self._flush_if(ok)

    def _on_reset(self, event: ResetGame) -> bool:
        if not event.confirmed:
            logger.info("Reset not confirmed, ignoring")
            return False
        state = self.state
        logger.info(
            "Game reset: player=%s final_score=%s auto_clickers=%d multiplier=%s",
            state.player_name,
            state.currency,
            state.auto_units,
            state.multiplier,
        )
        self.gateway.clear()
        state.reset()
        self.detector.reset()
        self.rankings = []
        self._saved_revision = state.revision
        return True

    def _flush_if(self, changed: bool) -> bool:
        if changed:
            self.flush()
        return changed

    # ── Timers ───────────────────────────────────────────────────────

    def advance(self, now: float | None = None) -> None:
        """Fire whichever timers are due at *now* (defaults to the clock)."""
        if now is None:
            now = self.clock()

        if self._tick_timer.due(now):
            self.economy.tick()

        if self._save_timer.due(now) and self.dirty:
            self.flush()

        if self._sync_timer.due(now) and self.state.player_name and self.state.currency > 0:
            self.sync_leaderboard()

    @property
    def dirty(self) -> bool:
        """True if the state changed since the last successful save."""
        return self.state.revision != self._saved_revision

    def flush(self) -> bool:
        revision = self.state.revision
        ok = self.gateway.save(self.state)
        if ok:
            self._saved_revision = revision
        return ok

    # ── Leaderboard ──────────────────────────────────────────────────

    def sync_leaderboard(self) -> None:
        """Submit the current score in the background."""
        if self.leaderboard is None:
            return
        if not self.state.player_name:
            logger.warning("Attempted to update leaderboard without player name")
            return
        name = self.state.player_name
        score = math.floor(self.state.currency)
        self._runner(lambda: self._push_score(name, score))

    def _push_score(self, name: str, score: int) -> None:
        try:
            self.rankings = self.leaderboard.submit(name, score)
        except LeaderboardError as e:
            logger.error("Leaderboard update failed: player=%s error=%s", name, e)

    def refresh_leaderboard(self) -> list[LeaderboardEntry]:
        """Submit (or just fetch, without a name) and wait for the ranking."""
        if self.leaderboard is None:
            return self.rankings
        try:
            if self.state.player_name:
                self.rankings = self.leaderboard.submit(
                    self.state.player_name, math.floor(self.state.currency)
                )
            else:
                self.rankings = self.leaderboard.fetch()
        except LeaderboardError as e:
            logger.error("Leaderboard update failed: %s", e)
        return self.rankings


class SessionTicker:
    """Calls ``session.advance()`` every *poll* seconds on a daemon thread.

    Anything else touching the session from another thread must hold
    ``lock``.
    """

    def __init__(self, session: GameSession, poll: float = 0.1) -> None:
        self.session = session
        self.poll = poll
        self.lock = threading.Lock()
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._stopped.clear()
        self._thread = threading.Thread(target=self._run, name="session-ticker", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stopped.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def _run(self) -> None:
        while not self._stopped.wait(self.poll):
            with self.lock:
                try:
                    self.session.advance()
                except Exception:
                    logger.exception("Timer update failed")
