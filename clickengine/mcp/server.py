"""MCP server wrapping a GameSession for interactive AI playtesting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from mcp.server.fastmcp import FastMCP

from clickengine.definition import GameDefinition
from clickengine.events import BuyAutoUnit, BuyMultiplier, SelectSkin, SetPlayerName
from clickengine.formatting import format_compact, number_to_words
from clickengine.persistence import MemoryStore, PersistenceGateway
from clickengine.session import GameSession

# Maximum seconds per wait() call (24 hours)
_MAX_WAIT = 86400
# Maximum clicks per click() call
_MAX_CLICKS = 1000


class _ManualClock:
    """Clock advanced only by wait()."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@dataclass
class _GameHolder:
    """Holds the active definition and session."""

    definition: GameDefinition
    session: GameSession
    clock: _ManualClock


def _new_session(definition: GameDefinition, clock: _ManualClock) -> GameSession:
    gateway = PersistenceGateway(MemoryStore(), definition)
    return GameSession(definition, gateway, clock=clock)


def _make_holder(definition: GameDefinition) -> _GameHolder:
    clock = _ManualClock()
    return _GameHolder(
        definition=definition,
        session=_new_session(definition, clock),
        clock=clock,
    )


# ── Tool logic functions (testable without MCP protocol) ────────────


def _tool_get_game_state(holder: _GameHolder) -> dict[str, Any]:
    state = holder.session.state
    economy = holder.session.economy
    return {
        "player_name": state.player_name,
        "currency": round(state.currency, 2),
        "currency_display": format_compact(state.currency),
        "currency_words": number_to_words(state.currency),
        "auto_units": state.auto_units,
        "multiplier": state.multiplier,
        "auto_unit_cost": state.auto_unit_cost,
        "multiplier_cost": state.multiplier_cost,
        "income_per_second": economy.income_per_second(),
        "active_skin": state.active_skin,
        "unlocked_skins": sorted(state.unlocked_skins),
        "cheat_unlocked": state.cheat_unlocked,
        "time_elapsed": holder.clock.now,
    }


def _tool_list_skins(holder: _GameHolder) -> dict[str, Any]:
    economy = holder.session.economy
    skins = []
    for s in economy.skin_statuses():
        if not s.visible:
            continue
        entry: dict[str, Any] = {
            "id": s.id,
            "display_name": s.display_name,
            "unlocked": s.unlocked,
            "selected": s.selected,
            "affordable": s.affordable,
            "action": s.action,
        }
        if s.is_reward:
            entry["reward"] = s.reward
        else:
            entry["cost"] = s.cost
            if not s.unlocked:
                entry["time_to_afford"] = economy.time_to_afford(s.cost)
        skins.append(entry)
    return {"skins": skins}


def _tool_click(holder: _GameHolder, count: int = 1) -> dict[str, Any]:
    if count < 1:
        return {"error": "Count must be at least 1"}
    if count > _MAX_CLICKS:
        return {"error": f"Count cannot exceed {_MAX_CLICKS}"}

    total = 0.0
    for _ in range(count):
        total += holder.session.economy.click()
    return {
        "clicks": count,
        "total_earned": round(total, 2),
        "new_balance": round(holder.session.state.currency, 2),
    }


def _tool_buy_auto_unit(holder: _GameHolder) -> dict[str, Any]:
    state = holder.session.state
    cost = state.auto_unit_cost
    if not holder.session.dispatch(BuyAutoUnit()):
        return {"success": False, "reason": "Cannot afford", "cost": cost}
    return {
        "success": True,
        "auto_units": state.auto_units,
        "next_cost": state.auto_unit_cost,
    }


def _tool_buy_multiplier(holder: _GameHolder) -> dict[str, Any]:
    state = holder.session.state
    cost = state.multiplier_cost
    if not holder.session.dispatch(BuyMultiplier()):
        return {"success": False, "reason": "Cannot afford", "cost": cost}
    return {
        "success": True,
        "multiplier": state.multiplier,
        "next_cost": state.multiplier_cost,
    }


def _tool_select_skin(holder: _GameHolder, skin_id: str) -> dict[str, Any]:
    skin = holder.definition.get_skin(skin_id)
    if skin is None:
        return {"error": f"Unknown skin: {skin_id!r}"}
    state = holder.session.state
    if skin.requires_cheat and not state.cheat_unlocked and not state.is_unlocked(skin_id):
        return {"success": False, "reason": "Hidden until sigma mode is unlocked"}
    if not holder.session.dispatch(SelectSkin(skin_id)):
        return {"success": False, "reason": "Cannot afford"}
    return {
        "success": True,
        "active_skin": state.active_skin,
        "new_balance": round(state.currency, 2),
    }


def _tool_type_keys(holder: _GameHolder, text: str) -> dict[str, Any]:
    unlocked = holder.session.detector.feed_text(text)
    if unlocked:
        holder.session.flush()
    return {
        "typed": len(text),
        "cheat_unlocked_now": unlocked,
        "cheat_unlocked": holder.session.state.cheat_unlocked,
    }


def _tool_wait(holder: _GameHolder, seconds: float) -> dict[str, Any]:
    if seconds <= 0:
        return {"error": "Seconds must be positive"}
    if seconds > _MAX_WAIT:
        return {"error": f"Cannot wait more than {_MAX_WAIT} seconds (24h) per call"}

    state = holder.session.state
    before = state.currency

    # Subdivide into 1-second steps so each tick interval fires
    remaining = seconds
    while remaining > 0:
        dt = min(1.0, remaining)
        holder.clock.now += dt
        holder.session.advance()
        remaining -= dt

    return {
        "waited": seconds,
        "time_elapsed": round(holder.clock.now, 2),
        "earned": round(state.currency - before, 2),
        "currency": round(state.currency, 2),
    }


def _tool_set_player_name(holder: _GameHolder, name: str) -> dict[str, Any]:
    if not holder.session.dispatch(SetPlayerName(name)):
        return {"success": False, "reason": "Name is empty or already set"}
    return {"success": True, "player_name": holder.session.state.player_name}


def _tool_new_game(holder: _GameHolder) -> dict[str, Any]:
    holder.clock.now = 0.0
    holder.session = _new_session(holder.definition, holder.clock)
    return {"success": True, "message": "Game reset to initial state"}


# ── Server factory ──────────────────────────────────────────────────


def create_server(definition: GameDefinition) -> FastMCP:
    """Create an MCP server wrapping a GameSession for the given definition."""
    holder = _make_holder(definition)

    mcp = FastMCP(
        name=f"clickengine: {definition.config.name}",
    )

    @mcp.tool()
    def get_game_state() -> dict[str, Any]:
        """Get the current progress: currency, auto units, multiplier, costs, skins, cheat flag."""
        return _tool_get_game_state(holder)

    @mcp.tool()
    def list_skins() -> dict[str, Any]:
        """List visible skins with cost or reward, unlock state and time-to-afford."""
        return _tool_list_skins(holder)

    @mcp.tool()
    def click(count: int = 1) -> dict[str, Any]:
        """Click N times (max 1000). Returns total earned."""
        return _tool_click(holder, count)

    @mcp.tool()
    def buy_auto_unit() -> dict[str, Any]:
        """Buy an auto clicker. Returns success/failure and the next cost."""
        return _tool_buy_auto_unit(holder)

    @mcp.tool()
    def buy_multiplier() -> dict[str, Any]:
        """Buy a click multiplier upgrade. Returns success/failure and the next cost."""
        return _tool_buy_multiplier(holder)

    @mcp.tool()
    def select_skin(skin_id: str) -> dict[str, Any]:
        """Select a skin, buying it or claiming its reward first if it is locked."""
        return _tool_select_skin(holder, skin_id)

    @mcp.tool()
    def type_keys(text: str) -> dict[str, Any]:
        """Type characters on the keyboard (used for hidden key sequences)."""
        return _tool_type_keys(holder, text)

    @mcp.tool()
    def wait(seconds: float) -> dict[str, Any]:
        """Advance game time by the given seconds (max 86400) in 1s steps."""
        return _tool_wait(holder, seconds)

    @mcp.tool()
    def set_player_name(name: str) -> dict[str, Any]:
        """Set the player's name (once)."""
        return _tool_set_player_name(holder, name)

    @mcp.tool()
    def new_game() -> dict[str, Any]:
        """Reset the game to initial state."""
        return _tool_new_game(holder)

    return mcp
