"""Tests for MCP server tool functions."""

from clickengine.definition import GameConfig, GameDefinition
from clickengine.skins import Purchasable, Reward, SkinDef

from clickengine.mcp.server import (
    _make_holder,
    _tool_buy_auto_unit,
    _tool_buy_multiplier,
    _tool_click,
    _tool_get_game_state,
    _tool_list_skins,
    _tool_new_game,
    _tool_select_skin,
    _tool_set_player_name,
    _tool_type_keys,
    _tool_wait,
)


def _make_test_definition() -> GameDefinition:
    """A small catalog with one skin of each kind."""
    return GameDefinition(
        config=GameConfig(name="Test Game", base_auto_unit_cost=50),
        skins=[
            SkinDef("aren", "Aren"),
            SkinDef("gift", "Gift", price=Reward(1_000)),
            SkinDef("messi", "Messi", price=Purchasable(100)),
            SkinDef("henry", "Henry", price=Purchasable(10), requires_cheat=True),
        ],
    )


def _make_test_holder():
    return _make_holder(_make_test_definition())


# ── get_game_state ───────────────────────────────────────────────────


class TestGetGameState:
    def test_initial_values(self):
        result = _tool_get_game_state(_make_test_holder())
        assert result["currency"] == 0
        assert result["currency_display"] == "0"
        assert result["currency_words"] == "Zero"
        assert result["auto_units"] == 0
        assert result["multiplier"] == 1.0
        assert result["auto_unit_cost"] == 50
        assert result["multiplier_cost"] == 10
        assert result["active_skin"] == "aren"
        assert result["unlocked_skins"] == ["aren"]
        assert result["cheat_unlocked"] is False
        assert result["time_elapsed"] == 0.0

    def test_after_clicks(self):
        holder = _make_test_holder()
        _tool_click(holder, 21)
        result = _tool_get_game_state(holder)
        assert result["currency"] == 21
        assert result["currency_words"] == "Twenty-one"


# ── click ────────────────────────────────────────────────────────────


class TestClick:
    def test_multiple_clicks(self):
        result = _tool_click(_make_test_holder(), 5)
        assert result["clicks"] == 5
        assert result["total_earned"] == 5
        assert result["new_balance"] == 5

    def test_bounds(self):
        holder = _make_test_holder()
        assert "error" in _tool_click(holder, 0)
        assert "error" in _tool_click(holder, 1001)
        assert holder.session.state.currency == 0


# ── purchases ────────────────────────────────────────────────────────


class TestPurchases:
    def test_buy_multiplier(self):
        holder = _make_test_holder()
        _tool_click(holder, 10)
        result = _tool_buy_multiplier(holder)
        assert result == {"success": True, "multiplier": 2.0, "next_cost": 30.0}

    def test_buy_multiplier_cannot_afford(self):
        result = _tool_buy_multiplier(_make_test_holder())
        assert result["success"] is False
        assert result["cost"] == 10

    def test_buy_auto_unit(self):
        holder = _make_test_holder()
        _tool_click(holder, 60)
        result = _tool_buy_auto_unit(holder)
        assert result["success"] is True
        assert result["auto_units"] == 1
        assert result["next_cost"] == 75
        assert holder.session.state.currency == 10

    def test_buy_auto_unit_cannot_afford(self):
        result = _tool_buy_auto_unit(_make_test_holder())
        assert result["success"] is False
        assert "afford" in result["reason"].lower()


# ── skins ────────────────────────────────────────────────────────────


class TestSkins:
    def test_list_hides_gated_skins(self):
        result = _tool_list_skins(_make_test_holder())
        ids = [s["id"] for s in result["skins"]]
        assert ids == ["aren", "gift", "messi"]

    def test_list_entries(self):
        skins = {s["id"]: s for s in _tool_list_skins(_make_test_holder())["skins"]}
        assert skins["gift"]["reward"] == 1_000
        assert skins["messi"]["cost"] == 100
        # no income yet
        assert skins["messi"]["time_to_afford"] is None
        assert skins["aren"]["selected"] is True

    def test_claim_reward(self):
        holder = _make_test_holder()
        result = _tool_select_skin(holder, "gift")
        assert result["success"] is True
        assert result["new_balance"] == 1_000

    def test_buy_skin(self):
        holder = _make_test_holder()
        _tool_click(holder, 100)
        result = _tool_select_skin(holder, "messi")
        assert result["success"] is True
        assert result["active_skin"] == "messi"
        assert result["new_balance"] == 0

    def test_cannot_afford(self):
        result = _tool_select_skin(_make_test_holder(), "messi")
        assert result == {"success": False, "reason": "Cannot afford"}

    def test_unknown_skin(self):
        assert "error" in _tool_select_skin(_make_test_holder(), "ghost")

    def test_gated_skin(self):
        holder = _make_test_holder()
        _tool_click(holder, 20)
        result = _tool_select_skin(holder, "henry")
        assert result["success"] is False
        assert "Hidden" in result["reason"]

        _tool_type_keys(holder, "sigmaboy")
        assert _tool_select_skin(holder, "henry")["success"] is True
        ids = [s["id"] for s in _tool_list_skins(holder)["skins"]]
        assert "henry" in ids


# ── type_keys ────────────────────────────────────────────────────────


class TestTypeKeys:
    def test_cheat_code(self):
        holder = _make_test_holder()
        result = _tool_type_keys(holder, "hello sigmaboy")
        assert result["cheat_unlocked_now"] is True
        assert result["cheat_unlocked"] is True

        result = _tool_type_keys(holder, "sigmaboy")
        assert result["cheat_unlocked_now"] is False
        assert result["cheat_unlocked"] is True

    def test_typing_does_not_earn(self):
        holder = _make_test_holder()
        _tool_type_keys(holder, "abc")
        assert holder.session.state.currency == 0


# ── wait ─────────────────────────────────────────────────────────────


class TestWait:
    def test_auto_income(self):
        holder = _make_test_holder()
        holder.session.state.auto_units = 2
        result = _tool_wait(holder, 3)
        assert result["earned"] == 6
        assert result["time_elapsed"] == 3.0

    def test_partial_second(self):
        holder = _make_test_holder()
        holder.session.state.auto_units = 1
        assert _tool_wait(holder, 0.5)["earned"] == 0
        assert _tool_wait(holder, 0.5)["earned"] == 1

    def test_bounds(self):
        holder = _make_test_holder()
        assert "error" in _tool_wait(holder, 0)
        assert "error" in _tool_wait(holder, 86401)

    def test_autosave(self):
        holder = _make_test_holder()
        _tool_click(holder, 3)
        assert holder.session.dirty
        _tool_wait(holder, 5)
        assert not holder.session.dirty


# ── player name / new game ───────────────────────────────────────────


class TestPlayerName:
    def test_set_once(self):
        holder = _make_test_holder()
        assert _tool_set_player_name(holder, "  Ada ") == {"success": True, "player_name": "Ada"}
        assert _tool_set_player_name(holder, "Bob")["success"] is False

    def test_blank(self):
        assert _tool_set_player_name(_make_test_holder(), "   ")["success"] is False


class TestNewGame:
    def test_resets_everything(self):
        holder = _make_test_holder()
        _tool_click(holder, 50)
        _tool_wait(holder, 10)
        _tool_type_keys(holder, "sigmaboy")
        result = _tool_new_game(holder)
        assert result["success"] is True

        state = _tool_get_game_state(holder)
        assert state["currency"] == 0
        assert state["time_elapsed"] == 0.0
        assert state["cheat_unlocked"] is False


class TestWaitCadence:
    def test_half_second_waits_keep_one_second_ticks(self):
        holder = _make_test_holder()
        holder.session.state.auto_units = 1
        _tool_wait(holder, 1.5)
        result = _tool_wait(holder, 1.5)
        assert result["time_elapsed"] == 3.0
        assert result["currency"] == 3
