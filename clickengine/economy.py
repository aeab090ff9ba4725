from __future__ import annotations

import logging

from clickengine.definition import GameConfig, GameDefinition
from clickengine.errors import InsufficientFunds
from clickengine.formatting import format_compact
from clickengine.skins import Reward, SkinDef, SkinStatus
from clickengine.state import ProgressionState

logger = logging.getLogger(__name__)


class EconomyEngine:
    """Purchase and income rules applied to a ProgressionState."""

    def __init__(self, definition: GameDefinition, state: ProgressionState) -> None:
        errors = definition.validate()
        if errors:
            raise ValueError(
                "Invalid GameDefinition:\n" + "\n".join(f"  - {e}" for e in errors)
            )
        self.definition = definition
        self.state = state

    @property
    def config(self) -> GameConfig:
        return self.definition.config

    # ── Income ───────────────────────────────────────────────────────

    def click(self) -> float:
        """Process one click. Returns the amount added."""
        value = self.state.multiplier
        self.state.add_currency(value)
        return value

    def tick(self) -> float:
        """Apply one auto-income interval. Returns the amount added."""
        value = self.state.auto_units * self.state.multiplier
        if value > 0:
            self.state.add_currency(value)
            logger.debug("Auto income: +%s", value)
        return value

    # ── Purchases ────────────────────────────────────────────────────

    def buy_auto_unit(self) -> bool:
        """Buy one auto-income unit. Returns True on success."""
        state = self.state
        cost = state.auto_unit_cost
        try:
            state.spend(cost)
        except InsufficientFunds:
            return False

        new_cost = self.config.auto_unit_scaling.next_cost(cost)
        state.add_auto_unit(new_cost)
        logger.info(
            "Auto clicker purchased: total=%d cost=%s new_cost=%s",
            state.auto_units,
            cost,
            new_cost,
        )
        return True

    def buy_multiplier(self) -> bool:
        """Buy one multiplier upgrade. Returns True on success."""
        state = self.state
        cost = state.multiplier_cost
        try:
            state.spend(cost)
        except InsufficientFunds:
            return False

        new_cost = self.config.multiplier_scaling.next_cost(cost)
        state.scale_multiplier(self.config.multiplier_factor, new_cost)
        logger.info(
            "Multiplier purchased: multiplier=%s cost=%s new_cost=%s",
            state.multiplier,
            cost,
            new_cost,
        )
        return True

    def select_skin(self, skin_id: str) -> bool:
        """Switch to *skin_id*, buying or claiming it first if needed.

        Returns True if *skin_id* is the active skin afterwards.
        """
        skin = self.definition.get_skin(skin_id)
        if skin is None:
            logger.error("Attempted to change to skin %r but data not found", skin_id)
            return False

        state = self.state
        if not state.is_unlocked(skin_id):
            if not self.unlock_skin(skin):
                return False

        state.set_active_skin(skin_id)
        return True

    def unlock_skin(self, skin: SkinDef) -> bool:
        """Buy or claim a locked skin without selecting it."""
        state = self.state
        if state.is_unlocked(skin.id):
            return True
        if skin.requires_cheat and not state.cheat_unlocked:
            logger.warning("Skin %r is hidden until sigma mode is unlocked", skin.id)
            return False

        if isinstance(skin.price, Reward):
            state.add_currency(skin.price.amount)
            state.unlock_skin(skin.id)
            logger.info("Reward skin claimed: skin=%s reward=%s", skin.id, skin.price.amount)
            return True

        try:
            state.spend(skin.price.cost)
        except InsufficientFunds:
            return False
        state.unlock_skin(skin.id)
        logger.info("New skin unlocked: skin=%s cost=%s", skin.id, skin.price.cost)
        return True

    # ── Queries ──────────────────────────────────────────────────────

    def income_per_second(self) -> float:
        return self.state.auto_units * self.state.multiplier / self.config.tick_interval

    def time_to_afford(self, cost: float) -> float | None:
        """Seconds of passive income until *cost* is affordable. None if never."""
        current = self.state.currency
        if current >= cost:
            return 0.0
        rate = self.income_per_second()
        if rate <= 0:
            return None
        return (cost - current) / rate

    def skin_statuses(self) -> list[SkinStatus]:
        """Display rows for every catalog skin, in catalog order."""
        state = self.state
        result: list[SkinStatus] = []
        for skin in self.definition.skins:
            unlocked = state.is_unlocked(skin.id)
            selected = skin.id == state.active_skin
            reward = skin.price.amount if isinstance(skin.price, Reward) else 0.0
            affordable = unlocked or skin.is_reward or state.can_afford(skin.cost)
            if unlocked:
                action = "Selected" if selected else "Select"
            elif skin.is_reward:
                action = "Claim Reward"
            else:
                action = f"Buy ({format_compact(skin.cost)} clicks)"
            result.append(
                SkinStatus(
                    id=skin.id,
                    display_name=skin.display_name,
                    unlocked=unlocked,
                    selected=selected,
                    affordable=affordable,
                    visible=unlocked or not skin.requires_cheat or state.cheat_unlocked,
                    is_reward=skin.is_reward,
                    cost=skin.cost,
                    reward=reward,
                    action=action,
                )
            )
        return result
