from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from clickengine.definition import GameConfig
from clickengine.errors import InsufficientFunds, SkinLocked

if TYPE_CHECKING:
    from clickengine.definition import GameDefinition

logger = logging.getLogger(__name__)


class ProgressionState:
    """Mutable record of one player's progress.

    All mutation goes through the methods below, which keep the invariants:
    ``currency >= 0``, ``active_skin in unlocked_skins``, ``unlocked_skins``
    only grows and always holds the default skin, and ``cheat_unlocked``
    never goes back to False. Every mutation bumps ``revision``.
    """

    def __init__(self, config: GameConfig | None = None) -> None:
        self.config = config or GameConfig()
        self.revision: int = 0
        self._set_defaults()

    @classmethod
    def for_definition(cls, definition: GameDefinition) -> ProgressionState:
        return cls(definition.config)

    def _set_defaults(self) -> None:
        cfg = self.config
        self.currency: float = 0.0
        self.auto_units: int = 0
        self.multiplier: float = 1.0
        self.auto_unit_cost: float = cfg.base_auto_unit_cost
        self.multiplier_cost: float = cfg.base_multiplier_cost
        self.player_name: str = ""
        self.active_skin: str = cfg.default_skin
        self.unlocked_skins: set[str] = {cfg.default_skin}
        self.cheat_unlocked: bool = False

    def _touch(self) -> None:
        self.revision += 1

    # ── Mutations ────────────────────────────────────────────────────

    def add_currency(self, amount: float) -> None:
        if amount < 0:
            raise ValueError(f"Cannot add a negative amount: {amount!r}")
        if amount == 0:
            return
        self.currency += amount
        self._touch()

    def spend(self, amount: float) -> None:
        """Deduct *amount* or raise InsufficientFunds, never a partial spend."""
        if amount < 0:
            raise ValueError(f"Cannot spend a negative amount: {amount!r}")
        if self.currency < amount:
            raise InsufficientFunds(amount, self.currency)
        self.currency -= amount
        self._touch()

    def can_afford(self, amount: float) -> bool:
        return self.currency >= amount

    def add_auto_unit(self, next_cost: float) -> None:
        if next_cost < self.auto_unit_cost:
            raise ValueError("Auto unit cost can only increase")
        self.auto_units += 1
        self.auto_unit_cost = next_cost
        self._touch()

    def scale_multiplier(self, factor: float, next_cost: float) -> None:
        if factor <= 0:
            raise ValueError(f"Multiplier factor must be positive: {factor!r}")
        if next_cost < self.multiplier_cost:
            raise ValueError("Multiplier cost can only increase")
        self.multiplier *= factor
        self.multiplier_cost = next_cost
        self._touch()

    def unlock_skin(self, skin_id: str) -> bool:
        """Add *skin_id* to the unlocked set. Returns False if already there."""
        if skin_id in self.unlocked_skins:
            return False
        self.unlocked_skins.add(skin_id)
        self._touch()
        return True

    def set_active_skin(self, skin_id: str) -> None:
        if skin_id not in self.unlocked_skins:
            raise SkinLocked(f"Skin {skin_id!r} is not unlocked")
        if skin_id != self.active_skin:
            self.active_skin = skin_id
            self._touch()

    def set_player_name(self, name: str) -> bool:
        """Set the player name once. Returns False if rejected."""
        name = name.strip()
        if not name:
            logger.warning("Rejected empty player name")
            return False
        if self.player_name:
            logger.warning(
                "Player name already set to %r, ignoring %r", self.player_name, name
            )
            return False
        self.player_name = name
        self._touch()
        return True

    def unlock_cheat(self) -> bool:
        """Latch the cheat flag. Returns True only on the first unlock."""
        if self.cheat_unlocked:
            return False
        self.cheat_unlocked = True
        self._touch()
        return True

    def reset(self) -> None:
        """Restore every field to its construction default."""
        self._set_defaults()
        self._touch()

    # ── Queries ──────────────────────────────────────────────────────

    def is_unlocked(self, skin_id: str) -> bool:
        return skin_id in self.unlocked_skins

    @property
    def score(self) -> int:
        """Whole-number score submitted to the leaderboard."""
        return int(self.currency)

    def __repr__(self) -> str:
        return (
            f"ProgressionState(currency={self.currency!r}, "
            f"auto_units={self.auto_units!r}, multiplier={self.multiplier!r}, "
            f"player_name={self.player_name!r}, active_skin={self.active_skin!r})"
        )
