from __future__ import annotations

from dataclasses import dataclass, field

from clickengine.cost_scaling import CostScaling
from clickengine.skins import Purchasable, Reward, SkinDef, default_skins


@dataclass
class GameConfig:
    """Top-level game configuration."""

    name: str = "Clicker"
    base_auto_unit_cost: float = 1_000_000.0
    base_multiplier_cost: float = 10.0
    auto_unit_scaling: CostScaling = field(
        default_factory=lambda: CostScaling.geometric(1.5, integral=True)
    )
    multiplier_scaling: CostScaling = field(
        default_factory=lambda: CostScaling.geometric(3.0)
    )
    multiplier_factor: float = 2.0
    default_skin: str = "aren"
    cheat_code: str = "sigmaboy"
    # Timer cadences, in seconds
    tick_interval: float = 1.0
    save_interval: float = 5.0
    leaderboard_interval: float = 30.0


@dataclass
class GameDefinition:
    """Complete static definition of the game: tunables plus skin catalog."""

    config: GameConfig = field(default_factory=GameConfig)
    skins: list[SkinDef] = field(default_factory=default_skins)

    _skins_by_id: dict[str, SkinDef] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        self._skins_by_id = {s.id: s for s in self.skins}

    def get_skin(self, id: str) -> SkinDef | None:
        return self._skins_by_id.get(id)

    def has_skin(self, id: str) -> bool:
        return id in self._skins_by_id

    def validate(self) -> list[str]:
        """Check for common definition errors. Returns list of error messages."""
        errors: list[str] = []
        cfg = self.config

        seen: set[str] = set()
        for s in self.skins:
            if s.id in seen:
                errors.append(f"Duplicate skin ID: {s.id!r}")
            seen.add(s.id)

        default = self.get_skin(cfg.default_skin)
        if default is None:
            errors.append(f"Default skin {cfg.default_skin!r} is not in the catalog")
        else:
            if default.is_reward or default.cost != 0:
                errors.append(f"Default skin {default.id!r} must be free")
            if default.requires_cheat:
                errors.append(f"Default skin {default.id!r} cannot require the cheat")

        for s in self.skins:
            if isinstance(s.price, Purchasable) and s.price.cost < 0:
                errors.append(f"Skin {s.id!r} has negative cost {s.price.cost!r}")
            if isinstance(s.price, Reward) and s.price.amount <= 0:
                errors.append(f"Reward skin {s.id!r} must grant a positive amount")

        if cfg.base_auto_unit_cost <= 0:
            errors.append("base_auto_unit_cost must be positive")
        if cfg.base_multiplier_cost <= 0:
            errors.append("base_multiplier_cost must be positive")
        if cfg.auto_unit_scaling.next_cost(cfg.base_auto_unit_cost) <= cfg.base_auto_unit_cost:
            errors.append("auto_unit_scaling must increase the cost")
        if cfg.multiplier_scaling.next_cost(cfg.base_multiplier_cost) <= cfg.base_multiplier_cost:
            errors.append("multiplier_scaling must increase the cost")
        if cfg.multiplier_factor <= 1:
            errors.append("multiplier_factor must be greater than 1")

        if not cfg.cheat_code:
            errors.append("cheat_code must not be empty")
        elif not all(c.isprintable() and not c.isspace() for c in cfg.cheat_code):
            errors.append(f"cheat_code {cfg.cheat_code!r} must be printable characters")
        elif cfg.cheat_code != cfg.cheat_code.lower():
            errors.append(f"cheat_code {cfg.cheat_code!r} must be lower case")

        for label, value in (
            ("tick_interval", cfg.tick_interval),
            ("save_interval", cfg.save_interval),
            ("leaderboard_interval", cfg.leaderboard_interval),
        ):
            if value <= 0:
                errors.append(f"{label} must be positive")

        return errors


def default_definition() -> GameDefinition:
    return GameDefinition()
