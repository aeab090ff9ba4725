from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Purchasable:
    """A skin bought for *cost* currency."""

    cost: float


@dataclass(frozen=True)
class Reward:
    """A skin whose claim grants *amount* currency instead of costing it."""

    amount: float


SkinPrice = Purchasable | Reward


@dataclass(frozen=True)
class SkinDef:
    """Static, read-only catalog entry for a cosmetic skin."""

    id: str
    display_name: str = ""
    normal_image: str = ""
    click_image: str = ""
    price: SkinPrice = Purchasable(0.0)
    requires_cheat: bool = False

    def __post_init__(self) -> None:
        if not self.display_name:
            object.__setattr__(self, "display_name", self.id)

    @property
    def is_reward(self) -> bool:
        return isinstance(self.price, Reward)

    @property
    def cost(self) -> float:
        """Currency needed to unlock; rewards cost nothing."""
        if isinstance(self.price, Purchasable):
            return self.price.cost
        return 0.0


@dataclass(frozen=True)
class SkinStatus:
    """Read-only view of a skin for display."""

    id: str
    display_name: str
    unlocked: bool
    selected: bool
    affordable: bool
    visible: bool
    is_reward: bool
    cost: float
    reward: float
    action: str


def _skin(
    id: str,
    name: str,
    image: str,
    cost: float,
    requires_cheat: bool = False,
) -> SkinDef:
    return SkinDef(
        id=id,
        display_name=name,
        normal_image=f"./skins/{image}1.jpg",
        click_image=f"./skins/{image}2.jpg",
        price=Purchasable(float(cost)),
        requires_cheat=requires_cheat,
    )


def default_skins() -> list[SkinDef]:
    """The stock catalog, ordered by increasing cost."""
    return [
        SkinDef(
            id="aren",
            display_name="Aren",
            normal_image="./skins/click1.jpg",
            click_image="./skins/click2.jpg",
        ),
        SkinDef(
            id="antonsa",
            display_name="Anton SA",
            normal_image="./skins/antonsa1.jpg",
            click_image="./skins/antonsa2.jpg",
            price=Reward(100_000.0),
        ),
        _skin("messi", "Messi", "messi", 10_000),
        _skin("cr7", "CR7", "ronaldo", 100_000),
        _skin("anton3", "Anton 3", "anton3", 1_000_000),
        _skin("casper2", "Casper 2", "casper2", 1_000_000),
        _skin("matteo", "Matteo", "matteo", 1_000_000),
        _skin("unknown", "Unknown Name", "unknown", 1_000_000),
        _skin("casper", "Casper", "casper", 10_000_000),
        _skin("eliot", "Eliot", "eliot", 10_000_000),
        _skin("emil", "Emil", "emil", 10_000_000),
        _skin("gabbe", "Gabbe", "gabbe", 10_000_000),
        _skin("julle", "Julle", "julle", 10_000_000),
        _skin("levi", "Levi", "levi", 10_000_000),
        _skin("luddain", "Luddain", "luddain", 10_000_000),
        _skin("ludvig", "Ludvig", "ludvig", 10_000_000),
        _skin("malte", "Malte", "malte", 10_000_000),
        _skin("ollibolly", "Ollibolly", "ollibolly", 10_000_000),
        _skin("seth", "Seth", "seth", 10_000_000),
        _skin("sixten", "Sixten", "sixten", 10_000_000),
        _skin("timma", "Timma", "timma", 10_000_000),
        _skin("wirre", "Wirre", "wirre", 10_000_000),
        _skin("ture", "Ture", "ture", 100_000_000),
        _skin("antonsc", "Anton SC", "antonsc", 1e9),
        _skin("axel", "Axel", "axel", 1e9),
        _skin("emilstekman", "EmilStekman", "emilstekman", 1e9),
        # Hidden until the cheat sequence is typed
        _skin("henry", "Henry", "henri", 1e12, requires_cheat=True),
        _skin("ask", "Ask", "ask", 1e15, requires_cheat=True),
        _skin("albin", "Albin", "albin", 1e27, requires_cheat=True),
    ]
