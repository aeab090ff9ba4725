from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Click:
    """One press on the click target."""


@dataclass(frozen=True)
class KeyPress:
    """A keyboard key going down.

    *key* is the key's name: a single character for printable keys,
    otherwise a name such as ``"Shift"`` or ``"Enter"``.
    """

    key: str
    ctrl: bool = False
    alt: bool = False
    meta: bool = False
    repeat: bool = False
    text_input_focused: bool = False

    @property
    def has_modifier(self) -> bool:
        return self.ctrl or self.alt or self.meta

    @property
    def is_character(self) -> bool:
        return len(self.key) == 1


@dataclass(frozen=True)
class BuyAutoUnit:
    pass


@dataclass(frozen=True)
class BuyMultiplier:
    pass


@dataclass(frozen=True)
class SelectSkin:
    skin_id: str


@dataclass(frozen=True)
class SetPlayerName:
    name: str


@dataclass(frozen=True)
class ResetGame:
    """Wipe all progress. Ignored unless the player confirmed it."""

    confirmed: bool = False


GameEvent = Click | KeyPress | BuyAutoUnit | BuyMultiplier | SelectSkin | SetPlayerName | ResetGame
