from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clickengine.definition import GameDefinition
    from clickengine.state import ProgressionState

# Largest first
_COMPACT_TIERS: list[tuple[float, str]] = [
    (1e27, "Oc"),
    (1e24, "Sp"),
    (1e21, "Sx"),
    (1e18, "Qi"),
    (1e15, "Qa"),
    (1e12, "T"),
    (1e9, "B"),
    (1e6, "M"),
]

_UNITS = [
    "", "one", "two", "three", "four", "five", "six", "seven", "eight",
    "nine", "ten", "eleven", "twelve", "thirteen", "fourteen", "fifteen",
    "sixteen", "seventeen", "eighteen", "nineteen",
]
_TENS = [
    "", "", "twenty", "thirty", "forty", "fifty", "sixty", "seventy",
    "eighty", "ninety",
]
_SCALES: list[tuple[int, str]] = [
    (10**27, "octillion"),
    (10**24, "septillion"),
    (10**21, "sextillion"),
    (10**18, "quintillion"),
    (10**15, "quadrillion"),
    (10**12, "trillion"),
    (10**9, "billion"),
    (10**6, "million"),
    (10**3, "thousand"),
]


def format_compact(num: float | int | None) -> str:
    """Render *num* as e.g. ``"2.5 M"``, or with thousands separators below a million."""
    if num is None or num == 0:
        return "0"

    for threshold, suffix in _COMPACT_TIERS:
        if num >= threshold:
            val = num / threshold
            if val % 1 == 0:
                return f"{val:.0f} {suffix}"
            return f"{val:.1f} {suffix}"

    return _format_grouped(num)


def _format_grouped(num: float | int) -> str:
    if isinstance(num, int) or float(num).is_integer():
        return f"{int(num):,}"
    text = f"{num:,.3f}".rstrip("0")
    return text.rstrip(".")


def _chunk_to_words(n: int) -> str:
    """Words for 0 < n < 1000."""
    words: list[str] = []
    if n >= 100:
        words.append(f"{_UNITS[n // 100]} hundred")
        n %= 100
    if n >= 20:
        tens = _TENS[n // 10]
        words.append(f"{tens}-{_UNITS[n % 10]}" if n % 10 else tens)
    elif n > 0:
        words.append(_UNITS[n])
    return " ".join(words)


def _int_to_words(n: int) -> str:
    parts: list[str] = []
    for value, name in _SCALES:
        if n >= value:
            count, n = divmod(n, value)
            # Counts past 999 only happen for the largest scale
            head = _chunk_to_words(count) if count < 1000 else _int_to_words(count)
            parts.append(f"{head} {name}")
    if n > 0:
        parts.append(_chunk_to_words(n))
    return " ".join(parts)


def number_to_words(num: float | int) -> str:
    """Spell out the whole part of *num* in English, first letter capitalized.

    >>> number_to_words(2_000_345)
    'Two million three hundred forty-five'
    """
    if isinstance(num, bool) or not isinstance(num, (int, float)):
        return ""
    if isinstance(num, float) and not math.isfinite(num):
        return ""
    n = math.floor(num)
    if n == 0:
        return "Zero"
    if n < 0:
        return ""
    text = _int_to_words(n)
    return text[0].upper() + text[1:]


def format_status(state: ProgressionState, definition: GameDefinition) -> str:
    """Format the player's progress for console output."""
    lines: list[str] = []
    skin = definition.get_skin(state.active_skin)
    skin_name = skin.display_name if skin else state.active_skin

    title = f" {definition.config.name} "
    lines.append("=" * 16 + title + "=" * 16)
    if state.player_name:
        lines.append(f"Player: {state.player_name}")
    current = math.floor(state.currency)
    lines.append(f"Clicks: {current:,}")
    lines.append(f"  {number_to_words(current)}")
    lines.append("")
    lines.append(f"Auto clickers: {state.auto_units}")
    lines.append(f"Multiplier: {state.multiplier:.1f}x")
    lines.append(
        f"  Next auto clicker: {format_compact(math.floor(state.auto_unit_cost))} clicks"
    )
    lines.append(
        f"  Next multiplier: {format_compact(math.floor(state.multiplier_cost))} clicks"
    )
    lines.append("")
    lines.append(f"Skin: {skin_name} ({len(state.unlocked_skins)} unlocked)")
    if state.cheat_unlocked:
        lines.append("Sigma mode: unlocked")

    return "\n".join(lines)
