"""Snapshotting ProgressionState to a local key-value store."""

from __future__ import annotations

import json
import logging
import math
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from clickengine.definition import GameDefinition
from clickengine.state import ProgressionState

logger = logging.getLogger(__name__)

STATE_KEY = "gameState"


class KeyValueStore(ABC):
    """Durable string key-value storage."""

    @abstractmethod
    def get(self, key: str) -> str | None: ...

    @abstractmethod
    def set(self, key: str, value: str) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...


class MemoryStore(KeyValueStore):
    """In-process store, lost when the process exits."""

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def clear(self) -> None:
        self.data.clear()


class JsonFileStore(KeyValueStore):
    """Keys and values kept in one JSON object file.

    Writes go to a temporary file that replaces the original, so a crash
    mid-write leaves the previous snapshot intact.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Failed to read store %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.error("Store %s does not hold a JSON object", self.path)
            return {}
        return data

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, self.path)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


# ── Record conversion ───────────────────────────────────────────────


def to_record(state: ProgressionState) -> dict[str, Any]:
    return {
        "currency": state.currency,
        "autoUnits": state.auto_units,
        "multiplier": state.multiplier,
        "autoUnitCost": state.auto_unit_cost,
        "multiplierCost": state.multiplier_cost,
        "playerName": state.player_name,
        "activeSkin": state.active_skin,
        "unlockedSkins": sorted(state.unlocked_skins),
        "cheatUnlocked": state.cheat_unlocked,
    }


def _number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


def _non_negative(value: Any, default: float) -> float:
    n = _number(value)
    return n if n is not None and n >= 0 else default


def _positive(value: Any, default: float) -> float:
    n = _number(value)
    return n if n is not None and n > 0 else default


def _count(value: Any) -> int:
    n = _number(value)
    return int(n) if n is not None and n >= 0 else 0


def from_record(record: Any, definition: GameDefinition) -> ProgressionState:
    """Build a state from a snapshot, falling back to defaults field by field.

    Costs are taken as stored and never recomputed from the unit count.
    """
    state = ProgressionState.for_definition(definition)
    if not isinstance(record, dict):
        logger.error("Saved state is not an object, using defaults")
        return state

    cfg = definition.config
    state.currency = _non_negative(record.get("currency"), 0.0)
    state.auto_units = _count(record.get("autoUnits"))
    state.multiplier = _positive(record.get("multiplier"), 1.0)
    state.auto_unit_cost = _positive(record.get("autoUnitCost"), cfg.base_auto_unit_cost)
    state.multiplier_cost = _positive(
        record.get("multiplierCost"), cfg.base_multiplier_cost
    )

    name = record.get("playerName")
    state.player_name = name.strip() if isinstance(name, str) else ""

    unlocked = {cfg.default_skin}
    skins = record.get("unlockedSkins")
    if isinstance(skins, list):
        for skin_id in skins:
            if not isinstance(skin_id, str):
                continue
            if definition.has_skin(skin_id):
                unlocked.add(skin_id)
            else:
                logger.warning("Dropping unknown skin %r from saved state", skin_id)
    state.unlocked_skins = unlocked

    active = record.get("activeSkin")
    state.active_skin = active if isinstance(active, str) and active in unlocked else cfg.default_skin

    state.cheat_unlocked = record.get("cheatUnlocked") is True
    return state


# ── Gateway ─────────────────────────────────────────────────────────


class PersistenceGateway:
    """Loads and saves ProgressionState snapshots. Never raises on I/O."""

    def __init__(self, store: KeyValueStore, definition: GameDefinition) -> None:
        self.store = store
        self.definition = definition

    def load(self) -> ProgressionState:
        try:
            raw = self.store.get(STATE_KEY)
        except OSError as e:
            logger.error("Failed to load game state: %s", e)
            return ProgressionState.for_definition(self.definition)

        if raw is None:
            return ProgressionState.for_definition(self.definition)

        try:
            record = json.loads(raw)
        except ValueError as e:
            logger.error("Failed to load game state: %s", e)
            return ProgressionState.for_definition(self.definition)

        state = from_record(record, self.definition)
        logger.info(
            "Game state loaded: clicks=%s auto_clickers=%d auto_clicker_cost=%s",
            state.currency,
            state.auto_units,
            state.auto_unit_cost,
        )
        return state

    def save(self, state: ProgressionState) -> bool:
        try:
            self.store.set(STATE_KEY, json.dumps(to_record(state)))
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to save game state: %s", e)
            return False
        logger.debug("Game state saved")
        return True

    def clear(self) -> bool:
        try:
            self.store.clear()
        except OSError as e:
            logger.error("Failed to clear saved state: %s", e)
            return False
        return True
