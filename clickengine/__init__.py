# clickengine: Clicker Game Progression Engine & Shared Leaderboard

from clickengine.errors import (
    ClickEngineError,
    InsufficientFunds,
    SkinLocked,
    InvalidScore,
    StorageError,
    LeaderboardError,
)
from clickengine.cost_scaling import CostScaling
from clickengine.skins import Purchasable, Reward, SkinDef, SkinStatus, default_skins
from clickengine.definition import GameConfig, GameDefinition, default_definition
from clickengine.state import ProgressionState
from clickengine.economy import EconomyEngine
from clickengine.events import (
    Click,
    KeyPress,
    BuyAutoUnit,
    BuyMultiplier,
    SelectSkin,
    SetPlayerName,
    ResetGame,
)
from clickengine.cheat import CheatSequenceDetector
from clickengine.persistence import (
    KeyValueStore,
    MemoryStore,
    JsonFileStore,
    PersistenceGateway,
    to_record,
    from_record,
)
from clickengine.leaderboard import (
    LeaderboardClient,
    LeaderboardEntry,
    LeaderboardStore,
    normalize_score,
    compare_scores,
)
from clickengine.session import GameSession, SessionTicker
from clickengine.formatting import format_compact, number_to_words, format_status

__all__ = [
    # Errors
    "ClickEngineError",
    "InsufficientFunds",
    "SkinLocked",
    "InvalidScore",
    "StorageError",
    "LeaderboardError",
    # Cost
    "CostScaling",
    # Catalog
    "Purchasable",
    "Reward",
    "SkinDef",
    "SkinStatus",
    "default_skins",
    # Definition
    "GameConfig",
    "GameDefinition",
    "default_definition",
    # State
    "ProgressionState",
    # Rules
    "EconomyEngine",
    "CheatSequenceDetector",
    # Events
    "Click",
    "KeyPress",
    "BuyAutoUnit",
    "BuyMultiplier",
    "SelectSkin",
    "SetPlayerName",
    "ResetGame",
    # Persistence
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "PersistenceGateway",
    "to_record",
    "from_record",
    # Leaderboard
    "LeaderboardClient",
    "LeaderboardEntry",
    "LeaderboardStore",
    "normalize_score",
    "compare_scores",
    # Session
    "GameSession",
    "SessionTicker",
    # Formatting
    "format_compact",
    "number_to_words",
    "format_status",
]
