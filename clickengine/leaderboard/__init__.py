from clickengine.leaderboard.client import LeaderboardClient, LeaderboardEntry, parse_entries
from clickengine.leaderboard.scores import compare_scores, normalize_score
from clickengine.leaderboard.store import LeaderboardStore, SubmitResult

__all__ = [
    "LeaderboardClient",
    "LeaderboardEntry",
    "parse_entries",
    "compare_scores",
    "normalize_score",
    "LeaderboardStore",
    "SubmitResult",
]
