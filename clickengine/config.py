from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _default_save_path() -> Path:
    return Path.home() / ".clickengine" / "save.json"


@dataclass
class Settings:
    """Deployment settings, separate from game tunables in GameConfig."""

    save_path: Path = field(default_factory=_default_save_path)
    leaderboard_url: str | None = None
    leaderboard_db: Path = Path("leaderboard.db")
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 5000

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        settings = cls()
        if env.get("CLICKENGINE_SAVE_PATH"):
            settings.save_path = Path(env["CLICKENGINE_SAVE_PATH"]).expanduser()
        if env.get("CLICKENGINE_LEADERBOARD_URL"):
            settings.leaderboard_url = env["CLICKENGINE_LEADERBOARD_URL"]
        if env.get("CLICKENGINE_LEADERBOARD_DB"):
            settings.leaderboard_db = Path(env["CLICKENGINE_LEADERBOARD_DB"]).expanduser()
        if env.get("CLICKENGINE_LOG_LEVEL"):
            settings.log_level = env["CLICKENGINE_LOG_LEVEL"].upper()
        if env.get("CLICKENGINE_HOST"):
            settings.host = env["CLICKENGINE_HOST"]
        if env.get("CLICKENGINE_PORT"):
            try:
                settings.port = int(env["CLICKENGINE_PORT"])
            except ValueError:
                raise ValueError(
                    f"CLICKENGINE_PORT must be an integer, got {env['CLICKENGINE_PORT']!r}"
                ) from None
        return settings
