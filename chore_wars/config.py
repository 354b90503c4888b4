# chore_wars/config.py
import os
from typing import Dict, Optional, Tuple
from dotenv import load_dotenv

# .env loading
load_dotenv()

# ==========================================
# 1. Secrets / notification
# ==========================================
# Discord webhook for ERROR level logs (optional)
DISCORD_WEBHOOK_ERROR: Optional[str] = os.getenv("DISCORD_WEBHOOK_ERROR")

# ==========================================
# 2. System / paths
# ==========================================
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

SQLITE_DB_PATH: str = os.getenv("SQLITE_DB_PATH", os.path.join(BASE_DIR, "chore_wars.db"))
SQLITE_TIMEOUT: float = float(os.getenv("SQLITE_TIMEOUT", "30.0"))

LOG_DIR: str = os.getenv("LOG_DIR", os.path.join(BASE_DIR, "logs"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

TIMEZONE: str = os.getenv("TIMEZONE", "Asia/Tokyo")

SERVER_HOST: str = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT: int = int(os.getenv("SERVER_PORT", "8000"))

# DB table names
SQLITE_TABLE_PARTICIPANTS = "participants"
SQLITE_TABLE_QUESTS = "quests"
SQLITE_TABLE_COMPLETIONS = "quest_completions"
SQLITE_TABLE_LOOT = "loot_drops"
SQLITE_TABLE_ACTIVITY = "activity_feed"

# ==========================================
# 3. Game rules
# ==========================================
# Level curve: floor(LEVEL_BASE_EXP * LEVEL_GROWTH_RATE ** (level - 1))
LEVEL_BASE_EXP: int = 100
LEVEL_GROWTH_RATE: float = 1.5

# Loot: chance that anything drops, then tier by cumulative weight
LOOT_DROP_CHANCE: float = float(os.getenv("LOOT_DROP_CHANCE", "0.20"))
RARITY_WEIGHTS: Dict[str, float] = {
    "Common": 0.60,
    "Uncommon": 0.30,
    "Rare": 0.10,
}

MILESTONE_THRESHOLDS: Tuple[int, ...] = (10, 25, 50, 100, 250, 500)

DEFAULT_ACTIVITY_COUNT: int = 50
