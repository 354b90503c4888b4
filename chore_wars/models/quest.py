# chore_wars/models/quest.py
from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional, List, Dict

# ==========================================
# Enums
# ==========================================

class CompletionStatus(str, Enum):
    CLAIMED = "Claimed"
    PENDING_VERIFICATION = "PendingVerification"
    APPROVED = "Approved"
    REJECTED = "Rejected"

# status reported for a completion that was unclaimed (record deleted)
UNCLAIMED_STATUS = "Unclaimed"

LIVE_STATUSES = (CompletionStatus.CLAIMED.value, CompletionStatus.PENDING_VERIFICATION.value)

class ActivityType(str, Enum):
    QUEST_COMPLETED = "QuestCompleted"
    LEVEL_UP = "LevelUp"
    LOOT_FOUND = "LootFound"
    STAT_MILESTONE = "StatMilestone"

class Rarity(str, Enum):
    COMMON = "Common"
    UNCOMMON = "Uncommon"
    RARE = "Rare"

class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

class QuestType(str, Enum):
    ONE_TIME = "OneTime"
    DAILY = "Daily"
    WEEKLY = "Weekly"

# ==========================================
# Domain Models (Pydantic)
# ==========================================

class Participant(BaseModel):
    user_id: str
    username: str
    display_name: str
    party_id: str
    level: int = 1
    exp: int = 0
    exp_to_next_level: int = 100
    gold: int = 0
    strength: int = 0
    intelligence: int = 0
    constitution: int = 0
    created_at: str

class Quest(BaseModel):
    quest_id: str
    party_id: str
    title: str
    description: str = ''
    exp_reward: int = 0
    gold_reward: int = 0
    strength_bonus: int = 0
    intelligence_bonus: int = 0
    constitution_bonus: int = 0
    difficulty: Difficulty = Difficulty.EASY
    quest_type: QuestType = QuestType.ONE_TIME
    is_active: bool = True
    created_by: Optional[str] = None
    created_at: str

class QuestCompletion(BaseModel):
    completion_id: str
    quest_id: str
    user_id: str
    status: CompletionStatus = CompletionStatus.CLAIMED
    claimed_at: str
    completed_at: Optional[str] = None
    verified_at: Optional[str] = None
    verified_by: Optional[str] = None
    # reward snapshot taken at claim time
    exp_earned: int = 0
    gold_earned: int = 0
    strength_gained: int = 0
    intelligence_gained: int = 0
    constitution_gained: int = 0

class LootDrop(BaseModel):
    loot_id: str
    name: str
    description: str
    rarity: Rarity
    user_id: str
    completion_id: str
    found_at: str

class ActivityFeedItem(BaseModel):
    activity_id: str
    party_id: str
    user_id: str
    activity_type: ActivityType
    message: str
    metadata: Optional[str] = None  # JSON text
    created_at: str

# ==========================================
# Read Models (DTO)
# ==========================================

class UserProgress(BaseModel):
    user_id: str
    username: str
    level: int
    exp: int
    exp_to_next_level: int
    gold: int
    strength: int
    intelligence: int
    constitution: int

    def attributes(self) -> Dict[str, int]:
        return {
            "Strength": self.strength,
            "Intelligence": self.intelligence,
            "Constitution": self.constitution,
        }

class UserStats(BaseModel):
    user_id: str
    username: str
    level: int
    strength: int
    intelligence: int
    constitution: int

    def attributes(self) -> Dict[str, int]:
        return {
            "Strength": self.strength,
            "Intelligence": self.intelligence,
            "Constitution": self.constitution,
        }

class LevelUp(BaseModel):
    old_level: int
    new_level: int
    message: str

class VerificationOutcome(BaseModel):
    leveled_up: bool = False
    old_level: Optional[int] = None
    new_level: Optional[int] = None
    loot: Optional[LootDrop] = None
    milestones: List[str] = Field(default_factory=list)

class QuestCompletionSummary(BaseModel):
    completion_id: str
    quest_id: str
    quest_title: str = ''
    user_id: str
    username: str = ''
    status: str
    exp_earned: int
    gold_earned: int
    strength_gained: int
    intelligence_gained: int
    constitution_gained: int
    claimed_at: str
    completed_at: Optional[str] = None
    verified_at: Optional[str] = None
    verified_by: Optional[str] = None
    outcome: Optional[VerificationOutcome] = None

class QuestSummary(BaseModel):
    quest_id: str
    title: str
    description: str
    exp_reward: int
    gold_reward: int
    strength_bonus: int
    intelligence_bonus: int
    constitution_bonus: int
    difficulty: str
    quest_type: str
    is_claimed: bool = False

# ==========================================
# Request Models
# ==========================================

class UserAction(BaseModel):
    user_id: str

class VerifyAction(BaseModel):
    verifier_id: str
    approved: bool

class AmountAction(BaseModel):
    amount: int

class AttributesAction(BaseModel):
    strength: int = 0
    intelligence: int = 0
    constitution: int = 0
