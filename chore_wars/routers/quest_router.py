# chore_wars/routers/quest_router.py
from fastapi import APIRouter, Response
from typing import List, Optional

from chore_wars import config
from chore_wars.core.logger import setup_logging
from chore_wars.models.quest import (
    ActivityFeedItem, AmountAction, AttributesAction, LevelUp, LootDrop,
    QuestCompletionSummary, QuestSummary, UserAction, UserProgress, UserStats,
    VerifyAction,
)
from chore_wars.models.result import AppResult, ErrorKind
from chore_wars.services.quest_service import QuestService

router = APIRouter()
logger = setup_logging("quest_router")

# transport mapping for failed envelopes
STATUS_CODES = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INVALID_STATE: 400,
    ErrorKind.VALIDATION_FAILURE: 422,
}


# ==========================================
# Wiring
# ==========================================

quest_service = QuestService()
# shortcuts to the collaborating services
progression_service = quest_service.progression
loot_service = quest_service.loot
feed_service = quest_service.feed


def _respond(result: AppResult, response: Response) -> AppResult:
    if not result.is_success:
        response.status_code = STATUS_CODES.get(result.error_kind, 400)
        logger.warning(f"Request refused ({result.error_kind}): {result.errors or result.validation_errors}")
    return result


# ==========================================
# Quest lifecycle
# ==========================================

@router.post("/quests/{quest_id}/claim", response_model=AppResult[QuestCompletionSummary])
def claim_quest(quest_id: str, action: UserAction, response: Response):
    return _respond(quest_service.claim_quest(quest_id, action.user_id), response)

@router.post("/completions/{completion_id}/complete", response_model=AppResult[QuestCompletionSummary])
def complete_quest(completion_id: str, action: UserAction, response: Response):
    return _respond(quest_service.complete_quest(completion_id, action.user_id), response)

@router.post("/completions/{completion_id}/unclaim", response_model=AppResult[QuestCompletionSummary])
def unclaim_quest(completion_id: str, action: UserAction, response: Response):
    return _respond(quest_service.unclaim_quest(completion_id, action.user_id), response)

@router.post("/completions/{completion_id}/verify", response_model=AppResult[QuestCompletionSummary])
def verify_quest(completion_id: str, action: VerifyAction, response: Response):
    return _respond(quest_service.verify_quest(completion_id, action.verifier_id, action.approved), response)

@router.get("/parties/{party_id}/quests/available", response_model=AppResult[List[QuestSummary]])
def get_available_quests(party_id: str):
    return quest_service.get_available_quests(party_id)

@router.get("/parties/{party_id}/verifications", response_model=AppResult[List[QuestCompletionSummary]])
def get_pending_verifications(party_id: str):
    return quest_service.get_pending_verifications(party_id)

@router.get("/users/{user_id}/quests/active", response_model=AppResult[List[QuestCompletionSummary]])
def get_my_active_quests(user_id: str):
    return quest_service.get_my_active_quests(user_id)


# ==========================================
# Progression
# ==========================================

@router.post("/users/{user_id}/award/exp", response_model=AppResult[UserProgress])
def award_experience(user_id: str, action: AmountAction, response: Response):
    return _respond(progression_service.award_experience(user_id, action.amount), response)

@router.post("/users/{user_id}/award/gold", response_model=AppResult[UserProgress])
def award_gold(user_id: str, action: AmountAction, response: Response):
    return _respond(progression_service.award_gold(user_id, action.amount), response)

@router.post("/users/{user_id}/award/attributes", response_model=AppResult[UserProgress])
def award_attributes(user_id: str, action: AttributesAction, response: Response):
    return _respond(progression_service.award_attributes(
        user_id, action.strength, action.intelligence, action.constitution), response)

@router.post("/users/{user_id}/level_up", response_model=AppResult[Optional[LevelUp]])
def check_level_up(user_id: str, response: Response):
    return _respond(progression_service.check_level_up(user_id), response)

@router.get("/users/{user_id}/progress", response_model=AppResult[UserProgress])
def get_progress(user_id: str, response: Response):
    return _respond(progression_service.get_progress(user_id), response)

@router.get("/users/{user_id}/stats", response_model=AppResult[UserStats])
def get_stats(user_id: str, response: Response):
    return _respond(progression_service.get_stats(user_id), response)


# ==========================================
# Loot & activity feed
# ==========================================

@router.get("/users/{user_id}/loot", response_model=AppResult[List[LootDrop]])
def get_user_loot(user_id: str):
    return loot_service.get_user_loot_drops(user_id)

@router.get("/parties/{party_id}/activity", response_model=AppResult[List[ActivityFeedItem]])
def get_recent_activity(party_id: str, count: int = config.DEFAULT_ACTIVITY_COUNT):
    return feed_service.get_recent_activity(party_id, count)
