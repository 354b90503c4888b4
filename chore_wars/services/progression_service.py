# chore_wars/services/progression_service.py
import logging
from typing import List, Optional

from chore_wars.core.repository import ParticipantRepository
from chore_wars.game_logic import GameLogic
from chore_wars.models.quest import LevelUp, Participant, UserProgress, UserStats
from chore_wars.models.result import AppResult, ErrorKind, validate_ids

logger = logging.getLogger("service.progression")

USER_NOT_FOUND = "User not found"


def to_progress(user: Participant) -> UserProgress:
    return UserProgress(
        user_id=user.user_id,
        username=user.username,
        level=user.level,
        exp=user.exp,
        exp_to_next_level=user.exp_to_next_level,
        gold=user.gold,
        strength=user.strength,
        intelligence=user.intelligence,
        constitution=user.constitution,
    )


def to_stats(user: Participant) -> UserStats:
    return UserStats(
        user_id=user.user_id,
        username=user.username,
        level=user.level,
        strength=user.strength,
        intelligence=user.intelligence,
        constitution=user.constitution,
    )


def build_stats_message(strength: int, intelligence: int, constitution: int) -> str:
    parts: List[str] = []
    if strength > 0: parts.append(f"+{strength} Strength")
    if intelligence > 0: parts.append(f"+{intelligence} Intelligence")
    if constitution > 0: parts.append(f"+{constitution} Constitution")
    return f"Awarded {', '.join(parts)}" if parts else "No stats awarded"


class ProgressionService:
    """EXP / gold / attribute awards and level resolution for one participant"""

    def __init__(self, participants: Optional[ParticipantRepository] = None):
        self.participants = participants or ParticipantRepository()

    def _award(self, user_id: str, message: str, **deltas: int) -> AppResult[UserProgress]:
        errors = validate_ids(user_id=user_id)
        if errors:
            return AppResult.validation_failure(errors)

        user = self.participants.increment(user_id, **deltas)
        if user is None:
            logger.warning(f"Award skipped, unknown user: {user_id}")
            return AppResult.failure(ErrorKind.NOT_FOUND, USER_NOT_FOUND)

        logger.info(f"Award: User={user_id}, {deltas}")
        return AppResult.success(to_progress(user), message)

    def award_experience(self, user_id: str, amount: int) -> AppResult[UserProgress]:
        return self._award(user_id, f"Awarded {amount} XP", exp=amount)

    def award_gold(self, user_id: str, amount: int) -> AppResult[UserProgress]:
        return self._award(user_id, f"Awarded {amount} gold", gold=amount)

    def award_attributes(self, user_id: str, strength: int = 0, intelligence: int = 0, constitution: int = 0) -> AppResult[UserProgress]:
        return self._award(
            user_id,
            build_stats_message(strength, intelligence, constitution),
            strength=strength, intelligence=intelligence, constitution=constitution,
        )

    def check_level_up(self, user_id: str) -> AppResult[Optional[LevelUp]]:
        """Resolve pending level ups. Empty payload when nothing changed."""
        errors = validate_ids(user_id=user_id)
        if errors:
            return AppResult.validation_failure(errors)

        with self.participants.transaction() as cur:
            user = self.participants.get_by_id(user_id, cur=cur)
            if user is None:
                return AppResult.failure(ErrorKind.NOT_FOUND, USER_NOT_FOUND)

            old_level = user.level
            new_level, new_exp, new_req = GameLogic.calc_level_progress(user.level, user.exp, user.exp_to_next_level)
            if new_level == old_level:
                return AppResult.success(None, "No level up")

            user.level, user.exp, user.exp_to_next_level = new_level, new_exp, new_req
            self.participants.update(user, cur=cur)

        logger.info(f"🎉 Level Up: User={user_id}, {old_level} -> {new_level}")
        level_up = LevelUp(
            old_level=old_level,
            new_level=new_level,
            message=f"LEVEL UP! You are now level {new_level}!",
        )
        return AppResult.success(level_up, "Level up!")

    def get_progress(self, user_id: str) -> AppResult[UserProgress]:
        user = self.participants.get_by_id(user_id)
        if user is None:
            return AppResult.failure(ErrorKind.NOT_FOUND, USER_NOT_FOUND)
        return AppResult.success(to_progress(user))

    def get_stats(self, user_id: str) -> AppResult[UserStats]:
        user = self.participants.get_by_id(user_id)
        if user is None:
            return AppResult.failure(ErrorKind.NOT_FOUND, USER_NOT_FOUND)
        return AppResult.success(to_stats(user))
