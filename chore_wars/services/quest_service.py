# chore_wars/services/quest_service.py
import logging
from typing import Callable, List, Optional

from chore_wars.core.database import DuplicateKeyError
from chore_wars.core.repository import CompletionRepository, ParticipantRepository, QuestRepository, by_instant
from chore_wars.core.utils import get_now_iso, new_id
from chore_wars.game_logic import GameLogic
from chore_wars.models.quest import (
    LIVE_STATUSES, UNCLAIMED_STATUS, CompletionStatus, Participant, Quest,
    QuestCompletion, QuestCompletionSummary, QuestSummary, VerificationOutcome,
)
from chore_wars.models.result import AppResult, ErrorKind, validate_ids
from chore_wars.services.activity_feed_service import ActivityFeedService
from chore_wars.services.loot_service import LootDropService
from chore_wars.services.progression_service import ProgressionService

logger = logging.getLogger("service.quest")

ALREADY_CLAIMED = "Quest is already claimed by another user"


def to_summary(completion: QuestCompletion, quest: Optional[Quest] = None,
               user: Optional[Participant] = None, status: Optional[str] = None,
               outcome: Optional[VerificationOutcome] = None) -> QuestCompletionSummary:
    return QuestCompletionSummary(
        completion_id=completion.completion_id,
        quest_id=completion.quest_id,
        quest_title=quest.title if quest else '',
        user_id=completion.user_id,
        username=user.username if user else '',
        status=status or CompletionStatus(completion.status).value,
        exp_earned=completion.exp_earned,
        gold_earned=completion.gold_earned,
        strength_gained=completion.strength_gained,
        intelligence_gained=completion.intelligence_gained,
        constitution_gained=completion.constitution_gained,
        claimed_at=completion.claimed_at,
        completed_at=completion.completed_at,
        verified_at=completion.verified_at,
        verified_by=completion.verified_by,
        outcome=outcome,
    )


def to_quest_summary(quest: Quest, is_claimed: bool = False) -> QuestSummary:
    return QuestSummary(
        quest_id=quest.quest_id,
        title=quest.title,
        description=quest.description,
        exp_reward=quest.exp_reward,
        gold_reward=quest.gold_reward,
        strength_bonus=quest.strength_bonus,
        intelligence_bonus=quest.intelligence_bonus,
        constitution_bonus=quest.constitution_bonus,
        difficulty=quest.difficulty.value,
        quest_type=quest.quest_type.value,
        is_claimed=is_claimed,
    )


class QuestService:
    """Quest completion lifecycle: claim -> complete -> verify (or unclaim).

    Approval runs the reward cascade (progression, feed, loot, milestones)
    step by step. A failing step is logged and reported in ``errors`` on the
    returned envelope; whatever was applied before it stays applied.
    """

    def __init__(self,
                 quests: Optional[QuestRepository] = None,
                 participants: Optional[ParticipantRepository] = None,
                 completions: Optional[CompletionRepository] = None,
                 progression: Optional[ProgressionService] = None,
                 loot: Optional[LootDropService] = None,
                 feed: Optional[ActivityFeedService] = None):
        self.quests = quests or QuestRepository()
        self.participants = participants or ParticipantRepository()
        self.completions = completions or CompletionRepository()
        self.progression = progression or ProgressionService(self.participants)
        self.loot = loot or LootDropService()
        self.feed = feed or ActivityFeedService(participants=self.participants)

    # ==========================================
    # Commands
    # ==========================================

    def claim_quest(self, quest_id: str, user_id: str) -> AppResult[QuestCompletionSummary]:
        errors = validate_ids(quest_id=quest_id, user_id=user_id)
        if errors:
            return AppResult.validation_failure(errors)

        try:
            # existence check + insert under one write lock
            with self.completions.transaction() as cur:
                quest = self.quests.get_by_id(quest_id, cur=cur)
                if quest is None:
                    return AppResult.failure(ErrorKind.NOT_FOUND, "Quest not found")
                if not quest.is_active:
                    return AppResult.failure(ErrorKind.INVALID_STATE, "Quest is not active")

                if self.completions.find(cur=cur, quest_id=quest_id, status=LIVE_STATUSES):
                    logger.warning(f"Claim refused, quest already live: Quest={quest_id}, User={user_id}")
                    return AppResult.failure(ErrorKind.CONFLICT, ALREADY_CLAIMED)

                user = self.participants.get_by_id(user_id, cur=cur)
                if user is None:
                    return AppResult.failure(ErrorKind.NOT_FOUND, "User not found")
                if user.party_id != quest.party_id:
                    return AppResult.failure(ErrorKind.FORBIDDEN, "User does not belong to this quest's party")

                completion = QuestCompletion(
                    completion_id=new_id(),
                    quest_id=quest.quest_id,
                    user_id=user.user_id,
                    status=CompletionStatus.CLAIMED,
                    claimed_at=get_now_iso(),
                    exp_earned=quest.exp_reward,
                    gold_earned=quest.gold_reward,
                    strength_gained=quest.strength_bonus,
                    intelligence_gained=quest.intelligence_bonus,
                    constitution_gained=quest.constitution_bonus,
                )
                self.completions.add(completion, cur=cur)
        except DuplicateKeyError:
            # the live-claim unique index caught a racing claim
            logger.warning(f"Claim lost race: Quest={quest_id}, User={user_id}")
            return AppResult.failure(ErrorKind.CONFLICT, ALREADY_CLAIMED)

        logger.info(f"Quest Claimed: User={user_id}, Quest={quest.title}, Completion={completion.completion_id}")
        return AppResult.success(to_summary(completion, quest, user), "Quest claimed successfully")

    def _load_owned(self, completion_id: str, user_id: str, cur):
        completion = self.completions.get_by_id(completion_id, cur=cur)
        if completion is None:
            return None, AppResult.failure(ErrorKind.NOT_FOUND, "Quest completion not found")
        if completion.user_id != user_id:
            return None, AppResult.failure(ErrorKind.FORBIDDEN, "User is not the owner of this quest completion")
        return completion, None

    def complete_quest(self, completion_id: str, user_id: str) -> AppResult[QuestCompletionSummary]:
        errors = validate_ids(completion_id=completion_id, user_id=user_id)
        if errors:
            return AppResult.validation_failure(errors)

        with self.completions.transaction() as cur:
            completion, failure = self._load_owned(completion_id, user_id, cur)
            if failure is not None:
                return failure
            if not GameLogic.can_transition(completion.status, CompletionStatus.PENDING_VERIFICATION):
                return AppResult.failure(ErrorKind.INVALID_STATE, "Quest is not in claimed status")

            completion.status = CompletionStatus.PENDING_VERIFICATION
            completion.completed_at = get_now_iso()
            self.completions.update(completion, cur=cur)

            quest = self.quests.get_by_id(completion.quest_id, cur=cur)
            user = self.participants.get_by_id(completion.user_id, cur=cur)

        logger.info(f"Quest Completed (awaiting verification): User={user_id}, Completion={completion_id}")
        return AppResult.success(to_summary(completion, quest, user), "Quest marked as complete, awaiting DM verification")

    def unclaim_quest(self, completion_id: str, user_id: str) -> AppResult[QuestCompletionSummary]:
        errors = validate_ids(completion_id=completion_id, user_id=user_id)
        if errors:
            return AppResult.validation_failure(errors)

        with self.completions.transaction() as cur:
            completion, failure = self._load_owned(completion_id, user_id, cur)
            if failure is not None:
                return failure
            if CompletionStatus(completion.status) != CompletionStatus.CLAIMED:
                return AppResult.failure(ErrorKind.INVALID_STATE, "Only claimed quests can be unclaimed")

            quest = self.quests.get_by_id(completion.quest_id, cur=cur)
            user = self.participants.get_by_id(completion.user_id, cur=cur)
            self.completions.delete(completion_id, cur=cur)

        logger.info(f"Quest Unclaimed: User={user_id}, Completion={completion_id}")
        return AppResult.success(to_summary(completion, quest, user, status=UNCLAIMED_STATUS), "Quest unclaimed")

    def verify_quest(self, completion_id: str, verifier_id: str, approved: bool) -> AppResult[QuestCompletionSummary]:
        errors = validate_ids(completion_id=completion_id, verifier_id=verifier_id)
        if errors:
            return AppResult.validation_failure(errors)

        target = CompletionStatus.APPROVED if approved else CompletionStatus.REJECTED
        with self.completions.transaction() as cur:
            completion = self.completions.get_by_id(completion_id, cur=cur)
            if completion is None:
                return AppResult.failure(ErrorKind.NOT_FOUND, "Quest completion not found")
            if not GameLogic.can_transition(completion.status, target):
                return AppResult.failure(ErrorKind.INVALID_STATE, "Quest is not pending verification")

            quest = self.quests.get_by_id(completion.quest_id, cur=cur)
            if quest is None:
                return AppResult.failure(ErrorKind.NOT_FOUND, "Quest not found")

            verifier = self.participants.get_by_id(verifier_id, cur=cur)
            if verifier is None or verifier.party_id != quest.party_id:
                return AppResult.failure(ErrorKind.FORBIDDEN, "Invalid DM for this party")

            completion.status = target
            completion.verified_at = get_now_iso()
            completion.verified_by = verifier_id
            self.completions.update(completion, cur=cur)

        if not approved:
            logger.info(f"Quest Rejected: Completion={completion_id}, DM={verifier_id}")
            user = self.participants.get_by_id(completion.user_id)
            return AppResult.success(to_summary(completion, quest, user), "Quest rejected")

        logger.info(f"Quest Approved: Completion={completion_id}, DM={verifier_id}")
        outcome, cascade_errors = self._grant_rewards(completion, quest)
        user = self.participants.get_by_id(completion.user_id)

        message = "Quest verified and rewards granted"
        if cascade_errors:
            message += f" ({len(cascade_errors)} reward step(s) failed)"
        return AppResult.success(to_summary(completion, quest, user, outcome=outcome), message, errors=cascade_errors)

    # ==========================================
    # Reward cascade
    # ==========================================

    def _step(self, label: str, errors: List[str], func: Callable[..., AppResult], *args, **kwargs) -> Optional[AppResult]:
        """Run one cascade step; failures are logged and collected, never raised"""
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.exception(f"❌ Reward step '{label}' raised: {e}")
            errors.append(f"{label}: {e}")
            return None

        if not result.is_success:
            detail = "; ".join(result.errors) or "failed"
            logger.error(f"❌ Reward step '{label}' failed: {detail}")
            errors.append(f"{label}: {detail}")
            return None
        return result

    def _grant_rewards(self, completion: QuestCompletion, quest: Quest):
        user_id = completion.user_id
        party_id = quest.party_id
        errors: List[str] = []
        outcome = VerificationOutcome()
        completion_gains = {
            "Strength": completion.strength_gained,
            "Intelligence": completion.intelligence_gained,
            "Constitution": completion.constitution_gained,
        }

        self._step("award experience", errors, self.progression.award_experience, user_id, completion.exp_earned)
        self._step("award gold", errors, self.progression.award_gold, user_id, completion.gold_earned)
        awarded = self._step("award attributes", errors, self.progression.award_attributes, user_id,
                             completion.strength_gained, completion.intelligence_gained, completion.constitution_gained)
        level_up = self._step("level up", errors, self.progression.check_level_up, user_id)

        self._step("record quest completed", errors, self.feed.record_quest_completed,
                   user_id, party_id, quest.title, completion.exp_earned, completion.gold_earned,
                   completion.strength_gained, completion.intelligence_gained, completion.constitution_gained)

        if level_up and level_up.data:
            outcome.leveled_up = True
            outcome.old_level = level_up.data.old_level
            outcome.new_level = level_up.data.new_level
            self._step("record level up", errors, self.feed.record_level_up, user_id, party_id, level_up.data.new_level)

        loot = self._step("loot drop", errors, self.loot.try_generate_loot_drop, user_id, completion.completion_id)
        if loot and loot.data:
            outcome.loot = loot.data
            self._step("record loot found", errors, self.feed.record_loot_found, user_id, party_id, loot.data.name)

        if awarded:
            # the atomic increment returned this award's own post-award row
            after = awarded.data.attributes()
            before = {stat: value - completion_gains[stat] for stat, value in after.items()}
            try:
                milestone_results = self.feed.record_stat_milestones(user_id, party_id, before, after)
            except Exception as e:
                logger.exception(f"❌ Reward step 'stat milestones' raised: {e}")
                errors.append(f"stat milestones: {e}")
                milestone_results = []
            for result in milestone_results:
                if result.is_success:
                    outcome.milestones.append(result.data.message)
                else:
                    errors.extend(f"record stat milestone: {e}" for e in result.errors)

        return outcome, errors

    # ==========================================
    # Queries
    # ==========================================

    def get_available_quests(self, party_id: str) -> AppResult[List[QuestSummary]]:
        """Active party quests nobody currently holds"""
        quests = self.quests.find(party_id=party_id, is_active=1, order_by=by_instant("created_at"))
        live = {c.quest_id for c in self.completions.find(quest_id=[q.quest_id for q in quests], status=LIVE_STATUSES)}
        return AppResult.success([to_quest_summary(q) for q in quests if q.quest_id not in live])

    def get_my_active_quests(self, user_id: str) -> AppResult[List[QuestCompletionSummary]]:
        completions = self.completions.find(user_id=user_id, status=LIVE_STATUSES, order_by=by_instant("claimed_at"))
        user = self.participants.get_by_id(user_id)
        return AppResult.success([
            to_summary(c, self.quests.get_by_id(c.quest_id), user) for c in completions
        ])

    def get_pending_verifications(self, party_id: str) -> AppResult[List[QuestCompletionSummary]]:
        quests = {q.quest_id: q for q in self.quests.find(party_id=party_id)}
        pending = self.completions.find(
            quest_id=list(quests),
            status=CompletionStatus.PENDING_VERIFICATION.value,
            order_by=by_instant("completed_at"),
        )
        return AppResult.success([
            to_summary(c, quests[c.quest_id], self.participants.get_by_id(c.user_id)) for c in pending
        ])
