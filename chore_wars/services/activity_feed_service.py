# chore_wars/services/activity_feed_service.py
import json
import logging
from typing import Any, Dict, List, Optional

from chore_wars import config, quest_data
from chore_wars.core.repository import ActivityFeedRepository, ParticipantRepository, by_instant
from chore_wars.core.utils import get_now_iso, new_id
from chore_wars.game_logic import GameLogic
from chore_wars.models.quest import ActivityFeedItem, ActivityType
from chore_wars.models.result import AppResult, ErrorKind

logger = logging.getLogger("service.activity_feed")


class ActivityFeedService:
    """Turns game events into party-scoped, append-only feed entries"""

    def __init__(self, feed: Optional[ActivityFeedRepository] = None, participants: Optional[ParticipantRepository] = None):
        self.feed = feed or ActivityFeedRepository()
        self.participants = participants or ParticipantRepository()

    def _record(self, user_id: str, party_id: str, activity_type: ActivityType, render, metadata: Dict[str, Any]) -> AppResult[ActivityFeedItem]:
        user = self.participants.get_by_id(user_id)
        if user is None:
            logger.warning(f"Feed entry dropped, unknown user: {user_id} ({activity_type.value})")
            return AppResult.failure(ErrorKind.NOT_FOUND, "User not found")

        item = ActivityFeedItem(
            activity_id=new_id(),
            party_id=party_id,
            user_id=user_id,
            activity_type=activity_type,
            message=render(user.display_name),
            metadata=json.dumps(metadata, ensure_ascii=False),
            created_at=get_now_iso(),
        )
        self.feed.add(item)
        return AppResult.success(item)

    def record_quest_completed(self, user_id: str, party_id: str, quest_title: str,
                               exp_earned: int, gold_earned: int,
                               strength_gained: int = 0, intelligence_gained: int = 0,
                               constitution_gained: int = 0) -> AppResult[ActivityFeedItem]:
        gains = {"Strength": strength_gained, "Intelligence": intelligence_gained, "Constitution": constitution_gained}
        stat_parts = [
            f"{quest_data.STAT_EMOJI[stat]}+{value} {quest_data.STAT_ABBREVIATIONS[stat]}"
            for stat, value in gains.items() if value > 0
        ]
        stat_text = f", {', '.join(stat_parts)}" if stat_parts else ""

        def render(name: str) -> str:
            return f"{name} vanquished {quest_title.upper()}! (+{exp_earned} XP, +{gold_earned} Gold{stat_text})"

        return self._record(user_id, party_id, ActivityType.QUEST_COMPLETED, render, {
            "quest_title": quest_title,
            "exp_earned": exp_earned,
            "gold_earned": gold_earned,
            "strength_gained": strength_gained,
            "intelligence_gained": intelligence_gained,
            "constitution_gained": constitution_gained,
        })

    def record_level_up(self, user_id: str, party_id: str, new_level: int) -> AppResult[ActivityFeedItem]:
        return self._record(
            user_id, party_id, ActivityType.LEVEL_UP,
            lambda name: f"🎉 {name} reached Level {new_level}!",
            {"new_level": new_level},
        )

    def record_loot_found(self, user_id: str, party_id: str, loot_name: str) -> AppResult[ActivityFeedItem]:
        return self._record(
            user_id, party_id, ActivityType.LOOT_FOUND,
            lambda name: f"🎁 {name} found legendary loot: {loot_name}!",
            {"loot_name": loot_name},
        )

    def record_stat_milestone(self, user_id: str, party_id: str, stat_name: str, stat_value: int, milestone_title: str) -> AppResult[ActivityFeedItem]:
        emoji = quest_data.STAT_EMOJI.get(stat_name, "⭐")
        return self._record(
            user_id, party_id, ActivityType.STAT_MILESTONE,
            lambda name: f"{emoji} {name}'s {stat_name} reached {stat_value}! Earned title: \"{milestone_title}\"",
            {"stat_name": stat_name, "stat_value": stat_value, "milestone_title": milestone_title},
        )

    def record_stat_milestones(self, user_id: str, party_id: str, before: Dict[str, int], after: Dict[str, int]) -> List[AppResult[ActivityFeedItem]]:
        """One milestone entry per attribute at most: the first threshold crossed"""
        results = []
        for stat_name, new_value in after.items():
            threshold = GameLogic.find_milestone(before.get(stat_name, 0), new_value)
            if threshold is None:
                continue
            title = GameLogic.milestone_title(stat_name, threshold)
            logger.info(f"🏅 Milestone: User={user_id}, {stat_name} {threshold} '{title}'")
            results.append(self.record_stat_milestone(user_id, party_id, stat_name, new_value, title))
        return results

    def get_recent_activity(self, party_id: str, count: int = None) -> AppResult[List[ActivityFeedItem]]:
        limit = config.DEFAULT_ACTIVITY_COUNT if count is None else max(0, count)
        items = self.feed.find(party_id=party_id, order_by=by_instant("created_at", descending=True), limit=limit)
        return AppResult.success(items)
