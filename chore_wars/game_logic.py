import math
import random
from typing import Dict, Iterable, Optional, Tuple

from chore_wars import config, quest_data
from chore_wars.models.quest import CompletionStatus

# Core rule calculations (level curve, loot rolls, milestones, transitions)
class GameLogic:
    """
    Game rule calculations.
    No DB access: plain inputs in, plain outputs out.
    """

    # Legal completion status transitions. Unclaim (Claimed -> removed) is a
    # delete, not a status change, and is checked by the lifecycle service.
    VALID_TRANSITIONS: Dict[CompletionStatus, Tuple[CompletionStatus, ...]] = {
        CompletionStatus.CLAIMED: (CompletionStatus.PENDING_VERIFICATION,),
        CompletionStatus.PENDING_VERIFICATION: (CompletionStatus.APPROVED, CompletionStatus.REJECTED),
        CompletionStatus.APPROVED: (),
        CompletionStatus.REJECTED: (),
    }

    @classmethod
    def can_transition(cls, current: CompletionStatus, target: CompletionStatus) -> bool:
        return target in cls.VALID_TRANSITIONS.get(CompletionStatus(current), ())

    @staticmethod
    def calculate_next_level_exp(level: int) -> int:
        """EXP needed to clear the given level"""
        return math.floor(config.LEVEL_BASE_EXP * math.pow(config.LEVEL_GROWTH_RATE, level - 1))

    @classmethod
    def calc_level_progress(cls, current_level: int, current_exp: int, exp_to_next: int) -> Tuple[int, int, int]:
        """
        Resolve every pending level up.
        Returns: (new_level, new_exp, new_exp_to_next) with new_exp < new_exp_to_next
        """
        new_level = current_level
        total_exp = current_exp
        req_exp = exp_to_next

        while total_exp >= req_exp:
            total_exp -= req_exp
            new_level += 1
            req_exp = cls.calculate_next_level_exp(new_level)

        return new_level, total_exp, req_exp

    @staticmethod
    def pick_rarity(roll: float) -> str:
        """Map a uniform [0, 1) roll onto a rarity tier by cumulative weight"""
        cumulative = 0.0
        tier = None
        for tier, weight in config.RARITY_WEIGHTS.items():
            cumulative += weight
            if roll < cumulative:
                return tier
        # float rounding can leave the top of the range uncovered
        return tier

    @classmethod
    def roll_loot(cls, rng: random.Random) -> Optional[Tuple[str, str, str]]:
        """
        Two-stage loot draw.
        Returns (name, description, rarity) or None when nothing drops.
        """
        if rng.random() >= config.LOOT_DROP_CHANCE:
            return None

        rarity = cls.pick_rarity(rng.random())
        candidates = [item for item in quest_data.LOOT_TABLE if item[2] == rarity]
        return rng.choice(candidates)

    @staticmethod
    def find_milestone(before: int, after: int, thresholds: Iterable[int] = None) -> Optional[int]:
        """First threshold (ascending) crossed from below by before -> after"""
        for threshold in sorted(thresholds or config.MILESTONE_THRESHOLDS):
            if before < threshold <= after:
                return threshold
        return None

    @staticmethod
    def milestone_title(stat_name: str, threshold: int) -> str:
        return quest_data.MILESTONE_TITLES.get((stat_name, threshold), f"{stat_name} Master")
