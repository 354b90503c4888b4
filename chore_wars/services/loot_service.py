# chore_wars/services/loot_service.py
import logging
import random
from typing import List, Optional

from chore_wars.core.repository import LootDropRepository, by_instant
from chore_wars.core.utils import get_now_iso, new_id
from chore_wars.game_logic import GameLogic
from chore_wars.models.quest import LootDrop, Rarity
from chore_wars.models.result import AppResult, validate_ids

logger = logging.getLogger("service.loot")


class LootDropService:
    """Rolls and stores cosmetic loot found on approved quests"""

    def __init__(self, loot_drops: Optional[LootDropRepository] = None, rng: Optional[random.Random] = None):
        self.loot_drops = loot_drops or LootDropRepository()
        self.rng = rng or random.Random()

    def try_generate_loot_drop(self, user_id: str, completion_id: str) -> AppResult[Optional[LootDrop]]:
        errors = validate_ids(user_id=user_id, completion_id=completion_id)
        if errors:
            return AppResult.validation_failure(errors)

        rolled = GameLogic.roll_loot(self.rng)
        if rolled is None:
            return AppResult.success(None, "No loot dropped this time")

        name, description, rarity = rolled
        loot = LootDrop(
            loot_id=new_id(),
            name=name,
            description=description,
            rarity=Rarity(rarity),
            user_id=user_id,
            completion_id=completion_id,
            found_at=get_now_iso(),
        )
        self.loot_drops.add(loot)

        logger.info(f"✨ Lucky! {rarity} loot '{name}' dropped for {user_id}")
        return AppResult.success(loot, f"Legendary loot found: {name}!")

    def get_user_loot_drops(self, user_id: str) -> AppResult[List[LootDrop]]:
        drops = self.loot_drops.find(user_id=user_id, order_by=by_instant("found_at", descending=True))
        return AppResult.success(drops)
