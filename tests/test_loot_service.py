# tests/test_loot_service.py
import unittest
from unittest.mock import MagicMock, patch

from chore_wars.models.quest import Rarity
from chore_wars.models.result import ErrorKind
from chore_wars.services.loot_service import LootDropService
from tests.db_case import DbTestCase


class TestLootDropService(DbTestCase):

    def setUp(self):
        super().setUp()
        self.add_user("hero")

    def test_no_drop(self):
        rng = MagicMock()
        rng.random.return_value = 0.5
        service = LootDropService(rng=rng)

        result = service.try_generate_loot_drop("hero", "c1")
        self.assertTrue(result.is_success)
        self.assertIsNone(result.data)
        self.assertEqual(result.message, "No loot dropped this time")
        self.assertEqual(service.get_user_loot_drops("hero").data, [])

    def test_drop_is_persisted(self):
        rng = MagicMock()
        rng.random.side_effect = [0.05, 0.7]
        rng.choice.side_effect = lambda items: items[0]
        service = LootDropService(rng=rng)

        result = service.try_generate_loot_drop("hero", "c1")
        self.assertEqual(result.data.rarity, Rarity.UNCOMMON)
        self.assertEqual(result.data.name, "Golden Spatula")
        self.assertEqual(result.message, "Legendary loot found: Golden Spatula!")

        stored = service.get_user_loot_drops("hero").data
        self.assertEqual(len(stored), 1)
        self.assertEqual(stored[0].completion_id, "c1")
        self.assertEqual(stored[0].user_id, "hero")

    def test_newest_first(self):
        rng = MagicMock()
        rng.random.return_value = 0.0
        rng.choice.side_effect = lambda items: items[0]
        service = LootDropService(rng=rng)

        for completion_id in ("c1", "c2", "c3"):
            service.try_generate_loot_drop("hero", completion_id)

        drops = service.get_user_loot_drops("hero").data
        self.assertEqual([d.completion_id for d in drops], ["c3", "c2", "c1"])
        self.assertEqual(service.get_user_loot_drops("someone_else").data, [])

    def test_newest_first_across_dst(self):
        rng = MagicMock()
        rng.random.return_value = 0.0
        rng.choice.side_effect = lambda items: items[0]
        service = LootDropService(rng=rng)

        stamps = ["2024-11-03T01:10:00.000000-05:00", "2024-11-03T01:50:00.000000-04:00"]
        with patch("chore_wars.services.loot_service.get_now_iso", side_effect=stamps):
            service.try_generate_loot_drop("hero", "late")
            service.try_generate_loot_drop("hero", "early")

        drops = service.get_user_loot_drops("hero").data
        self.assertEqual([d.completion_id for d in drops], ["late", "early"])

    def test_blank_ids(self):
        result = LootDropService().try_generate_loot_drop("hero", "")
        self.assertEqual(result.error_kind, ErrorKind.VALIDATION_FAILURE)
        self.assertEqual([e.field for e in result.validation_errors], ["completion_id"])


if __name__ == "__main__":
    unittest.main()
