# tests/test_game_logic.py
import random
import unittest
from collections import Counter
from unittest.mock import MagicMock

from chore_wars.game_logic import GameLogic
from chore_wars.models.quest import CompletionStatus


class TestLevelCurve(unittest.TestCase):

    def test_calculate_next_level_exp(self):
        self.assertEqual(GameLogic.calculate_next_level_exp(1), 100)
        self.assertEqual(GameLogic.calculate_next_level_exp(2), 150)
        self.assertEqual(GameLogic.calculate_next_level_exp(3), 225)
        self.assertEqual(GameLogic.calculate_next_level_exp(4), 337)

    def test_no_level_up_below_threshold(self):
        self.assertEqual(GameLogic.calc_level_progress(1, 99, 100), (1, 99, 100))

    def test_exact_threshold_levels_up(self):
        self.assertEqual(GameLogic.calc_level_progress(1, 100, 100), (2, 0, 150))

    def test_multi_level_jump(self):
        # 250 = 100 (lv1) + 150 (lv2)
        self.assertEqual(GameLogic.calc_level_progress(1, 250, 100), (3, 0, 225))

    def test_uses_stored_threshold(self):
        # a stale stored threshold is honoured for the current level
        self.assertEqual(GameLogic.calc_level_progress(1, 130, 120), (2, 10, 150))


class TestTransitions(unittest.TestCase):

    def test_allowed(self):
        self.assertTrue(GameLogic.can_transition(CompletionStatus.CLAIMED, CompletionStatus.PENDING_VERIFICATION))
        self.assertTrue(GameLogic.can_transition(CompletionStatus.PENDING_VERIFICATION, CompletionStatus.APPROVED))
        self.assertTrue(GameLogic.can_transition("PendingVerification", CompletionStatus.REJECTED))

    def test_refused(self):
        self.assertFalse(GameLogic.can_transition(CompletionStatus.CLAIMED, CompletionStatus.APPROVED))
        self.assertFalse(GameLogic.can_transition(CompletionStatus.APPROVED, CompletionStatus.REJECTED))
        self.assertFalse(GameLogic.can_transition(CompletionStatus.REJECTED, CompletionStatus.PENDING_VERIFICATION))


class TestMilestones(unittest.TestCase):

    def test_crossing_from_below(self):
        self.assertEqual(GameLogic.find_milestone(8, 12), 10)

    def test_already_past_threshold(self):
        self.assertIsNone(GameLogic.find_milestone(10, 12))

    def test_first_threshold_wins(self):
        self.assertEqual(GameLogic.find_milestone(8, 30), 10)

    def test_custom_thresholds(self):
        self.assertEqual(GameLogic.find_milestone(0, 3, thresholds=[5, 3]), 3)

    def test_titles(self):
        self.assertEqual(GameLogic.milestone_title("Strength", 10), "Mop Squire")
        self.assertEqual(GameLogic.milestone_title("Charisma", 10), "Charisma Master")


class TestLoot(unittest.TestCase):

    def test_pick_rarity_boundaries(self):
        self.assertEqual(GameLogic.pick_rarity(0.0), "Common")
        self.assertEqual(GameLogic.pick_rarity(0.59), "Common")
        self.assertEqual(GameLogic.pick_rarity(0.6), "Uncommon")
        self.assertEqual(GameLogic.pick_rarity(0.95), "Rare")
        self.assertEqual(GameLogic.pick_rarity(0.99999), "Rare")

    def test_no_drop(self):
        rng = MagicMock()
        rng.random.return_value = 0.5
        self.assertIsNone(GameLogic.roll_loot(rng))
        rng.choice.assert_not_called()

    def test_drop_picks_within_tier(self):
        rng = MagicMock()
        rng.random.side_effect = [0.1, 0.95]
        rng.choice.side_effect = lambda items: items[0]
        name, _, rarity = GameLogic.roll_loot(rng)
        self.assertEqual(rarity, "Rare")
        self.assertEqual(name, "Sword of Dish Slaying")
        self.assertTrue(all(item[2] == "Rare" for item in rng.choice.call_args[0][0]))

    def test_distribution(self):
        rng = random.Random(20240601)
        rolls = 100_000
        drops = [GameLogic.roll_loot(rng) for _ in range(rolls)]
        found = [d for d in drops if d is not None]

        self.assertAlmostEqual(len(found) / rolls, 0.20, delta=0.01)
        tiers = Counter(d[2] for d in found)
        self.assertAlmostEqual(tiers["Common"] / len(found), 0.60, delta=0.02)
        self.assertAlmostEqual(tiers["Uncommon"] / len(found), 0.30, delta=0.02)
        self.assertAlmostEqual(tiers["Rare"] / len(found), 0.10, delta=0.02)


if __name__ == "__main__":
    unittest.main()
