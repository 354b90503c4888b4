# tests/test_quest_router.py
import unittest
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from chore_wars.routers import quest_router
from chore_wars.server import app
from tests.db_case import DbTestCase


class TestQuestRouter(DbTestCase):

    def setUp(self):
        super().setUp()
        self.add_user("hero", display_name="Hero")
        self.add_user("dm")
        self.add_user("outsider", party_id="party2")
        self.add_quest("dishes", title="Do the dishes", exp_reward=50, gold_reward=25)
        rng = MagicMock()
        rng.random.return_value = 0.99
        patcher = patch.object(quest_router.loot_service, "rng", rng)
        patcher.start()
        self.addCleanup(patcher.stop)

        self.client = TestClient(app)

    def _claim(self, user_id="hero"):
        return self.client.post("/api/quest/quests/dishes/claim", json={"user_id": user_id})

    def test_claim_and_conflict(self):
        res = self._claim()
        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertTrue(body["is_success"])
        self.assertEqual(body["data"]["status"], "Claimed")

        res = self._claim("dm")
        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.json()["error_kind"], "Conflict")

    def test_error_status_codes(self):
        self.assertEqual(self.client.post("/api/quest/quests/nope/claim", json={"user_id": "hero"}).status_code, 404)
        self.assertEqual(self._claim("outsider").status_code, 403)
        self.assertEqual(self._claim(" ").status_code, 422)
        self.assertEqual(self.client.get("/api/quest/users/ghost/progress").status_code, 404)

    def test_full_lifecycle(self):
        completion_id = self._claim().json()["data"]["completion_id"]

        early = self.client.post(f"/api/quest/completions/{completion_id}/verify",
                                 json={"verifier_id": "dm", "approved": True})
        self.assertEqual(early.status_code, 400)

        res = self.client.post(f"/api/quest/completions/{completion_id}/complete", json={"user_id": "hero"})
        self.assertEqual(res.json()["data"]["status"], "PendingVerification")

        pending = self.client.get("/api/quest/parties/party1/verifications").json()["data"]
        self.assertEqual([p["completion_id"] for p in pending], [completion_id])

        res = self.client.post(f"/api/quest/completions/{completion_id}/verify",
                               json={"verifier_id": "dm", "approved": True})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["data"]["status"], "Approved")

        progress = self.client.get("/api/quest/users/hero/progress").json()["data"]
        self.assertEqual((progress["exp"], progress["gold"]), (50, 25))

        activity = self.client.get("/api/quest/parties/party1/activity", params={"count": 1}).json()["data"]
        self.assertEqual(len(activity), 1)
        self.assertEqual(activity[0]["activity_type"], "QuestCompleted")

    def test_unclaim(self):
        completion_id = self._claim().json()["data"]["completion_id"]
        res = self.client.post(f"/api/quest/completions/{completion_id}/unclaim", json={"user_id": "hero"})
        self.assertEqual(res.json()["data"]["status"], "Unclaimed")
        available = self.client.get("/api/quest/parties/party1/quests/available").json()["data"]
        self.assertEqual([q["quest_id"] for q in available], ["dishes"])

    def test_progression_endpoints(self):
        self.client.post("/api/quest/users/hero/award/exp", json={"amount": 120})
        self.client.post("/api/quest/users/hero/award/gold", json={"amount": 7})
        self.client.post("/api/quest/users/hero/award/attributes", json={"intelligence": 3})

        level_up = self.client.post("/api/quest/users/hero/level_up").json()["data"]
        self.assertEqual(level_up["new_level"], 2)
        self.assertIsNone(self.client.post("/api/quest/users/hero/level_up").json()["data"])

        stats = self.client.get("/api/quest/users/hero/stats").json()["data"]
        self.assertEqual((stats["level"], stats["intelligence"]), (2, 3))
        self.assertEqual(self.client.get("/api/quest/users/hero/loot").json()["data"], [])
        self.assertEqual(self.client.get("/api/quest/users/hero/quests/active").json()["data"], [])


if __name__ == "__main__":
    unittest.main()
