# tests/db_case.py
import os
import shutil
import tempfile
import unittest

from chore_wars import config
from chore_wars.core.database import init_db
from chore_wars.core.repository import ParticipantRepository, QuestRepository
from chore_wars.core.utils import get_now_iso
from chore_wars.models.quest import Participant, Quest


class DbTestCase(unittest.TestCase):
    """Fresh SQLite file per test, Discord alerts off"""

    def setUp(self):
        self.original_webhook = config.DISCORD_WEBHOOK_ERROR
        self.original_db_path = config.SQLITE_DB_PATH
        self.original_log_dir = config.LOG_DIR
        config.DISCORD_WEBHOOK_ERROR = None

        self.tmp_dir = tempfile.mkdtemp()
        config.SQLITE_DB_PATH = os.path.join(self.tmp_dir, "test_chore_wars.db")
        config.LOG_DIR = os.path.join(self.tmp_dir, "logs")
        init_db()

        self.participants = ParticipantRepository()
        self.quests = QuestRepository()

    def tearDown(self):
        config.DISCORD_WEBHOOK_ERROR = self.original_webhook
        config.SQLITE_DB_PATH = self.original_db_path
        config.LOG_DIR = self.original_log_dir
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    # --- seed helpers ---

    def add_user(self, user_id: str, party_id: str = "party1", **fields) -> Participant:
        fields.setdefault("username", user_id)
        fields.setdefault("display_name", user_id.capitalize())
        return self.participants.add(Participant(
            user_id=user_id, party_id=party_id, created_at=get_now_iso(), **fields))

    def add_quest(self, quest_id: str, party_id: str = "party1", **fields) -> Quest:
        fields.setdefault("title", f"Quest {quest_id}")
        return self.quests.add(Quest(
            quest_id=quest_id, party_id=party_id, created_at=get_now_iso(), **fields))
