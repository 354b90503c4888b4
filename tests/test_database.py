# tests/test_database.py
import sqlite3
import unittest

from chore_wars import config
from chore_wars.core.database import DuplicateKeyError, get_db_cursor
from tests.db_case import DbTestCase


class TestGetDbCursor(DbTestCase):

    def test_unique_violation_is_duplicate_key(self):
        self.add_user("hero")
        with self.assertRaises(DuplicateKeyError):
            self.add_user("hero")

    def test_live_claim_index_is_duplicate_key(self):
        insert = (f"INSERT INTO {config.SQLITE_TABLE_COMPLETIONS} "
                  "(completion_id, quest_id, user_id, status, claimed_at) VALUES (?, 'q1', 'u1', 'Claimed', 'now')")
        with get_db_cursor(commit=True) as cur:
            cur.execute(insert, ("c1",))
        with self.assertRaises(DuplicateKeyError):
            with get_db_cursor(commit=True) as cur:
                cur.execute(insert, ("c2",))

    def test_other_constraints_stay_integrity_errors(self):
        with self.assertRaises(sqlite3.IntegrityError) as ctx:
            with get_db_cursor(commit=True) as cur:
                cur.execute(
                    f"INSERT INTO {config.SQLITE_TABLE_COMPLETIONS} (completion_id, quest_id, user_id, status, claimed_at) "
                    "VALUES ('c1', 'q1', 'u1', NULL, 'now')")
        self.assertNotIsInstance(ctx.exception, DuplicateKeyError)
        self.assertIn("NOT NULL", str(ctx.exception))

    def test_failed_write_is_rolled_back(self):
        with self.assertRaises(DuplicateKeyError):
            with get_db_cursor(commit=True) as cur:
                cur.execute(f"INSERT INTO {config.SQLITE_TABLE_PARTICIPANTS} "
                            "(user_id, username, display_name, party_id, created_at) VALUES ('a', 'a', 'A', 'p', 'now')")
                cur.execute(f"INSERT INTO {config.SQLITE_TABLE_PARTICIPANTS} "
                            "(user_id, username, display_name, party_id, created_at) VALUES ('a', 'a', 'A', 'p', 'now')")
        self.assertIsNone(self.participants.get_by_id("a"))


if __name__ == "__main__":
    unittest.main()
