import sqlite3
import time
import logging
from contextlib import contextmanager
from typing import Optional
from chore_wars import config

logger = logging.getLogger("core.database")

CONNECT_RETRIES = 5
RETRY_DELAY = 1.0


class DuplicateKeyError(Exception):
    """Raised when a write violates a UNIQUE / PRIMARY KEY constraint."""


def _connect(db_path: Optional[str] = None) -> sqlite3.Connection:
    """Open a connection, retrying while the database file is locked"""
    path = db_path or config.SQLITE_DB_PATH
    for attempt in range(CONNECT_RETRIES):
        try:
            conn = sqlite3.connect(path, timeout=config.SQLITE_TIMEOUT, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL;")
            return conn
        except sqlite3.OperationalError as e:
            if "locked" not in str(e) or attempt == CONNECT_RETRIES - 1:
                logger.error(f"❌ DB connect failed: {e}")
                raise
            logger.warning(f"⚠️ DB is locked. Retrying... ({attempt+1}/{CONNECT_RETRIES})")
            time.sleep(RETRY_DELAY)
    raise sqlite3.OperationalError("DB retry limit reached")


@contextmanager
def get_db_cursor(commit: bool = False, immediate: bool = False, db_path: Optional[str] = None):
    """DB cursor context manager.

    commit:    commit on clean exit (rollback on any exception).
    immediate: take the write lock up front (BEGIN IMMEDIATE) so that a
               read-check-write sequence cannot interleave with another writer.
    """
    conn = _connect(db_path)
    try:
        if immediate:
            conn.execute("BEGIN IMMEDIATE")
        cur = conn.cursor()
        yield cur
        if commit:
            conn.commit()
        else:
            conn.rollback()
    except sqlite3.IntegrityError as e:
        conn.rollback()
        if "UNIQUE constraint failed" in str(e):
            raise DuplicateKeyError(str(e)) from e
        logger.error(f"DB integrity error: {e}")
        raise
    except DuplicateKeyError:
        conn.rollback()
        raise
    except Exception as e:
        logger.error(f"DB operation error: {e}")
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(db_path: Optional[str] = None) -> None:
    """Create the quest engine tables (idempotent)"""
    logger.info(f"Initialising database: {db_path or config.SQLITE_DB_PATH}")
    with get_db_cursor(commit=True, db_path=db_path) as cur:
        # 1. Participants (adventurers)
        cur.execute(f'''CREATE TABLE IF NOT EXISTS {config.SQLITE_TABLE_PARTICIPANTS} (
            user_id TEXT PRIMARY KEY,
            username TEXT NOT NULL,
            display_name TEXT NOT NULL,
            party_id TEXT NOT NULL,
            level INTEGER DEFAULT 1,
            exp INTEGER DEFAULT 0,
            exp_to_next_level INTEGER DEFAULT 100,
            gold INTEGER DEFAULT 0,
            strength INTEGER DEFAULT 0,
            intelligence INTEGER DEFAULT 0,
            constitution INTEGER DEFAULT 0,
            created_at TEXT NOT NULL
        )''')

        # 2. Quest master
        cur.execute(f'''CREATE TABLE IF NOT EXISTS {config.SQLITE_TABLE_QUESTS} (
            quest_id TEXT PRIMARY KEY,
            party_id TEXT NOT NULL,
            title TEXT NOT NULL,
            description TEXT DEFAULT '',
            exp_reward INTEGER DEFAULT 0,
            gold_reward INTEGER DEFAULT 0,
            strength_bonus INTEGER DEFAULT 0,
            intelligence_bonus INTEGER DEFAULT 0,
            constitution_bonus INTEGER DEFAULT 0,
            difficulty TEXT DEFAULT 'Easy',     -- 'Easy', 'Medium', 'Hard'
            quest_type TEXT DEFAULT 'OneTime',  -- 'OneTime', 'Daily', 'Weekly'
            is_active INTEGER DEFAULT 1,
            created_by TEXT,
            created_at TEXT NOT NULL
        )''')

        # 3. Completions (reward snapshot is copied at claim time)
        cur.execute(f'''CREATE TABLE IF NOT EXISTS {config.SQLITE_TABLE_COMPLETIONS} (
            completion_id TEXT PRIMARY KEY,
            quest_id TEXT NOT NULL,
            user_id TEXT NOT NULL,
            status TEXT NOT NULL,               -- 'Claimed', 'PendingVerification', 'Approved', 'Rejected'
            claimed_at TEXT NOT NULL,
            completed_at TEXT,
            verified_at TEXT,
            verified_by TEXT,
            exp_earned INTEGER DEFAULT 0,
            gold_earned INTEGER DEFAULT 0,
            strength_gained INTEGER DEFAULT 0,
            intelligence_gained INTEGER DEFAULT 0,
            constitution_gained INTEGER DEFAULT 0
        )''')
        # at most one live claim per quest
        cur.execute(f'''CREATE UNIQUE INDEX IF NOT EXISTS ux_completions_live_claim
            ON {config.SQLITE_TABLE_COMPLETIONS} (quest_id)
            WHERE status IN ('Claimed', 'PendingVerification')''')

        # 4. Loot drops (one per completion)
        cur.execute(f'''CREATE TABLE IF NOT EXISTS {config.SQLITE_TABLE_LOOT} (
            loot_id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            description TEXT NOT NULL,
            rarity TEXT NOT NULL,
            user_id TEXT NOT NULL,
            completion_id TEXT NOT NULL UNIQUE,
            found_at TEXT NOT NULL
        )''')

        # 5. Activity feed (append-only)
        cur.execute(f'''CREATE TABLE IF NOT EXISTS {config.SQLITE_TABLE_ACTIVITY} (
            activity_id TEXT PRIMARY KEY,
            party_id TEXT NOT NULL,
            user_id TEXT NOT NULL,
            activity_type TEXT NOT NULL,
            message TEXT NOT NULL,
            metadata TEXT,
            created_at TEXT NOT NULL
        )''')
        cur.execute(f'''CREATE INDEX IF NOT EXISTS ix_activity_party
            ON {config.SQLITE_TABLE_ACTIVITY} (party_id, created_at)''')

    logger.info("✅ Quest engine tables ready")


if __name__ == "__main__":
    init_db()
