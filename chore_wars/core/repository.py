"""Per-entity storage capability backed by SQLite.

Services only see get_by_id / find / add / update / delete / increment.
Every write persists on return. A caller that needs several statements to
act as one unit opens ``transaction()`` and passes the cursor through ``cur``.
"""
from contextlib import contextmanager
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel

from chore_wars import config
from chore_wars.core.database import get_db_cursor
from chore_wars.models.quest import (
    ActivityFeedItem, LootDrop, Participant, Quest, QuestCompletion,
)

M = TypeVar("M", bound=BaseModel)


def by_instant(column: str, descending: bool = False) -> str:
    """ORDER BY the instant an offset-carrying ISO-8601 stamp denotes, then insertion order"""
    direction = "DESC" if descending else "ASC"
    return f"julianday({column}) {direction}, rowid {direction}"


class SqliteRepository(Generic[M]):
    table: str = ""
    key: str = ""
    model: Type[BaseModel] = BaseModel

    def __init__(self, db_path: Optional[str] = None):
        self._db_path = db_path

    # ------------------------------------------------------------------
    # plumbing
    # ------------------------------------------------------------------

    @contextmanager
    def _cursor(self, cur=None, commit: bool = False):
        if cur is not None:
            yield cur
        else:
            with get_db_cursor(commit=commit, db_path=self._db_path) as own:
                yield own

    @contextmanager
    def transaction(self):
        """Write-locked unit of work; commits on clean exit"""
        with get_db_cursor(commit=True, immediate=True, db_path=self._db_path) as cur:
            yield cur

    def _row_to_model(self, row) -> M:
        return self.model.model_validate(dict(row))

    @staticmethod
    def _where(conditions: Dict[str, Any]):
        clauses, params = [], []
        for column, value in conditions.items():
            if isinstance(value, (list, tuple, set, frozenset)):
                values = list(value)
                if not values:
                    clauses.append("0")
                    continue
                clauses.append(f"{column} IN ({','.join(['?'] * len(values))})")
                params.extend(values)
            elif value is None:
                clauses.append(f"{column} IS NULL")
            else:
                clauses.append(f"{column} = ?")
                params.append(value)
        sql = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        return sql, params

    # ------------------------------------------------------------------
    # capability
    # ------------------------------------------------------------------

    def get_by_id(self, entity_id: str, cur=None) -> Optional[M]:
        with self._cursor(cur) as c:
            row = c.execute(f"SELECT * FROM {self.table} WHERE {self.key} = ?", (entity_id,)).fetchone()
        return self._row_to_model(row) if row else None

    def find(self, order_by: Optional[str] = None, limit: Optional[int] = None, cur=None, **conditions) -> List[M]:
        """Rows matching every column condition (scalar = equality, sequence = IN)"""
        where, params = self._where(conditions)
        sql = f"SELECT * FROM {self.table}{where}"
        if order_by:
            sql += f" ORDER BY {order_by}"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(int(limit))
        with self._cursor(cur) as c:
            rows = c.execute(sql, params).fetchall()
        return [self._row_to_model(r) for r in rows]

    def add(self, entity: M, cur=None) -> M:
        data = entity.model_dump(mode="json")
        columns = ", ".join(data.keys())
        placeholders = ", ".join(["?"] * len(data))
        with self._cursor(cur, commit=True) as c:
            c.execute(f"INSERT INTO {self.table} ({columns}) VALUES ({placeholders})", tuple(data.values()))
        return entity

    def update(self, entity: M, cur=None) -> M:
        data = entity.model_dump(mode="json")
        entity_id = data.pop(self.key)
        assignments = ", ".join(f"{col} = ?" for col in data)
        with self._cursor(cur, commit=True) as c:
            c.execute(
                f"UPDATE {self.table} SET {assignments} WHERE {self.key} = ?",
                (*data.values(), entity_id),
            )
        return entity

    def delete(self, entity_id: str, cur=None) -> bool:
        with self._cursor(cur, commit=True) as c:
            deleted = c.execute(f"DELETE FROM {self.table} WHERE {self.key} = ?", (entity_id,)).rowcount
        return deleted > 0

    def increment(self, entity_id: str, cur=None, **deltas: int) -> Optional[M]:
        """Atomically add deltas to integer columns and return the fresh row"""
        if not deltas:
            return self.get_by_id(entity_id, cur=cur)
        assignments = ", ".join(f"{col} = {col} + ?" for col in deltas)
        with self._cursor(cur, commit=True) as c:
            c.execute(
                f"UPDATE {self.table} SET {assignments} WHERE {self.key} = ?",
                (*deltas.values(), entity_id),
            )
            row = c.execute(f"SELECT * FROM {self.table} WHERE {self.key} = ?", (entity_id,)).fetchone()
        return self._row_to_model(row) if row else None


class ParticipantRepository(SqliteRepository[Participant]):
    table = config.SQLITE_TABLE_PARTICIPANTS
    key = "user_id"
    model = Participant


class QuestRepository(SqliteRepository[Quest]):
    table = config.SQLITE_TABLE_QUESTS
    key = "quest_id"
    model = Quest


class CompletionRepository(SqliteRepository[QuestCompletion]):
    table = config.SQLITE_TABLE_COMPLETIONS
    key = "completion_id"
    model = QuestCompletion


class LootDropRepository(SqliteRepository[LootDrop]):
    table = config.SQLITE_TABLE_LOOT
    key = "loot_id"
    model = LootDrop


class ActivityFeedRepository(SqliteRepository[ActivityFeedItem]):
    table = config.SQLITE_TABLE_ACTIVITY
    key = "activity_id"
    model = ActivityFeedItem
