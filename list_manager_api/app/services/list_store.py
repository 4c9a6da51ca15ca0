"""
Persistence for subscriber lists.

``ListStore`` is the interface the list service depends on;
``SQLiteListStore`` implements it on top of the SQLite helpers in
``core.db``.  Stores return ``ListRecord`` objects, which still carry
the raw per-status subscriber counts and may have ``tags`` set to
``None``.  Shaping records for API responses is the service's job.

All queries use parameterized statements.  The only values
interpolated into SQL are sort columns and directions, and those are
looked up in fixed mappings.  Any ``sqlite3`` failure is logged and
re-raised as ``StoreError`` with a localized message.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from ..core.db import get_connection, init_db
from ..core.errors import NotFound, StoreError
from ..core.i18n import Localizer
from ..schemas.list import ListCreate, ListUpdate


logger = logging.getLogger(__name__)


@dataclass
class ListRecord:
    """A list row as returned by a store."""

    id: int
    uuid: str
    name: str
    type: str
    optin: str
    tags: Optional[List[str]]
    description: str = ""
    subscriber_counts: Dict[str, int] = field(default_factory=dict)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ListStore(Protocol):
    """Operations the list service needs from persistence."""

    def query_lists(
        self,
        query: str = "",
        tags: Sequence[str] = (),
        order_by: str = "created_at",
        order: str = "desc",
        offset: int = 0,
        limit: int = 0,
        list_id: int = 0,
    ) -> Tuple[List[ListRecord], int]:
        """Return one page of lists with subscriber counts, plus the total match count."""
        ...

    def get_lists(self, list_type: str = "") -> List[ListRecord]:
        """Return all lists (optionally of one type) without subscriber counts."""
        ...

    def create_list(self, data: ListCreate) -> ListRecord:
        ...

    def update_list(self, list_id: int, data: ListUpdate) -> ListRecord:
        """Replace the list's fields; raise ``NotFound`` if it does not exist."""
        ...

    def delete_lists(self, ids: Sequence[int]) -> None:
        ...


# Sort field -> SQL expression.  ``subscriber_count`` is a computed column.
_SORT_COLUMNS = {
    "name": "l.name",
    "type": "l.type",
    "subscriber_count": "subscriber_count",
    "created_at": "l.created_at",
    "updated_at": "l.updated_at",
}
_SORT_ORDERS = {"asc": "ASC", "desc": "DESC"}


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SQLiteListStore:
    """``ListStore`` backed by the bundled SQLite schema."""

    def __init__(self, i18n: Localizer, db_path: Optional[str] = None) -> None:
        self.i18n = i18n
        self.db_path = db_path

    def init(self) -> None:
        """Create or migrate the schema."""
        init_db(self.db_path)

    def _fail(self, key: str, name: str, exc: Exception) -> StoreError:
        logger.error("List store operation failed: %s", exc, exc_info=exc)
        return StoreError(self.i18n.ts(key, name=name, error=str(exc)))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def query_lists(
        self,
        query: str = "",
        tags: Sequence[str] = (),
        order_by: str = "created_at",
        order: str = "desc",
        offset: int = 0,
        limit: int = 0,
        list_id: int = 0,
    ) -> Tuple[List[ListRecord], int]:
        """Full list query with per-status subscriber counts.

        A ``limit`` of 0 returns every matching row.  The total number
        of matches (ignoring ``offset``/``limit``) is returned alongside
        the page.
        """
        where: List[str] = []
        args: List[object] = []
        if list_id:
            where.append("l.id = ?")
            args.append(list_id)
        if query:
            where.append("l.name LIKE ? ESCAPE '\\'")
            args.append(f"%{_escape_like(query)}%")
        for tag in tags:
            where.append("EXISTS (SELECT 1 FROM json_each(l.tags) AS t WHERE t.value = ?)")
            args.append(tag)

        sql = (
            "SELECT l.*, COUNT(*) OVER () AS total,"
            " (SELECT COUNT(*) FROM subscriber_lists sl WHERE sl.list_id = l.id) AS subscriber_count"
            " FROM lists l"
        )
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += (
            f" ORDER BY {_SORT_COLUMNS.get(order_by, 'l.created_at')}"
            f" {_SORT_ORDERS.get(order, 'DESC')}, l.id ASC LIMIT ? OFFSET ?"
        )
        args.extend([limit if limit > 0 else -1, max(offset, 0)])

        conn = get_connection(self.db_path)
        try:
            rows = conn.execute(sql, args).fetchall()
            if not rows:
                return [], 0
            counts = self._subscriber_counts(conn, [row["id"] for row in rows])
        except sqlite3.Error as e:
            raise self._fail("globals.messages.errorFetching", "{globals.terms.lists}", e) from e
        finally:
            conn.close()

        records = [self._row_to_record(row, counts.get(row["id"], {})) for row in rows]
        return records, rows[0]["total"]

    def get_lists(self, list_type: str = "") -> List[ListRecord]:
        """Cheap listing of all lists; subscriber counts are left empty."""
        sql = "SELECT * FROM lists"
        args: List[object] = []
        if list_type:
            sql += " WHERE type = ?"
            args.append(list_type)
        sql += " ORDER BY id ASC"

        conn = get_connection(self.db_path)
        try:
            rows = conn.execute(sql, args).fetchall()
        except sqlite3.Error as e:
            raise self._fail("globals.messages.errorFetching", "{globals.terms.lists}", e) from e
        finally:
            conn.close()
        return [self._row_to_record(row) for row in rows]

    @staticmethod
    def _subscriber_counts(conn: sqlite3.Connection, ids: List[int]) -> Dict[int, Dict[str, int]]:
        placeholders = ", ".join("?" for _ in ids)
        rows = conn.execute(
            f"SELECT list_id, status, COUNT(*) AS n FROM subscriber_lists"
            f" WHERE list_id IN ({placeholders}) GROUP BY list_id, status",
            ids,
        ).fetchall()
        counts: Dict[int, Dict[str, int]] = {}
        for row in rows:
            counts.setdefault(row["list_id"], {})[row["status"]] = row["n"]
        return counts

    def _get(self, list_id: int) -> ListRecord:
        records, _ = self.query_lists(list_id=list_id)
        if not records:
            raise NotFound(self.i18n.ts("globals.messages.notFound", name="{globals.terms.list}"))
        return records[0]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def create_list(self, data: ListCreate) -> ListRecord:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                """
                INSERT INTO lists (uuid, name, type, optin, tags, description)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    str(uuid.uuid4()),
                    data.name,
                    data.type,
                    data.optin,
                    json.dumps(data.tags) if data.tags is not None else None,
                    data.description,
                ),
            )
            list_id = cursor.lastrowid
            conn.commit()
        except sqlite3.Error as e:
            raise self._fail("globals.messages.errorCreating", "{globals.terms.list}", e) from e
        finally:
            conn.close()
        logger.info("Created list %s (%s)", list_id, data.name)
        return self._get(list_id)

    def update_list(self, list_id: int, data: ListUpdate) -> ListRecord:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                """
                UPDATE lists
                SET name = ?, type = ?, optin = ?, tags = ?, description = ?, updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
                """,
                (
                    data.name,
                    data.type,
                    data.optin,
                    json.dumps(data.tags) if data.tags is not None else None,
                    data.description,
                    list_id,
                ),
            )
            affected = cursor.rowcount
            conn.commit()
        except sqlite3.Error as e:
            raise self._fail("globals.messages.errorUpdating", "{globals.terms.list}", e) from e
        finally:
            conn.close()
        if not affected:
            raise NotFound(self.i18n.ts("globals.messages.notFound", name="{globals.terms.list}"))
        logger.info("Updated list %s", list_id)
        return self._get(list_id)

    def delete_lists(self, ids: Sequence[int]) -> None:
        if not ids:
            return
        placeholders = ", ".join("?" for _ in ids)
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(f"DELETE FROM lists WHERE id IN ({placeholders})", list(ids))
            affected = cursor.rowcount
            conn.commit()
        except sqlite3.Error as e:
            raise self._fail("globals.messages.errorDeleting", "{globals.terms.lists}", e) from e
        finally:
            conn.close()
        logger.info("Deleted %s list(s): %s", affected, list(ids))

    @staticmethod
    def _row_to_record(row: sqlite3.Row, counts: Optional[Dict[str, int]] = None) -> ListRecord:
        """Convert a database row to a ``ListRecord``."""
        tags = None
        if row["tags"] is not None:
            try:
                tags = json.loads(row["tags"])
            except (TypeError, json.JSONDecodeError):
                tags = None
        return ListRecord(
            id=row["id"],
            uuid=row["uuid"],
            name=row["name"],
            type=row["type"],
            optin=row["optin"],
            tags=tags,
            description=row["description"] or "",
            subscriber_counts=dict(counts or {}),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
