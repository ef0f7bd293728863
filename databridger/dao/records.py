"""Generic record operations over a connection provider.

Every call acquires its own connection, checks the table exists, builds the
statement and runs it. The connection is closed on the way out, whether the
call succeeded or raised.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from databridger.dao.builder import (
    Statement,
    build_delete,
    build_insert,
    build_select,
    build_update,
)
from databridger.dao.conditions import ConditionLike
from databridger.db.connector import Connector, Result, Row
from databridger.db.provider import ConnectionProvider, FreshConnectionProvider
from databridger.errors import TableNotFound

log = logging.getLogger("databridger.dao")


class RecordDAO:
    """Insert, select, update and delete records by table name."""

    def __init__(self, provider: Optional[ConnectionProvider] = None):
        self.provider = provider or FreshConnectionProvider()

    def _require_table(self, db: Connector, table: str) -> None:
        if not db.table_exists(table):
            raise TableNotFound(table)

    def _run(self, db: Connector, statement: Statement) -> Result:
        log.debug(f"{statement.sql} ({len(statement.params)} params)")
        return db.execute(statement.sql, statement.params)

    # =========================================================================
    # CRUD
    # =========================================================================

    def insert(self, table: str, values: Mapping[str, Any]) -> int:
        """Insert one record. Returns the affected-row count."""
        with self.provider.acquire() as db:
            self._require_table(db, table)
            return self._run(db, build_insert(table, values))

    def select(
        self, table: str, conditions: Optional[Sequence[ConditionLike]] = None
    ) -> list[Row]:
        """Select every column of the records matching all conditions."""
        with self.provider.acquire() as db:
            self._require_table(db, table)
            return self._run(db, build_select(table, conditions))

    def update(
        self,
        table: str,
        values: Mapping[str, Any],
        conditions: Optional[Sequence[ConditionLike]] = None,
    ) -> int:
        """Set columns on the records matching all conditions."""
        with self.provider.acquire() as db:
            self._require_table(db, table)
            return self._run(db, build_update(table, values, conditions))

    def delete(
        self, table: str, conditions: Optional[Sequence[ConditionLike]] = None
    ) -> int:
        """Delete the records matching all conditions.

        With no conditions this deletes every row in the table.
        """
        with self.provider.acquire() as db:
            self._require_table(db, table)
            return self._run(db, build_delete(table, conditions))

    def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> Result:
        """Run arbitrary SQL without a table check."""
        with self.provider.acquire() as db:
            return db.execute(sql, params)
