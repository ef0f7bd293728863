"""DataBridger client, the public entry point.

Usage:
    db = DataBridger("config.json")
    db.configure({"hostname": "localhost", "user": "root", "password": "",
                  "database": "app", "port": 3306})
    db.insert("users", {"name": "victor", "age": 30})
    adults = db.select("users", [Condition("age", ">", 18)])
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Union

from databridger.config.schema import ConnectionConfig
from databridger.config.store import ConfigStore
from databridger.dao.conditions import ConditionLike
from databridger.dao.records import RecordDAO
from databridger.db.connector import Result, Row
from databridger.db.provider import ConnectionProvider, FreshConnectionProvider


class DataBridger:
    """Configures a MySQL connection and runs CRUD calls against it.

    Each client owns its own settings file, so several clients pointing at
    different servers can live side by side.
    """

    def __init__(
        self,
        config_path: Optional[Union[Path, str]] = None,
        *,
        provider: Optional[ConnectionProvider] = None,
    ):
        self.store = ConfigStore(config_path)
        self.provider = provider or FreshConnectionProvider(store=self.store)
        self.records = RecordDAO(self.provider)

    def configure(self, settings: Mapping[str, Any]) -> None:
        """Validate and persist connection settings.

        Args:
            settings: hostname, user, password, database and port, plus any
                optional driver settings (charset, connect_timeout, ...).
        """
        self.store.configure(settings)

    def read_config(self) -> Optional[ConnectionConfig]:
        return self.store.read()

    def insert(self, table: str, values: Mapping[str, Any]) -> int:
        return self.records.insert(table, values)

    def update(
        self,
        table: str,
        values: Mapping[str, Any],
        conditions: Optional[Sequence[ConditionLike]] = None,
    ) -> int:
        return self.records.update(table, values, conditions)

    def delete(
        self, table: str, conditions: Optional[Sequence[ConditionLike]] = None
    ) -> int:
        return self.records.delete(table, conditions)

    def select(
        self, table: str, conditions: Optional[Sequence[ConditionLike]] = None
    ) -> list[Row]:
        return self.records.select(table, conditions)

    def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> Result:
        """Run raw SQL with ``?`` placeholders."""
        return self.records.execute(sql, params)
