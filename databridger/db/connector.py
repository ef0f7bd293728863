"""MySQL connection wrapper.

Usage:
    with Connector.from_store(ConfigStore()) as db:
        if db.table_exists("users"):
            rows = db.execute("SELECT * FROM users WHERE age > ?", [18])
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence, Union

import pymysql
from pymysql.cursors import DictCursor

from databridger.config.schema import ConnectionConfig
from databridger.config.store import ConfigStore
from databridger.db.binding import bind_all, count_placeholders, to_driver_sql
from databridger.errors import (
    DatabaseConnectionError,
    DatabaseCreationError,
    QueryExecutionError,
    QueryPrepareError,
)

log = logging.getLogger("databridger.connector")

Row = dict[str, Any]
Result = Union[list[Row], int]


def quote_identifier(name: str) -> str:
    """Backtick-quote a MySQL identifier."""
    return "`" + name.replace("`", "``") + "`"


def _driver_message(exc: Exception) -> str:
    """PyMySQL errors carry (code, message) in args."""
    if len(exc.args) >= 2:
        return str(exc.args[1])
    return str(exc)


# Server errors raised while parsing or resolving a statement, before any row
# is touched: syntax, unknown column, column count mismatch, unknown table.
PREPARE_ERRNOS = frozenset({1054, 1064, 1136, 1146})


def _is_prepare_error(exc: Exception) -> bool:
    if isinstance(exc, pymysql.err.ProgrammingError):
        return True
    return bool(exc.args) and exc.args[0] in PREPARE_ERRNOS


class Connector:
    """One live MySQL connection with the configured database selected.

    Construction connects without a database, makes sure the configured
    database exists, then reconnects with it selected. The connection is
    released by close() or by leaving a ``with`` block.
    """

    def __init__(self, config: ConnectionConfig):
        self.config = config
        self.database = config.database
        self._last_error = ""
        self._closed = False

        self._conn = self._connect(with_database=False)
        try:
            self.ensure_database(self.database)
        finally:
            self._conn.close()

        # Now, reconnect with the database selected
        self._conn = self._connect(with_database=True)

    @classmethod
    def from_store(cls, store: ConfigStore) -> "Connector":
        """Read the settings file and connect with it."""
        return cls(store.require())

    def __enter__(self) -> "Connector":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return (
            f"<Connector {self.config.user}@{self.config.hostname}:"
            f"{self.config.port}/{self.database} {state}>"
        )

    # =========================================================================
    # CONNECTION LIFECYCLE
    # =========================================================================

    def _connect(self, with_database: bool) -> pymysql.connections.Connection:
        target = f"{self.config.hostname}:{self.config.port}"
        if with_database:
            target += f"/{self.database}"
        try:
            conn = pymysql.connect(
                **self.config.driver_kwargs(with_database=with_database),
                cursorclass=DictCursor,
                autocommit=True,
            )
        except pymysql.MySQLError as e:
            self._last_error = _driver_message(e)
            raise DatabaseConnectionError(
                f"MySQL connection error ({target})", self._last_error
            ) from e
        log.debug(f"Connected to {target}")
        return conn

    @property
    def closed(self) -> bool:
        return self._closed

    def ping(self) -> bool:
        """Check whether the connection is still alive."""
        if self._closed:
            return False
        try:
            self._conn.ping(reconnect=False)
        except pymysql.MySQLError as e:
            self._last_error = _driver_message(e)
            log.warning(f"Ping failed: {self._last_error}")
            return False
        return True

    def close(self) -> bool:
        """Release the connection. Returns False if it was already closed."""
        if self._closed:
            log.warning(f"Connection to {self.database} is already closed")
            return False
        self._closed = True
        try:
            self._conn.close()
        except pymysql.MySQLError as e:
            self._last_error = _driver_message(e)
            log.warning(f"Error closing connection: {self._last_error}")
            return False
        log.debug(f"Closed connection to {self.database}")
        return True

    def last_error(self) -> str:
        """Message of the most recent failed operation, or an empty string."""
        return self._last_error

    # =========================================================================
    # CATALOG
    # =========================================================================

    def _catalog(self, sql: str) -> list[str]:
        with self._conn.cursor() as cur:
            cur.execute(sql)
            return [next(iter(row.values())) for row in cur.fetchall()]

    def ensure_database(self, name: str) -> bool:
        """Create the database unless one with exactly this name exists."""
        try:
            existing = self._catalog("SHOW DATABASES")
        except pymysql.MySQLError as e:
            self._last_error = _driver_message(e)
            raise DatabaseCreationError(
                "Error listing databases", self._last_error
            ) from e

        if name in existing:
            return True

        log.info(f"Database '{name}' not found, creating it")
        try:
            with self._conn.cursor() as cur:
                cur.execute(f"CREATE DATABASE {quote_identifier(name)}")
        except pymysql.MySQLError as e:
            self._last_error = _driver_message(e)
            raise DatabaseCreationError(
                f"Error creating database '{name}'", self._last_error
            ) from e
        return True

    def table_exists(self, name: str) -> bool:
        """Whether a table with exactly this name exists in the selected database."""
        try:
            return name in self._catalog("SHOW TABLES")
        except pymysql.MySQLError as e:
            self._last_error = _driver_message(e)
            raise QueryExecutionError("Error listing tables", self._last_error) from e

    # =========================================================================
    # QUERIES
    # =========================================================================

    def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> Result:
        """Run a statement with ``?`` placeholders bound positionally.

        Args:
            sql: Statement text.
            params: One value per placeholder, in order.

        Returns:
            A list of row dicts for statements that produce a result set,
            otherwise the affected-row count.
        """
        params = list(params) if params is not None else []
        expected = count_placeholders(sql)
        if expected != len(params):
            self._last_error = (
                f"statement has {expected} placeholder(s) "
                f"but {len(params)} parameter(s) were given"
            )
            raise QueryPrepareError("Error preparing MySQL query", self._last_error)

        bound = bind_all(params)
        types = "".join(p.type.value for p in bound)
        log.debug(f"Executing: {sql}" + (f" [{types}]" if types else ""))

        with self._conn.cursor() as cur:
            try:
                if bound:
                    cur.execute(to_driver_sql(sql), tuple(p.value for p in bound))
                else:
                    cur.execute(sql)
            except pymysql.MySQLError as e:
                self._last_error = _driver_message(e)
                if _is_prepare_error(e):
                    raise QueryPrepareError(
                        "Error preparing MySQL query", self._last_error
                    ) from e
                raise QueryExecutionError(
                    "Error executing the query", self._last_error
                ) from e

            if cur.description:
                return list(cur.fetchall())
            return cur.rowcount
