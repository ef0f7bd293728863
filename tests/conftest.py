"""Shared fixtures: an in-memory stand-in for a MySQL server.

``server`` replaces pymysql.connect so every Connector talks to a FakeServer
that records statements, bound parameters and close calls.
"""

import json

import pymysql
import pytest


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self.description = None
        self.rowcount = -1
        self._rows = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        pass

    def execute(self, sql, args=None):
        if self.conn.closed:
            raise pymysql.err.InterfaceError(0, "")
        self.conn.server.executed.append((sql, args))
        rows, rowcount = self.conn.server.handle(self.conn, sql)
        if rows is None:
            self.description = None
            self._rows = []
        else:
            columns = list(rows[0].keys()) if rows else ["?column?"]
            self.description = tuple((c,) for c in columns)
            self._rows = rows
        self.rowcount = rowcount
        return rowcount

    def fetchall(self):
        return tuple(self._rows)


class FakeConnection:
    def __init__(self, server, kwargs):
        self.server = server
        self.kwargs = kwargs
        self.closed = False
        self.close_calls = 0

    def cursor(self):
        return FakeCursor(self)

    def ping(self, reconnect=True):
        if self.closed:
            raise pymysql.err.Error("Already closed")
        if self.server.ping_error is not None:
            raise self.server.ping_error

    def close(self):
        self.close_calls += 1
        if self.closed:
            raise pymysql.err.Error("Already closed")
        self.closed = True


class FakeServer:
    """Answers catalog statements itself, everything else from respond()."""

    def __init__(self):
        self.databases = ["information_schema", "mysql"]
        self.tables = {}
        self.executed = []
        self.connections = []
        self.responses = []
        self.connect_errors = {}
        self.create_error = None
        self.ping_error = None

    def connect(self, **kwargs):
        attempt = len(self.connections) + 1
        if attempt in self.connect_errors:
            raise self.connect_errors[attempt]
        conn = FakeConnection(self, kwargs)
        self.connections.append(conn)
        return conn

    def respond(self, prefix, result):
        """Script the answer for statements starting with prefix.

        result is a list of row dicts, an affected-row count, or an exception.
        """
        self.responses.insert(0, (prefix, result))

    def handle(self, conn, sql):
        if sql == "SHOW DATABASES":
            return [{"Database": name} for name in self.databases], 0
        if sql.startswith("CREATE DATABASE "):
            if self.create_error is not None:
                raise self.create_error
            self.databases.append(sql[len("CREATE DATABASE "):].strip("`"))
            return None, 1
        if sql == "SHOW TABLES":
            db = conn.kwargs.get("database")
            return [{f"Tables_in_{db}": t} for t in self.tables.get(db, [])], 0

        for prefix, result in self.responses:
            if sql.startswith(prefix):
                if isinstance(result, Exception):
                    raise result
                if isinstance(result, int):
                    return None, result
                return [dict(r) for r in result], len(result)

        if sql.lstrip().upper().startswith("SELECT"):
            return [], 0
        return None, 0

    def sent(self, prefix=""):
        """Statements (sql, args) other than catalog/DDL housekeeping."""
        skip = ("SHOW DATABASES", "SHOW TABLES", "CREATE DATABASE")
        return [
            (sql, args)
            for sql, args in self.executed
            if sql.startswith(prefix) and not sql.startswith(skip)
        ]

    @property
    def all_closed(self):
        return all(c.closed for c in self.connections)

    @property
    def close_count(self):
        return sum(c.close_calls for c in self.connections)


@pytest.fixture
def server(monkeypatch):
    fake = FakeServer()
    monkeypatch.setattr(pymysql, "connect", fake.connect)
    return fake


@pytest.fixture
def settings():
    return {
        "hostname": "db.local",
        "user": "root",
        "password": "secret",
        "database": "app",
        "port": 3306,
    }


@pytest.fixture
def config_path(tmp_path, settings):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(settings, indent=4))
    return path


@pytest.fixture
def users_server(server):
    """A server where database 'app' has a users table."""
    server.databases.append("app")
    server.tables["app"] = ["users"]
    return server
