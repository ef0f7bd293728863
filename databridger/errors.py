"""Error taxonomy for DataBridger.

Every failure raised by the library is a DataBridgerError subclass carrying
an ErrorKind, the stage that failed, and the driver message when there is one.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Every way a DataBridger call can fail."""

    CONFIGURATION_MISSING = "configuration_missing"
    CONFIG_DECODE = "config_decode"
    MISSING_FIELD = "missing_field"
    INVALID_CONFIG = "invalid_config"
    CONNECTION = "connection"
    DATABASE_CREATION = "database_creation"
    TABLE_NOT_FOUND = "table_not_found"
    EMPTY_INPUT = "empty_input"
    INVALID_CONDITION = "invalid_condition"
    QUERY_PREPARE = "query_prepare"
    QUERY_EXECUTION = "query_execution"

    @property
    def stage(self) -> str:
        return _STAGES[self]


_STAGES = {
    ErrorKind.CONFIGURATION_MISSING: "config",
    ErrorKind.CONFIG_DECODE: "config",
    ErrorKind.MISSING_FIELD: "config",
    ErrorKind.INVALID_CONFIG: "config",
    ErrorKind.CONNECTION: "connect",
    ErrorKind.DATABASE_CREATION: "ensure-database",
    ErrorKind.TABLE_NOT_FOUND: "validate",
    ErrorKind.EMPTY_INPUT: "validate",
    ErrorKind.INVALID_CONDITION: "validate",
    ErrorKind.QUERY_PREPARE: "prepare",
    ErrorKind.QUERY_EXECUTION: "execute",
}


class DataBridgerError(Exception):
    """Base class for all library errors."""

    kind: ErrorKind

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail or ""

    @property
    def stage(self) -> str:
        return self.kind.stage

    def __str__(self) -> str:
        if self.detail and self.detail not in self.message:
            return f"{self.message}: {self.detail}"
        return self.message


# =============================================================================
# CONFIG
# =============================================================================


class ConfigurationMissing(DataBridgerError):
    kind = ErrorKind.CONFIGURATION_MISSING


class ConfigDecodeError(DataBridgerError):
    kind = ErrorKind.CONFIG_DECODE


class MissingField(DataBridgerError):
    """A required configuration key was not supplied."""

    kind = ErrorKind.MISSING_FIELD

    def __init__(self, field: str):
        super().__init__(f"The key '{field}' is required.")
        self.field = field


class InvalidConfig(DataBridgerError):
    kind = ErrorKind.INVALID_CONFIG


# =============================================================================
# CONNECTION
# =============================================================================


class DatabaseConnectionError(DataBridgerError):
    """The server was unreachable or rejected the credentials."""

    kind = ErrorKind.CONNECTION


class DatabaseCreationError(DataBridgerError):
    kind = ErrorKind.DATABASE_CREATION


# =============================================================================
# INPUT VALIDATION
# =============================================================================


class TableNotFound(DataBridgerError):
    kind = ErrorKind.TABLE_NOT_FOUND

    def __init__(self, table: str):
        super().__init__(f"The table '{table}' does not exist.")
        self.table = table


class EmptyInput(DataBridgerError):
    kind = ErrorKind.EMPTY_INPUT


class InvalidCondition(DataBridgerError):
    kind = ErrorKind.INVALID_CONDITION


# =============================================================================
# QUERY
# =============================================================================


class QueryPrepareError(DataBridgerError):
    """The statement could not be prepared (malformed SQL, bad parameters)."""

    kind = ErrorKind.QUERY_PREPARE


class QueryExecutionError(DataBridgerError):
    """The server rejected the statement while executing it."""

    kind = ErrorKind.QUERY_EXECUTION
