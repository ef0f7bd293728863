"""DataBridger: configure one MySQL connection and run CRUD calls without SQL boilerplate."""

from databridger.client import DataBridger
from databridger.config import ConfigStore, ConnectionConfig
from databridger.dao import Condition, RawCondition, RecordDAO, raw
from databridger.db import ConnectionProvider, Connector, FreshConnectionProvider
from databridger.errors import (
    ConfigDecodeError,
    ConfigurationMissing,
    DatabaseConnectionError,
    DatabaseCreationError,
    DataBridgerError,
    EmptyInput,
    ErrorKind,
    InvalidCondition,
    InvalidConfig,
    MissingField,
    QueryExecutionError,
    QueryPrepareError,
    TableNotFound,
)

__version__ = "1.0.0"

__all__ = [
    "Condition",
    "ConfigDecodeError",
    "ConfigStore",
    "ConfigurationMissing",
    "ConnectionConfig",
    "ConnectionProvider",
    "Connector",
    "DataBridger",
    "DataBridgerError",
    "DatabaseConnectionError",
    "DatabaseCreationError",
    "EmptyInput",
    "ErrorKind",
    "FreshConnectionProvider",
    "InvalidCondition",
    "InvalidConfig",
    "MissingField",
    "QueryExecutionError",
    "QueryPrepareError",
    "RawCondition",
    "RecordDAO",
    "TableNotFound",
    "raw",
]
