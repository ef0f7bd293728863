"""
Database access module.

Connection handling, parameter binding and connection providers.
"""

from databridger.db.binding import BindType, infer_bind_type
from databridger.db.connector import Connector
from databridger.db.provider import ConnectionProvider, FreshConnectionProvider

__all__ = [
    "BindType",
    "Connector",
    "ConnectionProvider",
    "FreshConnectionProvider",
    "infer_bind_type",
]
