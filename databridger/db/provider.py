"""Connection providers.

The DAO layer never constructs connections itself; it asks a provider. The
default provider opens a fresh connection per call, a pooled provider can be
dropped in without touching the DAO.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from databridger.config.schema import ConnectionConfig
from databridger.config.store import ConfigStore
from databridger.db.connector import Connector


class ConnectionProvider(ABC):
    """Base class for anything that can hand out a ready connection."""

    @abstractmethod
    def acquire(self) -> Connector:
        """Return a connected Connector.

        The caller owns it and must release it, usually with ``with``.
        """
        ...


class FreshConnectionProvider(ConnectionProvider):
    """Opens a brand new connection on every acquire().

    With a store, the settings file is re-read on each call. With a fixed
    config, the file is never touched.
    """

    def __init__(
        self,
        store: Optional[ConfigStore] = None,
        config: Optional[ConnectionConfig] = None,
    ):
        if store is None and config is None:
            store = ConfigStore()
        self.store = store
        self.config = config

    def acquire(self) -> Connector:
        if self.config is not None:
            return Connector(self.config)
        return Connector.from_store(self.store)
