"""Pydantic model for the DataBridger connection settings.

The five connection keys are required. Driver tuning options have defaults,
and unknown keys are kept so a merge never loses anything.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

# Order matters: configure() reports the first missing key in this order.
REQUIRED_KEYS = ("hostname", "user", "password", "database", "port")

SECRET_KEYS = ("password",)


# =============================================================================
# CONNECTION CONFIG
# =============================================================================


class ConnectionConfig(BaseModel):
    """Settings for a single MySQL server and target database."""

    hostname: str = Field(min_length=1)
    user: str
    password: str
    database: str = Field(min_length=1)
    port: int = Field(ge=1, le=65535)

    charset: str = "utf8mb4"
    connect_timeout: int = Field(
        default=10,
        ge=1,
        le=31536000,
        description="Seconds to wait for the TCP connect and handshake",
    )
    read_timeout: Optional[int] = Field(default=None, ge=1)
    write_timeout: Optional[int] = Field(default=None, ge=1)

    model_config = {"extra": "allow"}

    @field_validator("database")
    @classmethod
    def validate_database_name(cls, v: str) -> str:
        """Database names are used as identifiers, reject control characters."""
        if any(ord(ch) < 32 for ch in v):
            raise ValueError(f"Invalid database name: {v!r}")
        return v

    def driver_kwargs(self, with_database: bool = True) -> dict:
        """Keyword arguments for pymysql.connect()."""
        kwargs = {
            "host": self.hostname,
            "user": self.user,
            "password": self.password,
            "port": self.port,
            "charset": self.charset,
            "connect_timeout": self.connect_timeout,
            "read_timeout": self.read_timeout,
            "write_timeout": self.write_timeout,
        }
        if with_database:
            kwargs["database"] = self.database
        return kwargs

    def redacted(self) -> dict:
        """Dump all settings with secrets masked."""
        data = self.model_dump()
        for key in SECRET_KEYS:
            if data.get(key):
                data[key] = "********"
        return data
