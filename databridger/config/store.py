"""JSON-backed store for the DataBridger connection settings.

Handles validating, merging and persisting the settings file. The file is
read again on every connection attempt; nothing is cached in memory.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from databridger.config.schema import REQUIRED_KEYS, ConnectionConfig
from databridger.errors import (
    ConfigDecodeError,
    ConfigurationMissing,
    InvalidConfig,
    MissingField,
)

log = logging.getLogger("databridger.config")

CONFIG_ENV_VAR = "DATABRIDGER_CONFIG"

# Library root: the directory holding the databridger package
LIBRARY_ROOT = Path(__file__).resolve().parents[2]
CONFIG_FILE = LIBRARY_ROOT / "config.json"


def get_config_path() -> Path:
    """Return the settings file path, honouring DATABRIDGER_CONFIG."""
    override = os.getenv(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return CONFIG_FILE


def _merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Shallow merge, with override taking precedence."""
    result = base.copy()
    result.update(override)
    return result


def _validation_summary(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


class ConfigStore:
    """Reads and writes connection settings in a pretty-printed JSON file."""

    def __init__(self, path: Optional[Path | str] = None):
        self._path = Path(path) if path is not None else get_config_path()

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    # =========================================================================
    # WRITE
    # =========================================================================

    def configure(self, settings: Mapping[str, Any]) -> ConnectionConfig:
        """Validate settings, merge them over the persisted ones and save.

        Args:
            settings: Mapping with at least hostname, user, password,
                database and port.

        Returns:
            The merged, validated configuration that was written.

        Raises:
            MissingField: A required key is absent from ``settings``.
            InvalidConfig: The merged settings fail validation.
            ConfigDecodeError: The existing file is not valid JSON.
        """
        for key in REQUIRED_KEYS:
            if key not in settings:
                raise MissingField(key)

        merged = _merge(self._load_raw() or {}, settings)
        try:
            config = ConnectionConfig.model_validate(merged)
        except ValidationError as e:
            raise InvalidConfig(
                "Invalid connection settings", _validation_summary(e)
            ) from e

        self._path.parent.mkdir(parents=True, exist_ok=True)
        # Write the coerced values, without adding defaults the caller never set
        data = config.model_dump(include=set(merged))
        self._path.write_text(json.dumps(data, indent=4), encoding="utf-8")
        log.info(f"Saved connection settings to {self._path}")
        return config

    # =========================================================================
    # READ
    # =========================================================================

    def read(self) -> Optional[ConnectionConfig]:
        """Return the persisted settings, or None if nothing is configured."""
        raw = self._load_raw()
        if raw is None:
            return None
        try:
            return ConnectionConfig.model_validate(raw)
        except ValidationError as e:
            raise ConfigDecodeError(
                f"Error decoding config file {self._path}", _validation_summary(e)
            ) from e

    def require(self) -> ConnectionConfig:
        """Like read(), but a missing file is an error."""
        config = self.read()
        if config is None:
            raise ConfigurationMissing(
                "No connection settings found. "
                "Use DataBridger.configure() to configure the MySQL connection."
            )
        return config

    def _load_raw(self) -> Optional[dict[str, Any]]:
        if not self._path.exists():
            return None
        content = self._path.read_text(encoding="utf-8")
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigDecodeError(
                f"Error decoding config file {self._path}", str(e)
            ) from e
        if not isinstance(data, dict):
            raise ConfigDecodeError(
                f"Error decoding config file {self._path}",
                "top level must be a JSON object",
            )
        log.debug(f"Loaded connection settings from {self._path}")
        return data
