"""Persisted configuration storage.

The orchestrator never reads configuration itself; the CLI loads a
``StoredConfig`` from a ``ConfigStore`` and injects what each component
needs. Two stores are provided:

    YamlConfigStore:     config.yaml in the user's application directory,
                         with secrets kept in the OS keyring when available
    InMemoryConfigStore: process-local store for tests and scripting

Example:
    >>> store = YamlConfigStore.default()
    >>> store.update(github_repo="acme/web", default_branch="main")
    >>> store.load().github_repo
    'acme/web'
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Any

import click
import structlog
import yaml
from pydantic import ValidationError

from linear_pr.config.settings import SECRET_FIELDS, StoredConfig
from linear_pr.credentials import CredentialBackend, CredentialResolver, KeyringBackend
from linear_pr.exceptions import ConfigurationError

log = structlog.get_logger(__name__)

APP_NAME = "linear-pr"
CONFIG_ENV_VAR = "LINEAR_PR_CONFIG"
CONFIG_FILE_NAME = "config.yaml"


class ConfigStore(ABC):
    """Key/value configuration access used by the CLI."""

    @abstractmethod
    def load(self) -> StoredConfig:
        """Return the current configuration with secrets resolved.

        Raises:
            ConfigurationError: If stored values are invalid
        """
        pass

    @abstractmethod
    def update(self, **values: Any) -> StoredConfig:
        """Persist the given fields and return the new configuration.

        A value of None removes the field.

        Raises:
            ConfigurationError: If the resulting configuration is invalid
        """
        pass


def _validate(values: dict[str, Any]) -> StoredConfig:
    try:
        return StoredConfig(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class InMemoryConfigStore(ConfigStore):
    """Configuration held in memory only."""

    def __init__(self, **values: Any) -> None:
        self._values: dict[str, Any] = {}
        self.update(**values)

    def load(self) -> StoredConfig:
        return _validate(self._values)

    def update(self, **values: Any) -> StoredConfig:
        merged = dict(self._values)
        for key, value in values.items():
            if value is None:
                merged.pop(key, None)
            else:
                merged[key] = _plain(value)
        config = _validate(merged)
        self._values = merged
        return config


class YamlConfigStore(ConfigStore):
    """Configuration persisted as YAML, secrets in the keyring.

    Secret fields are written to the keyring and replaced in the file by a
    ``@keyring:service/key`` reference. Without a usable keyring they are
    written to the file, which is created with owner-only permissions.
    Hand-edited ``${ENV_VAR}`` references are resolved on load.
    """

    def __init__(
        self,
        path: Path,
        secrets: CredentialBackend | None = None,
        resolver: CredentialResolver | None = None,
    ) -> None:
        self.path = Path(path)
        self.secrets = secrets if secrets is not None else KeyringBackend()
        self.resolver = resolver or CredentialResolver(keyring_backend=self.secrets)

    @classmethod
    def default(cls) -> YamlConfigStore:
        """Store at $LINEAR_PR_CONFIG, or config.yaml in the app directory."""
        override = os.getenv(CONFIG_ENV_VAR)
        if override:
            return cls(Path(override))
        return cls(Path(click.get_app_dir(APP_NAME)) / CONFIG_FILE_NAME)

    def load(self) -> StoredConfig:
        raw = self._read_raw()
        for field in SECRET_FIELDS:
            value = raw.get(field)
            if isinstance(value, str) and self.resolver.is_reference(value):
                raw[field] = self.resolver.resolve(value)
        return _validate(raw)

    def update(self, **values: Any) -> StoredConfig:
        raw = self._read_raw()

        for key, value in values.items():
            if value is None:
                raw.pop(key, None)
                continue
            value = _plain(value)
            if key in SECRET_FIELDS and not self.resolver.is_reference(value):
                value = self._store_secret(key, value)
            raw[key] = value

        _validate(raw)
        self._write_raw(raw)
        log.debug("config_updated", path=str(self.path), keys=sorted(values))
        return self.load()

    def _store_secret(self, field: str, value: str) -> str:
        service, key = SECRET_FIELDS[field]
        if not self.secrets.available:
            log.warning("keyring_unavailable_storing_in_file", field=field, path=str(self.path))
            return value
        self.secrets.set(service, key, value)
        return f"@keyring:{service}/{key}"

    def _read_raw(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}

        try:
            content = self.path.read_text()
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file: {self.path}") from e

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {self.path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration must be a YAML mapping, not a list or scalar")
        return data

    def _write_raw(self, raw: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w") as f:
                # O_CREAT mode only applies to new files; tighten an existing one before writing
                self.path.chmod(0o600)
                yaml.safe_dump(raw, f, sort_keys=True, default_flow_style=False)
        except OSError as e:
            raise ConfigurationError(f"Cannot write configuration file: {self.path}") from e
