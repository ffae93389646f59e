"""Configuration model and persistence for linear-pr."""

from linear_pr.config.settings import DEFAULT_BASE_BRANCH, StoredConfig
from linear_pr.config.store import ConfigStore, InMemoryConfigStore, YamlConfigStore

__all__ = [
    "DEFAULT_BASE_BRANCH",
    "ConfigStore",
    "InMemoryConfigStore",
    "StoredConfig",
    "YamlConfigStore",
]
