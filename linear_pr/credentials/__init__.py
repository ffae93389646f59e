"""Secret storage for linear-pr.

This package provides:
- An OS keyring backend for tokens stored by ``linear-pr setup``
- An environment variable backend for CI and ad-hoc overrides
- A resolver that turns credential references into values

Example usage:

    from linear_pr.credentials import CredentialResolver, KeyringBackend

    # Store a credential
    backend = KeyringBackend()
    backend.set("github", "token", "ghp_abc123")

    # Resolve a credential reference
    resolver = CredentialResolver()
    token = resolver.resolve("@keyring:github/token")
"""

from linear_pr.exceptions import (
    BackendNotAvailableError,
    CredentialError,
    CredentialNotFoundError,
)

from .backend import CredentialBackend
from .environment_backend import EnvironmentBackend
from .keyring_backend import KeyringBackend
from .resolver import CredentialResolver

__all__ = [
    # Backends
    "CredentialBackend",
    "KeyringBackend",
    "EnvironmentBackend",
    # Resolver
    "CredentialResolver",
    # Exceptions
    "CredentialError",
    "CredentialNotFoundError",
    "BackendNotAvailableError",
]
