"""Credential reference resolution."""

import logging
import re

from linear_pr.exceptions import (
    BackendNotAvailableError,
    CredentialError,
    CredentialNotFoundError,
)

from .backend import CredentialBackend
from .environment_backend import EnvironmentBackend
from .keyring_backend import KeyringBackend

logger = logging.getLogger(__name__)


class CredentialResolver:
    """Resolve credential references to actual values.

    Supports three value formats:
    1. @keyring:service/key - OS keyring
    2. ${VAR_NAME} - Environment variable
    3. Direct value - Returned as-is

    Example:
        >>> resolver = CredentialResolver()
        >>> token = resolver.resolve("@keyring:github/token")
        >>> api_key = resolver.resolve("${LINEAR_API_KEY}")
        >>> direct = resolver.resolve("literal-value")
    """

    KEYRING_PATTERN = re.compile(r"^@keyring:([^/]+)/(.+)$")
    ENV_PATTERN = re.compile(r"^\$\{([A-Z_][A-Z0-9_]*)\}$")

    def __init__(
        self,
        keyring_backend: CredentialBackend | None = None,
        environment_backend: EnvironmentBackend | None = None,
    ) -> None:
        self.keyring_backend = keyring_backend or KeyringBackend()
        self.environment_backend = environment_backend or EnvironmentBackend()

    @classmethod
    def is_reference(cls, value: str) -> bool:
        """Return True if ``value`` is a reference rather than a literal."""
        return bool(cls.KEYRING_PATTERN.match(value) or cls.ENV_PATTERN.match(value))

    def resolve(self, value: str) -> str:
        """Resolve credential reference to actual value.

        Raises:
            CredentialNotFoundError: If the referenced credential doesn't exist
            BackendNotAvailableError: If the keyring is unavailable
            CredentialError: If the backend fails
        """
        keyring_match = self.KEYRING_PATTERN.match(value)
        if keyring_match:
            return self._resolve_keyring(keyring_match.group(1), keyring_match.group(2), value)

        env_match = self.ENV_PATTERN.match(value)
        if env_match:
            return self._resolve_environment(env_match.group(1), value)

        return value

    def _resolve_keyring(self, service: str, key: str, reference: str) -> str:
        if not self.keyring_backend.available:
            raise BackendNotAvailableError(
                "Keyring backend is not available on this system",
                reference=reference,
                suggestion="Run `linear-pr setup` again or use an environment variable: ${VAR_NAME}",
            )

        try:
            credential = self.keyring_backend.get(service, key)
        except CredentialError:
            raise
        except Exception as e:
            raise CredentialError(
                f"Failed to resolve keyring credential: {e}",
                reference=reference,
            ) from e

        if credential is None:
            raise CredentialNotFoundError(
                f"Credential not found in keyring: {service}/{key}",
                reference=reference,
                suggestion="Run `linear-pr setup` to store it again",
            )

        logger.debug(f"Resolved keyring credential: {service}/{key}")
        return credential

    def _resolve_environment(self, var_name: str, reference: str) -> str:
        credential = self.environment_backend.get(var_name)

        if credential is None:
            raise CredentialNotFoundError(
                f"Environment variable not set: {var_name}",
                reference=reference,
                suggestion=f"Set the environment variable:\n  export {var_name}='your-credential-here'",
            )

        logger.debug(f"Resolved environment credential: {var_name}")
        return credential
