"""OS-level keyring backend using system credential stores.

Platform Support:
- Linux: Secret Service API (GNOME Keyring, KWallet)
- macOS: Keychain
- Windows: Windows Credential Locker
"""

import logging
from typing import cast

import keyring
from keyring.backends.fail import Keyring as FailKeyring
from keyring.errors import KeyringError

from linear_pr.exceptions import BackendNotAvailableError, CredentialError

logger = logging.getLogger(__name__)

NAMESPACE = "linear-pr"


class KeyringBackend:
    """Credential storage in the system keyring.

    Tokens are namespaced as ``linear-pr/<service>`` so they do not collide
    with other tools using the same keyring.

    Example:
        >>> backend = KeyringBackend()
        >>> backend.set("github", "token", "ghp_abc123")
        >>> token = backend.get("github", "token")
    """

    @property
    def name(self) -> str:
        return "keyring"

    @property
    def available(self) -> bool:
        """Check if a functional keyring is configured.

        Returns False on headless systems where keyring falls back to its
        "fail" backend, or when the backend cannot be initialized.
        """
        try:
            return not isinstance(keyring.get_keyring(), FailKeyring)
        except Exception as e:
            logger.debug(f"Keyring not available: {e}")
            return False

    def get(self, service: str, key: str) -> str | None:
        """Retrieve credential from OS keyring.

        Raises:
            BackendNotAvailableError: If keyring is not available
            CredentialError: If keyring operation fails
        """
        self._require_available()

        try:
            credential = cast(str | None, keyring.get_password(f"{NAMESPACE}/{service}", key))

            if credential is not None:
                logger.debug(f"Retrieved credential from keyring: {service}/{key}")

            return credential

        except KeyringError as e:
            raise CredentialError(
                f"Keyring operation failed: {e}", reference=f"@keyring:{service}/{key}"
            ) from e

    def set(self, service: str, key: str, value: str) -> None:
        """Store credential in OS keyring.

        Raises:
            BackendNotAvailableError: If keyring is not available
            CredentialError: If keyring operation fails
            ValueError: If value is empty
        """
        self._require_available()

        if not value:
            raise ValueError("Credential value cannot be empty")

        try:
            keyring.set_password(f"{NAMESPACE}/{service}", key, value)
            logger.info(f"Stored credential in keyring: {service}/{key}")

        except KeyringError as e:
            raise CredentialError(
                f"Failed to store credential: {e}", reference=f"@keyring:{service}/{key}"
            ) from e

    def _require_available(self) -> None:
        if not self.available:
            raise BackendNotAvailableError(
                "Keyring backend is not available",
                suggestion="Configure a system keyring, or reference an environment variable: ${VAR_NAME}",
            )
