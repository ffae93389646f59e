"""Protocol for keyed secret storage backends."""

from typing import Protocol


class CredentialBackend(Protocol):
    """Interface the resolver and config store expect from a backend."""

    @property
    def name(self) -> str:
        """Backend identifier (e.g., 'keyring')."""
        ...

    @property
    def available(self) -> bool:
        """Check if this backend is usable on the current system."""
        ...

    def get(self, service: str, key: str) -> str | None:
        """Retrieve a credential.

        Args:
            service: Service identifier (e.g., 'github', 'linear')
            key: Key within the service (e.g., 'token')

        Returns:
            Credential value or None if not found
        """
        ...

    def set(self, service: str, key: str, value: str) -> None:
        """Store a credential."""
        ...
