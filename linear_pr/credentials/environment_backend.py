"""Environment variable backend for CI and ad-hoc overrides."""

import logging
import os

logger = logging.getLogger(__name__)


class EnvironmentBackend:
    """Read credentials from environment variables.

    Useful when the token is injected by CI or a secrets manager, e.g. a
    config file entry of ``github_token: ${GITHUB_TOKEN}``.

    Example:
        >>> import os
        >>> os.environ["LINEAR_API_KEY"] = "lin_api_123"
        >>> EnvironmentBackend().get("LINEAR_API_KEY")
        'lin_api_123'
    """

    @property
    def name(self) -> str:
        return "environment"

    @property
    def available(self) -> bool:
        """Environment backend is always available."""
        return True

    def get(self, var_name: str) -> str | None:
        """Retrieve credential from environment variable.

        Note:
            Takes a single variable name, unlike the (service, key) backends.
        """
        value = os.getenv(var_name)

        if value is not None:
            logger.debug(f"Retrieved credential from environment: {var_name}")

        return value
