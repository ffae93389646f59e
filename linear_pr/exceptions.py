"""Exception hierarchy for linear-pr.

Every error raised by the tool derives from ``LinearPrError`` so the CLI can
report failures through a single channel. Subclasses only exist where a
caller needs to branch on the failure (credential backends, git commands,
remote services); orchestrator stages wrap them with context instead of
introducing new kinds.

Exception Hierarchy:
    LinearPrError (base)
    ├── ConfigurationError
    ├── CredentialError
    │   ├── CredentialNotFoundError
    │   └── BackendNotAvailableError
    ├── AuthenticationError
    ├── GitOperationError
    └── ExternalServiceError

Example Usage:
    >>> from linear_pr.exceptions import ConfigurationError
    >>> try:
    ...     store.load()
    ... except yaml.YAMLError as e:
    ...     raise ConfigurationError(f"Invalid config file: {e}") from e
"""


class LinearPrError(Exception):
    """Base exception for all linear-pr errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(LinearPrError):
    """Stored configuration is missing, unreadable or invalid.

    Examples:
        - GitHub token not set up
        - Repository path not in owner/repo form
        - Corrupt YAML in the config file
    """

    pass


class CredentialError(LinearPrError):
    """Credential-related errors.

    Attributes:
        message: Human-readable error description
        reference: The credential reference that failed (e.g., "@keyring:github/token")
        suggestion: Optional suggestion for resolution
    """

    def __init__(
        self,
        message: str,
        reference: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        self.reference = reference
        self.suggestion = suggestion

        full_message = message
        if reference:
            full_message = f"{message} (reference: {reference})"
        if suggestion:
            full_message = f"{full_message}\nSuggestion: {suggestion}"

        super().__init__(full_message)
        # super() stored the decorated text; keep the plain message for display
        self.message = message


class CredentialNotFoundError(CredentialError):
    """Credential reference points at a value that does not exist."""

    pass


class BackendNotAvailableError(CredentialError):
    """Requested credential backend is not available on this system."""

    pass


class AuthenticationError(LinearPrError):
    """Authentication with Linear or GitHub failed.

    Examples:
        - OAuth state mismatch or provider-side denial
        - Token exchange rejected
        - Loopback flow timed out
    """

    pass


class GitOperationError(LinearPrError):
    """A local git command failed.

    Attributes:
        command: The git arguments that failed, if known
    """

    def __init__(self, message: str, command: str | None = None) -> None:
        super().__init__(message)
        self.command = command


class ExternalServiceError(LinearPrError):
    """A remote API call (Linear GraphQL, GitHub REST) failed.

    Attributes:
        service: Which service failed ("linear", "github")
        status_code: HTTP status code when the service answered
        details: Structured error payload returned by the service, if any
    """

    def __init__(
        self,
        message: str,
        service: str | None = None,
        status_code: int | None = None,
        details: object | None = None,
    ) -> None:
        super().__init__(message)
        self.service = service
        self.status_code = status_code
        self.details = details
