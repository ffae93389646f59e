"""Git discovery exceptions.

All exceptions inherit from GitDiscoveryError and carry a hint for
resolution that the CLI prints below the message.

Example:
    >>> from linear_pr.git.exceptions import NotGitRepositoryError
    >>> raise NotGitRepositoryError("/tmp/not-a-repo")
    Traceback (most recent call last):
        ...
    NotGitRepositoryError: Not a Git repository: /tmp/not-a-repo

    Hint: Run 'git init' or navigate to a Git repository directory.
"""

from linear_pr.exceptions import GitOperationError


class GitDiscoveryError(GitOperationError):
    """Base exception for Git discovery errors.

    Attributes:
        message: Error message
        hint: Optional hint for resolution
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message}\n\nHint: {self.hint}"
        return self.message


class NotGitRepositoryError(GitDiscoveryError):
    """Raised when directory is not a Git repository."""

    def __init__(self, path: str) -> None:
        super().__init__(
            message=f"Not a Git repository: {path}",
            hint="Run 'git init' or navigate to a Git repository directory.",
        )
        self.path = path


class NoRemotesError(GitDiscoveryError):
    """Raised when repository has no remotes configured."""

    def __init__(self) -> None:
        super().__init__(
            message="No Git remotes configured in this repository",
            hint="Add a remote with: git remote add origin <url>",
        )


class InvalidGitUrlError(GitDiscoveryError):
    """Raised when a remote URL cannot be parsed."""

    def __init__(self, url: str, reason: str | None = None) -> None:
        message = f"Invalid Git URL '{url}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message=message,
            hint="Expected git@host:owner/repo.git or https://host/owner/repo.git",
        )
        self.url = url
        self.reason = reason
