"""
Abstract base classes for the remote gateways.

The orchestrator talks to the issue tracker (Linear) and the source host
(GitHub) only through these interfaces. Implementations convert vendor
responses into the domain models of ``linear_pr.models.domain`` and report
failures as ``ExternalServiceError``.

All methods are async; HTTP clients are awaited directly and blocking SDK
calls are pushed to a worker thread.
"""

from abc import ABC, abstractmethod

from linear_pr.models.domain import Issue, PullRequest, RepositoryDetails, Viewer


class IssueTracker(ABC):
    """Read issues and write comments in the issue tracker."""

    @abstractmethod
    async def get_issue(self, task_id: str) -> Issue | None:
        """Fetch an issue by its canonical identifier.

        Args:
            task_id: Identifier such as ``ENG-123``

        Returns:
            The issue, or None when no issue has that identifier

        Raises:
            ExternalServiceError: If the request fails
        """
        pass

    @abstractmethod
    async def get_assigned_issues(self) -> list[Issue]:
        """Fetch the open issues assigned to the authenticated user.

        Raises:
            ExternalServiceError: If the request fails
        """
        pass

    @abstractmethod
    async def get_viewer(self) -> Viewer:
        """Return the principal the token belongs to.

        Also used to verify a token before it is stored.

        Raises:
            ExternalServiceError: If the token is rejected or the request fails
        """
        pass

    @abstractmethod
    async def add_comment(self, issue: Issue, body: str) -> None:
        """Post a markdown comment on an issue.

        Raises:
            ExternalServiceError: If the mutation fails
        """
        pass


class SourceHost(ABC):
    """Repository metadata and pull requests on the source host."""

    async def close(self) -> None:
        """Release the underlying client. Hosts without one need not override."""
        pass

    @abstractmethod
    async def get_authenticated_user(self) -> str:
        """Return the login of the token owner.

        Raises:
            ExternalServiceError: If the token is rejected
        """
        pass

    @abstractmethod
    async def get_repository(self) -> RepositoryDetails:
        """Return details of the configured repository, including fork status.

        Raises:
            ExternalServiceError: If the repository cannot be read
        """
        pass

    @abstractmethod
    async def create_pull_request(
        self,
        title: str,
        body: str,
        head: str,
        base: str,
        draft: bool = True,
    ) -> PullRequest:
        """Open a pull request.

        Args:
            title: Pull request title, used verbatim
            body: Markdown description
            head: Head reference, bare (``branch``) or qualified (``owner:branch``)
            base: Branch to merge into
            draft: Whether to open as a draft

        Returns:
            The created pull request

        Raises:
            ExternalServiceError: If the host rejects the request
        """
        pass
