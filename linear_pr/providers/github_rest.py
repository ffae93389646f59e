"""GitHub source host implementation using PyGithub."""

import asyncio
from collections.abc import Callable
from typing import TypeVar

import structlog
from github import Auth, Github, GithubException  # type: ignore[import-not-found]
from github.PullRequest import PullRequest as GHPullRequest  # type: ignore[import-not-found]
from github.Repository import Repository as GHRepository  # type: ignore[import-not-found]

from linear_pr.exceptions import ConfigurationError, ExternalServiceError
from linear_pr.models.domain import PullRequest, RepositoryDetails
from linear_pr.providers.base import SourceHost

log = structlog.get_logger(__name__)

T = TypeVar("T")

GITHUB_API_URL = "https://api.github.com"


async def _run_sync(func: Callable[[], T]) -> T:
    """Run a synchronous function in a thread pool.

    This prevents blocking the event loop when calling synchronous
    PyGithub methods.
    """
    return await asyncio.to_thread(func)


def _service_error(action: str, e: GithubException) -> ExternalServiceError:
    """Convert a PyGithub exception, keeping GitHub's own message when present."""
    data = e.data if isinstance(e.data, dict) else {}
    message = data.get("message") or str(e)
    errors = data.get("errors")
    if errors:
        details = "; ".join(err.get("message", str(err)) if isinstance(err, dict) else str(err) for err in errors)
        message = f"{message} ({details})"
    return ExternalServiceError(
        f"GitHub {action} failed: {message}",
        service="github",
        status_code=e.status,
        details=e.data,
    )


class GitHubRestProvider(SourceHost):
    """GitHub implementation using PyGithub library."""

    def __init__(
        self,
        token: str,
        owner: str | None = None,
        repo: str | None = None,
        base_url: str = GITHUB_API_URL,
    ):
        """Initialize GitHub provider.

        Args:
            token: GitHub personal access token
            owner: Repository owner (user or organization); only needed for
                repository and pull request calls
            repo: Repository name
            base_url: GitHub API base URL (for GitHub Enterprise)
        """
        self.token = token.strip() if token else token
        self.owner = owner
        self.repo = repo
        self.base_url = base_url.rstrip("/")
        self._client: Github | None = None
        self._repo: GHRepository | None = None

    def _get_client(self) -> Github:
        if self._client is None:
            self._client = Github(auth=Auth.Token(self.token), base_url=self.base_url)
        return self._client

    def _get_repo(self) -> GHRepository:
        if self._repo is None:
            if not self.owner or not self.repo:
                raise ConfigurationError("GitHub repository not configured. Run `linear-pr setup` first.")
            self._repo = self._get_client().get_repo(f"{self.owner}/{self.repo}")
        return self._repo

    async def close(self) -> None:
        """Close the GitHub client."""
        if self._client:
            await _run_sync(self._client.close)
            self._client = None
            self._repo = None

    async def get_authenticated_user(self) -> str:
        log.debug("get_authenticated_user")

        try:
            return await _run_sync(lambda: self._get_client().get_user().login)
        except GithubException as e:
            log.error("github_get_user_failed", status=e.status, error=str(e))
            raise _service_error("authentication", e) from e

    async def get_repository(self) -> RepositoryDetails:
        log.debug("get_repository", owner=self.owner, repo=self.repo)

        def _get_details() -> RepositoryDetails:
            gh_repo = self._get_repo()
            return RepositoryDetails(
                owner=self.owner,
                name=self.repo,
                is_fork=bool(gh_repo.fork),
                owner_login=gh_repo.owner.login,
            )

        try:
            return await _run_sync(_get_details)
        except GithubException as e:
            log.error("github_get_repository_failed", repo=f"{self.owner}/{self.repo}", error=str(e))
            raise _service_error("repository lookup", e) from e

    async def create_pull_request(
        self,
        title: str,
        body: str,
        head: str,
        base: str,
        draft: bool = True,
    ) -> PullRequest:
        """Create a pull request."""
        log.info("create_pull_request", title=title, head=head, base=base, draft=draft)

        def _create_pr() -> GHPullRequest:
            return self._get_repo().create_pull(
                title=title,
                body=body,
                head=head,
                base=base,
                draft=draft,
            )

        try:
            gh_pr = await _run_sync(_create_pr)
        except GithubException as e:
            log.error("github_create_pr_failed", head=head, status=e.status, error=str(e))
            raise _service_error("pull request creation", e) from e

        log.info("pull_request_created", number=gh_pr.number, url=gh_pr.html_url)
        return self._convert_pull_request(gh_pr, head)

    def _convert_pull_request(self, gh_pr: GHPullRequest, head: str) -> PullRequest:
        """Convert PyGithub PullRequest to our PullRequest model."""
        return PullRequest(
            number=gh_pr.number,
            url=gh_pr.html_url,
            title=gh_pr.title,
            head=head,
            base=gh_pr.base.ref,
            draft=bool(gh_pr.draft),
        )
