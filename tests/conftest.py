"""Pytest configuration and shared fixtures."""

from unittest.mock import AsyncMock

import pytest
import structlog

from linear_pr.config.store import InMemoryConfigStore
from linear_pr.enums import AuthMode
from linear_pr.exceptions import GitOperationError
from linear_pr.models.domain import Issue, PullRequest, RepositoryDetails, Viewer
from linear_pr.providers.base import IssueTracker, SourceHost


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo logging configuration done by CLI invocations."""
    yield
    structlog.reset_defaults()


class FakeVersionControl:
    """In-memory VersionControlPort.

    ``fail_on`` holds call prefixes; a call whose (method, *args) starts
    with one of them raises GitOperationError. For example
    ``("create_branch", "feature/x", "origin/development")`` fails only
    that creation, ``("fetch",)`` fails every fetch.
    """

    def __init__(
        self,
        current: str = "development",
        local: set[str] | None = None,
        remote: set[str] | None = None,
        ahead: int = 0,
        fail_on: set[tuple] | None = None,
    ):
        self.current = current
        self.local = set(local) if local is not None else {"development"}
        self.remote = set(remote) if remote is not None else {"development"}
        self.ahead = ahead
        self.fail_on = fail_on or set()
        self.calls: list[tuple] = []
        self.commits: list[str] = []

    def _record(self, method: str, *args) -> None:
        call = (method, *args)
        self.calls.append(call)
        for prefix in self.fail_on:
            if call[: len(prefix)] == prefix:
                raise GitOperationError(f"{method} failed", command=" ".join(str(a) for a in call))

    def called(self, method: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == method]

    def is_repository(self) -> bool:
        return True

    def current_branch(self) -> str:
        self._record("current_branch")
        return self.current

    def branch_exists_local(self, name: str) -> bool:
        self._record("branch_exists_local", name)
        return name in self.local

    def branch_exists_remote(self, name: str) -> bool:
        self._record("branch_exists_remote", name)
        return name in self.remote

    def fetch(self, refspec: str | None = None) -> None:
        self._record("fetch", refspec)

    def update_local_branch(self, name: str) -> None:
        self._record("update_local_branch", name)

    def track_branch(self, name: str, start_point: str) -> None:
        self._record("track_branch", name, start_point)
        self.local.add(name)

    def checkout(self, name: str) -> None:
        self._record("checkout", name)
        if name not in self.local:
            raise GitOperationError(f"pathspec '{name}' did not match")
        self.current = name

    def create_branch(self, name: str, start_point: str | None = None) -> None:
        self._record("create_branch", name, start_point)
        self.local.add(name)
        self.current = name

    def push(self, name: str) -> None:
        self._record("push", name)
        self.remote.add(name)

    def commits_ahead(self, base: str) -> int:
        self._record("commits_ahead", base)
        return self.ahead

    def commit_empty(self, message: str) -> None:
        self._record("commit_empty", message)
        self.commits.append(message)
        self.ahead += 1


class ScriptedPrompter:
    """Prompter that replays canned answers and records the questions."""

    def __init__(self, answers: list[str] | None = None, confirms: list[bool] | None = None):
        self.answers = list(answers or [])
        self.confirms = list(confirms or [])
        self.questions: list[str] = []

    def ask(self, message: str, default: str | None = None) -> str:
        self.questions.append(message)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {message}")
        return self.answers.pop(0)

    def confirm(self, message: str, default: bool = False) -> bool:
        self.questions.append(message)
        if not self.confirms:
            raise AssertionError(f"Unexpected confirmation: {message}")
        return self.confirms.pop(0)


@pytest.fixture
def sample_issue() -> Issue:
    """Issue ENG-42 in the Billing project, assigned to user-1."""
    return Issue(
        id="9b2f0c1e-issue-uuid",
        identifier="ENG-42",
        title="Round invoice totals",
        description="Totals are off by a cent on some invoices.",
        url="https://linear.app/acme/issue/ENG-42/round-invoice-totals",
        project_name="Billing",
        assignee_id="user-1",
        assignee_name="Dana Lee",
        state="In Progress",
    )


@pytest.fixture
def viewer() -> Viewer:
    return Viewer(id="user-1", name="Dana Lee", email="dana@example.com")


@pytest.fixture
def tracker(sample_issue: Issue, viewer: Viewer) -> AsyncMock:
    """Issue tracker double returning ``sample_issue``."""
    mock = AsyncMock(spec=IssueTracker)
    mock.get_issue.return_value = sample_issue
    mock.get_viewer.return_value = viewer
    mock.get_assigned_issues.return_value = [sample_issue]
    mock.add_comment.return_value = None
    return mock


@pytest.fixture
def host() -> AsyncMock:
    """Source host double for repository acme/web that echoes PR requests."""
    mock = AsyncMock(spec=SourceHost)
    mock.get_repository.return_value = RepositoryDetails(owner="acme", name="web", is_fork=False, owner_login="acme")
    mock.get_authenticated_user.return_value = "dana"

    async def _create_pull_request(title, body, head, base, draft=True):
        return PullRequest(
            number=7,
            url="https://github.com/acme/web/pull/7",
            title=title,
            head=head,
            base=base,
            draft=draft,
        )

    mock.create_pull_request.side_effect = _create_pull_request
    return mock


@pytest.fixture
def vcs() -> FakeVersionControl:
    return FakeVersionControl()


@pytest.fixture
def prompter() -> ScriptedPrompter:
    return ScriptedPrompter()


@pytest.fixture
def configured_store() -> InMemoryConfigStore:
    """Store with Linear and GitHub fully set up."""
    return InMemoryConfigStore(
        github_token="ghp_test_token",
        github_username="dana",
        github_repo="acme/web",
        default_branch="development",
        linear_access_token="lin_api_test",
        linear_auth_mode=AuthMode.API_KEY,
    )


@pytest.fixture
def make_vcs():
    """Factory for FakeVersionControl with custom state."""
    return FakeVersionControl


@pytest.fixture
def make_prompter():
    """Factory for ScriptedPrompter with canned answers."""
    return ScriptedPrompter
