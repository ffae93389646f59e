"""
Domain models for linear-pr.

These dataclasses are the normalized internal representation shared by the
orchestrator and the gateways. Provider responses (Linear GraphQL nodes,
PyGithub objects) are converted into them at the gateway boundary, so the
orchestrator never sees vendor types.

Example:
    Building the spec for a pull request::

        spec = PullRequestSpec(
            pr_type=PullRequestType.FIX,
            scope="billing",
            task_id="ENG-42",
            description="Round invoice totals",
            body="This PR addresses Linear task ...",
        )
        spec.title  # 'fix(billing): [ENG-42] Round invoice totals'
"""

from dataclasses import dataclass

from linear_pr.enums import BranchOutcome, PullRequestType
from linear_pr.naming import TaskReference, compose_title

__all__ = [
    "BranchPlan",
    "CreateOptions",
    "Issue",
    "PullRequest",
    "PullRequestOutcome",
    "PullRequestSpec",
    "RepositoryDetails",
    "TaskReference",
    "Viewer",
]


@dataclass
class Issue:
    """A Linear issue, fetched fresh on every invocation."""

    id: str
    """Tracker-internal UUID, required for comment mutations."""

    identifier: str
    """Canonical identifier, e.g. ``ENG-123``."""

    title: str
    description: str
    url: str
    project_name: str | None = None
    assignee_id: str | None = None
    assignee_name: str | None = None
    state: str | None = None


@dataclass
class Viewer:
    """The principal the stored Linear token belongs to."""

    id: str
    name: str
    email: str | None = None


@dataclass
class BranchPlan:
    """Target branch and how it was reconciled."""

    name: str
    base: str
    outcome: BranchOutcome | None = None


@dataclass
class PullRequestSpec:
    """Everything needed to open a pull request.

    The scope must already satisfy the scope grammar; the orchestrator
    guarantees this before building the spec.
    """

    pr_type: PullRequestType | str
    scope: str
    task_id: str
    description: str
    body: str
    draft: bool = True

    @property
    def title(self) -> str:
        return compose_title(self.pr_type, self.scope, self.task_id, self.description)


@dataclass
class RepositoryDetails:
    """What the source host reports about the configured repository."""

    owner: str
    name: str
    is_fork: bool = False
    owner_login: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def head_owner(self) -> str:
        """Account that owns branches pushed for this repository.

        For forks the head reference must be qualified with the fork
        owner's login rather than the configured owner.
        """
        if self.is_fork and self.owner_login:
            return self.owner_login
        return self.owner


@dataclass
class PullRequest:
    """A pull request opened on the source host."""

    number: int
    url: str
    title: str
    head: str
    base: str
    draft: bool = True


@dataclass
class CreateOptions:
    """Fully resolved input for one ``create`` invocation.

    Built once at the CLI boundary; the orchestrator never prompts for
    anything that belongs here.
    """

    reference: str
    pr_type: PullRequestType | str = PullRequestType.FEAT
    module: str | None = None
    enforce_assignment: bool = False
    use_exact_branch: bool = True
    annotate_issue: bool = False


@dataclass
class PullRequestOutcome:
    """Result of a successful orchestration run."""

    issue: Issue
    branch: BranchPlan
    spec: PullRequestSpec
    pull_request: PullRequest
    pushed: bool = True
    annotated: bool = False
