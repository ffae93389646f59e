"""Domain models for linear-pr."""

from linear_pr.models.domain import (
    BranchPlan,
    CreateOptions,
    Issue,
    PullRequest,
    PullRequestOutcome,
    PullRequestSpec,
    RepositoryDetails,
    TaskReference,
    Viewer,
)

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
