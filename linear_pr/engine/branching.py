"""Strategies for creating a new task branch.

When the target branch exists neither locally nor on the remote, the
orchestrator tries these strategies in order and keeps the first that
succeeds:

    UpdatedBaseStrategy:  fetch the base, refresh the local base copy,
                          branch from origin/<base>
    RemoteBaseStrategy:   branch from origin/<base> as already fetched
    LocalBaseStrategy:    branch from the local <base>
    CurrentHeadStrategy:  branch from whatever is checked out

Each strategy reports success as a bool instead of raising, so the
fallback order is explicit data rather than nested exception handlers.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

import structlog

from linear_pr.enums import BranchOutcome
from linear_pr.exceptions import GitOperationError, LinearPrError
from linear_pr.git.vcs import REMOTE, VersionControlPort

log = structlog.get_logger(__name__)


class BranchCreationStrategy(ABC):
    """One way of creating ``branch`` relative to ``base``."""

    name: str = "strategy"
    outcome: BranchOutcome = BranchOutcome.CREATE_FROM_BASE

    def __init__(self, vcs: VersionControlPort):
        self.vcs = vcs
        self.last_error: GitOperationError | None = None

    def create(self, branch: str, base: str) -> bool:
        """Try to create and check out ``branch``.

        Returns:
            True if the branch now exists and is checked out
        """
        try:
            self._create(branch, base)
        except GitOperationError as e:
            self.last_error = e
            log.warning("branch_strategy_failed", strategy=self.name, branch=branch, base=base, error=e.message)
            return False

        log.info("branch_created", strategy=self.name, branch=branch, base=base, outcome=str(self.outcome))
        return True

    @abstractmethod
    def _create(self, branch: str, base: str) -> None:
        """Run the git commands; raise GitOperationError on failure."""
        pass


class UpdatedBaseStrategy(BranchCreationStrategy):
    name = "updated-base"

    def _create(self, branch: str, base: str) -> None:
        self.vcs.fetch(base)
        if self.vcs.branch_exists_local(base):
            self.vcs.update_local_branch(base)
        else:
            self.vcs.track_branch(base, f"{REMOTE}/{base}")
        self.vcs.create_branch(branch, f"{REMOTE}/{base}")


class RemoteBaseStrategy(BranchCreationStrategy):
    name = "remote-base"

    def _create(self, branch: str, base: str) -> None:
        self.vcs.create_branch(branch, f"{REMOTE}/{base}")


class LocalBaseStrategy(BranchCreationStrategy):
    name = "local-base"

    def _create(self, branch: str, base: str) -> None:
        self.vcs.create_branch(branch, base)


class CurrentHeadStrategy(BranchCreationStrategy):
    name = "current-head"
    outcome = BranchOutcome.CREATE_FROM_HEAD_FALLBACK

    def _create(self, branch: str, base: str) -> None:
        self.vcs.create_branch(branch)


DEFAULT_STRATEGIES: tuple[type[BranchCreationStrategy], ...] = (
    UpdatedBaseStrategy,
    RemoteBaseStrategy,
    LocalBaseStrategy,
    CurrentHeadStrategy,
)


def create_branch_with_fallbacks(
    vcs: VersionControlPort,
    branch: str,
    base: str,
    strategies: Sequence[type[BranchCreationStrategy]] = DEFAULT_STRATEGIES,
) -> BranchOutcome:
    """Create ``branch`` with the first strategy that succeeds.

    Returns:
        The outcome of the successful strategy

    Raises:
        LinearPrError: If every strategy failed
    """
    last_error: GitOperationError | None = None

    for strategy_class in strategies:
        strategy = strategy_class(vcs)
        if strategy.create(branch, base):
            return strategy.outcome
        last_error = strategy.last_error

    detail = last_error.message if last_error else "no branch creation strategy configured"
    raise LinearPrError(f"Failed to create branch: {detail}")
