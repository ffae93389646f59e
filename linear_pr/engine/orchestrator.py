"""
Pull request orchestrator.

Turns one task reference into a draft pull request. The run is a fixed
sequence of stages; any stage may end the run with a ``LinearPrError``:

    ParseInput -> ResolveIssue -> CheckAssignment (optional)
        -> ResolveModule -> ReconcileBranch -> ComposeTitle
        -> PushAndOpenPR -> Annotate (best-effort)

Nothing already pushed or opened is retracted when a later stage fails;
rerunning the command reuses the branch.

Example:
    >>> orchestrator = PullRequestOrchestrator(tracker, host, vcs, ClickPrompter(), base_branch="main")
    >>> outcome = await orchestrator.run(CreateOptions(reference="ENG-42", pr_type="fix"))
    >>> outcome.pull_request.url
    'https://github.com/acme/web/pull/7'
"""

from collections.abc import Sequence

import structlog

from linear_pr.config.settings import DEFAULT_BASE_BRANCH
from linear_pr.engine.branching import (
    DEFAULT_STRATEGIES,
    BranchCreationStrategy,
    create_branch_with_fallbacks,
)
from linear_pr.enums import BranchOutcome
from linear_pr.exceptions import GitOperationError, LinearPrError
from linear_pr.git.vcs import REMOTE, VersionControlPort
from linear_pr.models.domain import (
    BranchPlan,
    CreateOptions,
    Issue,
    PullRequest,
    PullRequestOutcome,
    PullRequestSpec,
    TaskReference,
)
from linear_pr.naming import (
    compose_body,
    format_scope,
    is_valid_scope,
    parse_task_reference,
    synthesize_branch_name,
)
from linear_pr.providers.base import IssueTracker, SourceHost
from linear_pr.utils.interactive import Prompter

log = structlog.get_logger(__name__)

EMPTY_COMMIT_TEMPLATE = "chore: Draft PR for {task_id}"
ANNOTATION_TEMPLATE = "Created PR: {url}"


class PullRequestOrchestrator:
    """Runs the task-to-pull-request pipeline.

    All collaborators are injected; the orchestrator never reads
    configuration or the terminal directly.

    Attributes:
        tracker: Issue tracker gateway (Linear)
        host: Source host gateway (GitHub)
        vcs: Local version control
        prompter: Used only when the module/scope must be asked for
        base_branch: Branch new work starts from and PRs target
        branch_strategies: Ordered strategies for creating a new branch
    """

    def __init__(
        self,
        tracker: IssueTracker,
        host: SourceHost,
        vcs: VersionControlPort,
        prompter: Prompter,
        base_branch: str = DEFAULT_BASE_BRANCH,
        branch_strategies: Sequence[type[BranchCreationStrategy]] = DEFAULT_STRATEGIES,
    ) -> None:
        self.tracker = tracker
        self.host = host
        self.vcs = vcs
        self.prompter = prompter
        self.base_branch = base_branch
        self.branch_strategies = branch_strategies

    async def run(self, options: CreateOptions) -> PullRequestOutcome:
        """Create a draft pull request for the referenced task.

        Args:
            options: Resolved command options

        Returns:
            What was created, including the reconciled branch

        Raises:
            LinearPrError: If any stage fails terminally
        """
        reference = parse_task_reference(options.reference)

        with structlog.contextvars.bound_contextvars(task_id=reference.task_id):
            log.info("pull_request_run_started", reference=reference.raw, branch_like=reference.branch_like)

            issue = await self._resolve_issue(reference.task_id)

            if options.enforce_assignment:
                await self._check_assignment(issue)

            scope = self._resolve_module(options.module, issue)
            branch = self._reconcile_branch(self._target_branch(reference, issue, options.use_exact_branch))

            spec = PullRequestSpec(
                pr_type=options.pr_type,
                scope=scope,
                task_id=issue.identifier,
                description=issue.title,
                body=compose_body(issue),
                draft=True,
            )
            log.info("pull_request_composed", title=spec.title)

            pull_request, pushed = await self._push_and_open(branch, spec)
            annotated = await self._annotate(issue, pull_request, options.annotate_issue)

            log.info("pull_request_run_completed", url=pull_request.url, outcome=str(branch.outcome))
            return PullRequestOutcome(
                issue=issue,
                branch=branch,
                spec=spec,
                pull_request=pull_request,
                pushed=pushed,
                annotated=annotated,
            )

    async def _resolve_issue(self, task_id: str) -> Issue:
        try:
            issue = await self.tracker.get_issue(task_id)
        except LinearPrError as e:
            raise LinearPrError(f"Failed to fetch Linear task: {e.message}") from e

        if issue is None:
            raise LinearPrError(f"Task {task_id} not found")

        log.info("issue_resolved", identifier=issue.identifier, title=issue.title)
        return issue

    async def _check_assignment(self, issue: Issue) -> None:
        """Fail unless the issue is assigned to the token owner.

        A failed viewer lookup counts as not assigned.
        """
        try:
            viewer = await self.tracker.get_viewer()
            assigned = issue.assignee_id is not None and issue.assignee_id == viewer.id
        except LinearPrError as e:
            log.warning("assignment_check_failed", error=e.message)
            assigned = False

        if not assigned:
            raise LinearPrError(
                f"Task {issue.identifier} is not assigned to you. "
                "Only assigned tasks can be used with --enforce-assignment option."
            )

    def _resolve_module(self, module: str | None, issue: Issue) -> str:
        if module and module.strip():
            module = module.strip()
            if is_valid_scope(module):
                return module

            suggested = format_scope(module)
            if suggested and self.prompter.confirm(
                f"Module '{module}' is not a valid scope. Use '{suggested}' instead?", default=True
            ):
                return suggested
            return self._prompt_module()

        if issue.project_name:
            scope = format_scope(issue.project_name)
            if scope:
                log.debug("module_from_project", project=issue.project_name, scope=scope)
                return scope

        return self._prompt_module()

    def _prompt_module(self) -> str:
        answer = self.prompter.ask("Enter module/component name").strip()
        if not is_valid_scope(answer):
            raise LinearPrError(
                f"Invalid module name: '{answer}'. Use lowercase letters, digits and single hyphens."
            )
        return answer

    def _target_branch(self, reference: TaskReference, issue: Issue, use_exact_branch: bool) -> str:
        if use_exact_branch or reference.branch_like:
            return reference.raw
        return synthesize_branch_name(issue.identifier, issue.title)

    def _reconcile_branch(self, name: str) -> BranchPlan:
        """Make ``name`` the checked-out branch, creating it if needed."""
        base = self.base_branch

        try:
            current = self.vcs.current_branch()
        except GitOperationError as e:
            log.debug("current_branch_unknown", error=e.message)
            current = None

        if current == name:
            log.info("branch_already_checked_out", branch=name)
            return BranchPlan(name=name, base=base, outcome=BranchOutcome.REUSE_LOCAL)

        try:
            if self.vcs.branch_exists_local(name):
                self.vcs.checkout(name)
                log.info("branch_checked_out", branch=name, outcome=str(BranchOutcome.REUSE_LOCAL))
                return BranchPlan(name=name, base=base, outcome=BranchOutcome.REUSE_LOCAL)

            if self._exists_on_remote(name):
                self.vcs.fetch(name)
                self.vcs.track_branch(name, f"{REMOTE}/{name}")
                self.vcs.checkout(name)
                log.info("branch_checked_out", branch=name, outcome=str(BranchOutcome.CHECKOUT_REMOTE))
                return BranchPlan(name=name, base=base, outcome=BranchOutcome.CHECKOUT_REMOTE)
        except GitOperationError as e:
            raise LinearPrError(f"Failed to check out branch {name}: {e.message}") from e

        outcome = create_branch_with_fallbacks(self.vcs, name, base, self.branch_strategies)
        return BranchPlan(name=name, base=base, outcome=outcome)

    def _exists_on_remote(self, name: str) -> bool:
        try:
            return self.vcs.branch_exists_remote(name)
        except GitOperationError as e:
            log.warning("remote_branch_check_failed", branch=name, error=e.message)
            return False

    async def _push_and_open(self, branch: BranchPlan, spec: PullRequestSpec) -> tuple[PullRequest, bool]:
        self._ensure_commit(branch, spec.task_id)
        pushed = self._push(branch.name)

        candidates = await self._head_candidates(branch.name)
        for index, head in enumerate(candidates):
            try:
                pull_request = await self.host.create_pull_request(
                    title=spec.title,
                    body=spec.body,
                    head=head,
                    base=branch.base,
                    draft=spec.draft,
                )
            except LinearPrError as e:
                if index == len(candidates) - 1:
                    raise LinearPrError(f"Failed to create pull request: {e.message}") from e
                log.warning("pull_request_head_rejected", head=head, error=e.message)
                continue
            return pull_request, pushed

        # candidates always holds at least the bare branch
        raise LinearPrError("Failed to create pull request: no head reference to try")

    def _ensure_commit(self, branch: BranchPlan, task_id: str) -> None:
        """GitHub refuses a PR with no commits, so add an empty one if needed."""
        try:
            ahead = self.vcs.commits_ahead(branch.base)
        except GitOperationError as e:
            log.debug("commits_ahead_unknown", base=branch.base, error=e.message)
            ahead = 0

        if ahead > 0:
            return

        try:
            self.vcs.commit_empty(EMPTY_COMMIT_TEMPLATE.format(task_id=task_id))
            log.info("empty_commit_created", branch=branch.name)
        except GitOperationError as e:
            log.warning("empty_commit_failed", branch=branch.name, error=e.message)

    def _push(self, name: str) -> bool:
        try:
            self.vcs.push(name)
        except GitOperationError as e:
            log.warning("push_failed", branch=name, error=e.message)
            return False
        log.info("branch_pushed", branch=name)
        return True

    async def _head_candidates(self, branch: str) -> list[str]:
        try:
            details = await self.host.get_repository()
        except LinearPrError as e:
            log.warning("repository_details_unavailable", error=e.message)
            return [branch]

        return [f"{details.head_owner}:{branch}", branch]

    async def _annotate(self, issue: Issue, pull_request: PullRequest, enabled: bool) -> bool:
        if not enabled:
            log.info("issue_annotation_skipped", issue=issue.identifier)
            return False

        try:
            await self.tracker.add_comment(issue, ANNOTATION_TEMPLATE.format(url=pull_request.url))
        except LinearPrError as e:
            log.warning("issue_annotation_failed", issue=issue.identifier, error=e.message)
            return False

        log.info("issue_annotated", issue=issue.identifier)
        return True
