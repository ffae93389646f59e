"""The ``linear-pr create`` command.

Resolves the command options once, builds the gateways from stored
configuration and hands everything to the orchestrator.

Example:
    $ linear-pr create ENG-42 --type fix
    $ linear-pr create feature/eng-42-round-totals -m billing
    $ linear-pr create            # pick from issues assigned to you
"""

import asyncio
import sys

import click
import structlog

from linear_pr.config.store import ConfigStore
from linear_pr.engine.orchestrator import PullRequestOrchestrator
from linear_pr.enums import PullRequestType
from linear_pr.exceptions import LinearPrError
from linear_pr.git.vcs import GitPythonVersionControl
from linear_pr.models.domain import CreateOptions, PullRequestOutcome
from linear_pr.providers.base import IssueTracker
from linear_pr.providers.factory import create_issue_tracker, create_source_host
from linear_pr.utils.interactive import ClickPrompter, Prompter, prompt_for_reference, select_issue
from linear_pr.utils.logging_config import configure_logging

log = structlog.get_logger(__name__)


class SelectionCancelled(Exception):
    """The user quit the issue picker."""


@click.command(name="create")
@click.argument("task_id_or_branch", required=False)
@click.option(
    "-t",
    "--type",
    "pr_type",
    type=click.Choice([t.value for t in PullRequestType]),
    default=PullRequestType.FEAT.value,
    show_default=True,
    help="PR type",
)
@click.option("-m", "--module", help="Module/component being changed")
@click.option(
    "-a",
    "--enforce-assignment",
    is_flag=True,
    default=False,
    help="Only allow creating PRs for tasks assigned to you",
)
@click.option(
    "-e",
    "--exact-branch",
    is_flag=True,
    default=False,
    help="Use the exact branch name provided instead of generating one",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show verbose output")
@click.pass_context
def create_command(
    ctx: click.Context,
    task_id_or_branch: str | None,
    pr_type: str,
    module: str | None,
    enforce_assignment: bool,
    exact_branch: bool,
    verbose: bool,
) -> None:
    """Create a draft PR from a Linear task ID or branch name.

    TASK_ID_OR_BRANCH is a Linear task ID (e.g. ENG-123) or a branch name
    (e.g. feature/eng-123-add-feature). Without it, the issues assigned to
    you are listed for selection.
    """
    if verbose:
        configure_logging("DEBUG", json_output=ctx.obj.get("json_logs", False))

    store: ConfigStore = ctx.obj["store"]
    prompter = ClickPrompter()

    try:
        outcome = asyncio.run(
            _create(
                store,
                prompter,
                task_id_or_branch,
                PullRequestType(pr_type),
                module,
                enforce_assignment,
                exact_branch,
            )
        )
    except (SelectionCancelled, click.Abort):
        click.echo("\nCancelled")
        return
    except LinearPrError as e:
        click.echo(click.style(f"Error creating PR: {e.message}", fg="red"), err=True)
        log.debug("create_error", exc_info=True)
        sys.exit(1)
    except Exception as e:
        click.echo(click.style(f"Error creating PR: {e}", fg="red"), err=True)
        log.error("create_unexpected", exc_info=True)
        sys.exit(1)

    _report(outcome)


async def _create(
    store: ConfigStore,
    prompter: Prompter,
    reference: str | None,
    pr_type: PullRequestType,
    module: str | None,
    enforce_assignment: bool,
    exact_branch: bool,
) -> PullRequestOutcome:
    config = store.load()
    tracker = create_issue_tracker(config)
    host = create_source_host(config)

    try:
        vcs = GitPythonVersionControl()
        if not vcs.is_repository():
            raise LinearPrError("Not in a git repository")

        if not reference:
            reference = await _choose_reference(tracker, prompter)

        options = CreateOptions(
            reference=reference,
            pr_type=pr_type,
            module=module,
            enforce_assignment=enforce_assignment,
            use_exact_branch=exact_branch,
        )

        orchestrator = PullRequestOrchestrator(
            tracker=tracker,
            host=host,
            vcs=vcs,
            prompter=prompter,
            base_branch=config.default_branch,
        )
        return await orchestrator.run(options)
    finally:
        await host.close()


async def _choose_reference(tracker: IssueTracker, prompter: Prompter) -> str:
    """Pick from assigned issues, or ask for a reference when there are none."""
    try:
        issues = await tracker.get_assigned_issues()
    except LinearPrError as e:
        raise LinearPrError(f"Failed to fetch assigned Linear tasks: {e.message}") from e

    if not issues:
        click.echo("No issues are assigned to you.")
        return prompt_for_reference(prompter)

    issue = select_issue(issues, prompter)
    if issue is None:
        raise SelectionCancelled()
    return issue.identifier


def _report(outcome: PullRequestOutcome) -> None:
    click.echo(click.style(f"Task: {outcome.issue.identifier} - {outcome.issue.title}", fg="blue"))
    click.echo(f"Branch: {outcome.branch.name} ({outcome.branch.outcome})")
    if not outcome.pushed:
        click.echo(click.style("Warning: the branch could not be pushed; the PR was created anyway.", fg="yellow"))
    click.echo(f"PR: {outcome.spec.title}")
    click.echo(click.style(f"Pull request created: {outcome.pull_request.url}", fg="green"))
