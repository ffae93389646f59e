"""Terminal interaction: prompts and the assigned-issue picker.

The orchestrator only needs to ask a question or request a confirmation,
so it depends on the small ``Prompter`` protocol. ``ClickPrompter`` is the
terminal implementation; tests pass scripted doubles.

Example:
    >>> prompter = ClickPrompter()
    >>> issue = select_issue(assigned_issues, prompter)
    >>> if issue is None:
    ...     print("Cancelled")
"""

from collections.abc import Callable, Sequence
from typing import Any, Protocol

import click

from linear_pr.exceptions import LinearPrError
from linear_pr.models.domain import Issue
from linear_pr.naming import parse_task_reference, sort_key_for_task_id

QUIT_COMMANDS = {"q", "quit", "exit"}
TITLE_WIDTH = 60


class Prompter(Protocol):
    """Asks the user for input."""

    def ask(self, message: str, default: str | None = None) -> str: ...

    def confirm(self, message: str, default: bool = False) -> bool: ...


class ClickPrompter:
    """Prompter backed by click.prompt/click.confirm.

    Ctrl-C at a prompt raises click.Abort, which the CLI reports as a
    cancellation.
    """

    def ask(self, message: str, default: str | None = None) -> str:
        return click.prompt(message, default=default, type=str)

    def confirm(self, message: str, default: bool = False) -> bool:
        return click.confirm(message, default=default)


SORT_KEYS: dict[str, Callable[[Issue], Any]] = {
    "id": lambda issue: sort_key_for_task_id(issue.identifier),
    "state": lambda issue: ((issue.state or "").lower(), sort_key_for_task_id(issue.identifier)),
    "project": lambda issue: ((issue.project_name or "").lower(), sort_key_for_task_id(issue.identifier)),
}


def filter_issues(issues: Sequence[Issue], query: str) -> list[Issue]:
    """Case-insensitive match on identifier, title, state and project."""
    if not query:
        return list(issues)

    needle = query.lower()
    return [
        issue
        for issue in issues
        if any(needle in (field or "").lower() for field in (issue.identifier, issue.title, issue.state, issue.project_name))
    ]


def sort_issues(issues: Sequence[Issue], field: str = "id") -> list[Issue]:
    return sorted(issues, key=SORT_KEYS[field])


def _truncate(text: str, width: int) -> str:
    return text if len(text) <= width else text[: width - 3] + "..."


def render_issue_table(issues: Sequence[Issue]) -> str:
    """Render issues as a numbered plain-text table."""
    rows = [
        (str(index), issue.identifier, issue.state or "-", issue.project_name or "-", _truncate(issue.title, TITLE_WIDTH))
        for index, issue in enumerate(issues, start=1)
    ]
    header = ("#", "ID", "State", "Project", "Title")
    widths = [max(len(row[col]) for row in [header, *rows]) for col in range(len(header))]

    lines = ["  ".join(cell.ljust(width) for cell, width in zip(header, widths, strict=True)).rstrip()]
    lines.append("  ".join("-" * width for width in widths))
    for row in rows:
        lines.append("  ".join(cell.ljust(width) for cell, width in zip(row, widths, strict=True)).rstrip())
    return "\n".join(lines)


def select_issue(issues: Sequence[Issue], prompter: Prompter) -> Issue | None:
    """Let the user pick one of ``issues``.

    Accepts a row number, ``/search <text>`` (empty text clears the
    filter), ``/sort id|state|project`` or ``q`` to cancel.

    Returns:
        The chosen issue, or None if the user cancelled
    """
    query = ""
    sort_field = "id"

    while True:
        visible = sort_issues(filter_issues(issues, query), sort_field)

        click.echo()
        if visible:
            click.echo(render_issue_table(visible))
        else:
            click.echo(f"No issues match '{query}'.")
        if query:
            click.echo(f"Filter: {query}")

        answer = prompter.ask("Select an issue number (/search <text>, /sort id|state|project, q to quit)").strip()

        if answer.lower() in QUIT_COMMANDS:
            return None

        if answer.startswith("/search"):
            query = answer[len("/search") :].strip()
            continue

        if answer.startswith("/sort"):
            field = answer[len("/sort") :].strip().lower()
            if field in SORT_KEYS:
                sort_field = field
            else:
                click.echo(f"Unknown sort field '{field}'. Use one of: {', '.join(SORT_KEYS)}")
            continue

        if answer.isdigit() and 1 <= int(answer) <= len(visible):
            return visible[int(answer) - 1]

        click.echo(f"Invalid selection: {answer}")


def prompt_for_reference(prompter: Prompter) -> str:
    """Ask until the user enters a parseable task ID or branch name."""
    while True:
        answer = prompter.ask("Enter a Linear task ID (e.g. ENG-123) or branch name").strip()
        try:
            parse_task_reference(answer)
        except LinearPrError as e:
            click.echo(e.message)
            continue
        return answer
