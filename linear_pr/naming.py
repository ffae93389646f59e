"""Task identifier, branch name and pull request title normalization.

Pure string functions with no I/O. They encode the naming conventions
shared by the CLI and the orchestrator:

    Task identifiers:  ENG-123 (letters, hyphen, digits; case-insensitive)
    Branch names:      feature/eng-123-add-login-flow
    Scopes:            lowercase [a-z0-9-], no edge or doubled hyphens
    PR titles:         feat(auth): [ENG-123] Add OAuth

Example:
    >>> extract_task_id("feature/team-1234-cool-feature")
    'TEAM-1234'
    >>> synthesize_branch_name("TEAM-123", "Add Login Flow")
    'feature/team-123-add-login-flow'
    >>> compose_title("feat", "Auth", "eng-123", "Add OAuth")
    'feat(auth): [ENG-123] Add OAuth'
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from linear_pr.exceptions import LinearPrError

if TYPE_CHECKING:
    from linear_pr.models.domain import Issue

TASK_ID_PATTERN = re.compile(r"^[A-Za-z]+-\d+$")
EMBEDDED_TASK_ID_PATTERN = re.compile(r"([A-Za-z]+-\d+)")
SCOPE_PATTERN = re.compile(r"^[a-z0-9-]+$")

BRANCH_PREFIX = "feature"


@dataclass(frozen=True)
class TaskReference:
    """Caller input resolved to a canonical task identifier.

    Attributes:
        raw: The string exactly as the caller gave it
        task_id: Canonical identifier (uppercase team key + number)
        branch_like: Whether the input was treated as a branch name
    """

    raw: str
    task_id: str
    branch_like: bool


def is_canonical_task_id(value: str) -> bool:
    """Return True if ``value`` is a bare task identifier like ``ENG-123``."""
    return bool(TASK_ID_PATTERN.match(value))


def looks_like_branch(value: str) -> bool:
    """Return True if ``value`` should be parsed as a branch name.

    Anything with a slash, or with a hyphen that is not part of a bare
    identifier, is treated as a branch.
    """
    return "/" in value or ("-" in value and not is_canonical_task_id(value))


def extract_task_id(branch_like: str) -> str | None:
    """Extract the task identifier embedded in a branch name.

    Everything up to the last ``/`` is discarded, then the first
    ``letters-digits`` run in the remainder is returned uppercased.

    Args:
        branch_like: Branch name such as ``bugfix/abc-123-fix-something``

    Returns:
        Canonical identifier, or None when the name carries none

    Example:
        >>> extract_task_id("feature/team-1234-cool-feature")
        'TEAM-1234'
        >>> extract_task_id("no-id-here") is None
        True
    """
    remainder = branch_like.rsplit("/", 1)[-1]
    match = EMBEDDED_TASK_ID_PATTERN.search(remainder)
    if match is None:
        return None
    return match.group(1).upper()


def parse_task_reference(raw: str) -> TaskReference:
    """Resolve caller input into a TaskReference.

    Raises:
        LinearPrError: If the input is empty or no identifier can be extracted
    """
    value = raw.strip()
    if not value:
        raise LinearPrError("A Linear task ID or branch name is required")

    if looks_like_branch(value):
        task_id = extract_task_id(value)
        if task_id is None:
            raise LinearPrError(f"Could not extract a valid Linear task ID from: {raw}")
        return TaskReference(raw=value, task_id=task_id, branch_like=True)

    if not is_canonical_task_id(value):
        raise LinearPrError(f"Invalid task ID format: {raw}. Expected format like ENG-123")

    return TaskReference(raw=value, task_id=value.upper(), branch_like=False)


def sanitize_title(title: str) -> str:
    """Turn an issue title into a branch-safe slug."""
    slug = re.sub(r"[^\w\s-]", "", title.lower()).strip()
    slug = re.sub(r"\s+", "-", slug)
    return slug.strip("-")


def synthesize_branch_name(task_id: str, title: str) -> str:
    """Build the standard branch name for an issue.

    Example:
        >>> synthesize_branch_name("TEAM-123", "Add Login Flow")
        'feature/team-123-add-login-flow'
    """
    team, _, number = task_id.partition("-")
    slug = sanitize_title(title)
    stem = f"{team.lower()}-{number}"
    if not slug:
        return f"{BRANCH_PREFIX}/{stem}"
    return f"{BRANCH_PREFIX}/{stem}-{slug}"


def format_scope(value: str) -> str:
    """Normalize a module name into the scope grammar.

    Example:
        >>> format_scope("My Module!!")
        'my-module'
    """
    scope = re.sub(r"[^a-z0-9-]", "-", value.lower())
    scope = re.sub(r"-{2,}", "-", scope)
    return scope.strip("-")


def is_valid_scope(value: str) -> bool:
    """Return True if ``value`` can go into a PR title unchanged."""
    return bool(SCOPE_PATTERN.match(value)) and format_scope(value) == value


def compose_title(pr_type: object, scope: str, task_id: str, description: str) -> str:
    """Compose the pull request title.

    The result is used verbatim; no further escaping is applied.
    """
    return f"{pr_type}({format_scope(scope)}): [{task_id.upper()}] {description}"


def compose_body(issue: Issue) -> str:
    """Compose the pull request body linking back to the issue."""
    body = f"This PR addresses Linear task [{issue.identifier}]({issue.url})"
    if issue.description:
        body = f"{body}\n\n{issue.description}"
    return body


def sort_key_for_task_id(task_id: str) -> tuple[str, int]:
    """Natural sort key: ``ENG-9`` sorts before ``ENG-10``."""
    team, _, number = task_id.partition("-")
    return team.upper(), int(number) if number.isdigit() else 0
