"""Local version control operations used by the orchestrator.

The orchestrator depends on the narrow ``VersionControlPort`` protocol
rather than on GitPython, so tests substitute an in-memory double.
``GitPythonVersionControl`` is the production implementation; it runs git
commands through ``git.Repo.git`` and converts ``GitCommandError`` into
``GitOperationError``.

Example:
    >>> vcs = GitPythonVersionControl()
    >>> vcs.current_branch()
    'development'
    >>> vcs.branch_exists_remote("feature/eng-42-round-totals")
    False
"""

from pathlib import Path
from typing import Protocol, runtime_checkable

import git
import structlog
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from linear_pr.exceptions import GitOperationError
from linear_pr.git.exceptions import NotGitRepositoryError

log = structlog.get_logger(__name__)

REMOTE = "origin"


@runtime_checkable
class VersionControlPort(Protocol):
    """Capabilities the orchestrator needs from local git.

    Every method raises GitOperationError when the underlying command fails.
    """

    def current_branch(self) -> str: ...

    def branch_exists_local(self, name: str) -> bool: ...

    def branch_exists_remote(self, name: str) -> bool: ...

    def fetch(self, refspec: str | None = None) -> None: ...

    def update_local_branch(self, name: str) -> None: ...

    def track_branch(self, name: str, start_point: str) -> None: ...

    def checkout(self, name: str) -> None: ...

    def create_branch(self, name: str, start_point: str | None = None) -> None: ...

    def push(self, name: str) -> None: ...

    def commits_ahead(self, base: str) -> int: ...

    def commit_empty(self, message: str) -> None: ...


class GitPythonVersionControl:
    """VersionControlPort backed by the git executable via GitPython."""

    def __init__(self, repo_path: str | Path = ".", remote: str = REMOTE) -> None:
        self.repo_path = Path(repo_path).resolve()
        self.remote = remote
        self._repo: git.Repo | None = None

    def _get_repo(self) -> git.Repo:
        if self._repo is None:
            try:
                self._repo = git.Repo(self.repo_path, search_parent_directories=True)
            except (InvalidGitRepositoryError, NoSuchPathError) as e:
                raise NotGitRepositoryError(str(self.repo_path)) from e
        return self._repo

    def _run(self, *args: str) -> str:
        """Run ``git <args>`` and return stripped stdout.

        Raises:
            GitOperationError: If git exits non-zero
        """
        command = ["git", *args]
        log.debug("git_command", args=list(args))
        try:
            output = self._get_repo().git.execute(command)
        except GitCommandError as e:
            stderr = (e.stderr or "").strip()
            detail = stderr or str(e)
            raise GitOperationError(f"git {args[0]} failed: {detail}", command=" ".join(command)) from e
        return str(output).strip()

    def is_repository(self) -> bool:
        try:
            self._get_repo()
        except NotGitRepositoryError:
            return False
        return True

    def current_branch(self) -> str:
        return self._run("rev-parse", "--abbrev-ref", "HEAD")

    def branch_exists_local(self, name: str) -> bool:
        return bool(self._run("branch", "--list", name))

    def branch_exists_remote(self, name: str) -> bool:
        return bool(self._run("ls-remote", "--heads", self.remote, name))

    def fetch(self, refspec: str | None = None) -> None:
        if refspec:
            self._run("fetch", self.remote, refspec)
        else:
            self._run("fetch", self.remote)

    def update_local_branch(self, name: str) -> None:
        """Fast-forward the local copy of ``name`` to the remote.

        Pulls when ``name`` is checked out, otherwise fetches straight into
        the local ref (git refuses that for the current branch).
        """
        if self.current_branch() == name:
            self._run("pull", "--ff-only", self.remote, name)
        else:
            self._run("fetch", self.remote, f"{name}:{name}")

    def track_branch(self, name: str, start_point: str) -> None:
        self._run("branch", "--track", name, start_point)

    def checkout(self, name: str) -> None:
        self._run("checkout", name)

    def create_branch(self, name: str, start_point: str | None = None) -> None:
        if start_point:
            self._run("checkout", "-b", name, start_point)
        else:
            self._run("checkout", "-b", name)

    def push(self, name: str) -> None:
        self._run("push", "-u", self.remote, name)

    def commits_ahead(self, base: str) -> int:
        """Count commits on HEAD not reachable from the remote base."""
        output = self._run("rev-list", "HEAD", f"^{self.remote}/{base}", "--count")
        try:
            return int(output)
        except ValueError as e:
            raise GitOperationError(f"Unexpected rev-list output: {output!r}") from e

    def commit_empty(self, message: str) -> None:
        self._run("commit", "--allow-empty", "-m", message)
