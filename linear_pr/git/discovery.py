"""Git repository discovery.

Reads remotes from the local repository so ``linear-pr setup`` can offer
the GitHub repository the user is working in.

Example:
    >>> from linear_pr.git.discovery import GitDiscovery
    >>> discovery = GitDiscovery()
    >>> discovery.detect_github_repository()
    'acme/web'
"""

from pathlib import Path

import git
from git.exc import InvalidGitRepositoryError, NoSuchPathError

from linear_pr.git.exceptions import NoRemotesError, NotGitRepositoryError
from linear_pr.git.models import GitRemote, RepositoryInfo
from linear_pr.git.parser import GitUrlParser


class GitDiscovery:
    """Discovers repository configuration from a local clone.

    The git.Repo object is opened lazily on first use, so constructing a
    GitDiscovery outside a repository only fails when data is requested.

    Attributes:
        repo_path: Resolved absolute path to start searching from.
        PREFERRED_REMOTES: Remote names tried in order when several exist.
    """

    PREFERRED_REMOTES = ["origin", "upstream"]

    def __init__(self, repo_path: str | Path = ".") -> None:
        self.repo_path = Path(repo_path).resolve()
        self._repo: git.Repo | None = None

    def _get_repo(self) -> git.Repo:
        if self._repo is None:
            try:
                self._repo = git.Repo(self.repo_path, search_parent_directories=True)
            except (InvalidGitRepositoryError, NoSuchPathError) as e:
                raise NotGitRepositoryError(str(self.repo_path)) from e

        return self._repo

    def list_remotes(self) -> list[GitRemote]:
        """List all configured remotes.

        Raises:
            NotGitRepositoryError: If not within a Git repository.
        """
        repo = self._get_repo()

        return [GitRemote(name=remote.name, url=remote.url) for remote in repo.remotes]

    def get_remote(self, remote_name: str | None = None) -> GitRemote:
        """Get a remote by name, or pick the preferred one.

        Without a name: a lone remote is returned, otherwise 'origin' then
        'upstream' are preferred, falling back to the first remote listed.

        Args:
            remote_name: Specific remote to return.

        Returns:
            The selected remote.

        Raises:
            NotGitRepositoryError: If not within a Git repository.
            NoRemotesError: If no remotes are configured.
            ValueError: If remote_name does not exist.
        """
        remotes = self.list_remotes()

        if not remotes:
            raise NoRemotesError()

        if remote_name:
            for remote in remotes:
                if remote.name == remote_name:
                    return remote
            raise ValueError(f"Remote '{remote_name}' not found. Available: {', '.join(r.name for r in remotes)}")

        if len(remotes) == 1:
            return remotes[0]

        for preferred in self.PREFERRED_REMOTES:
            for remote in remotes:
                if remote.name == preferred:
                    return remote

        return remotes[0]

    def parse_repository(self, remote_name: str | None = None) -> RepositoryInfo:
        """Parse owner, repo and host from a remote URL.

        Raises:
            NotGitRepositoryError: If not within a Git repository.
            NoRemotesError: If no remotes are configured.
            InvalidGitUrlError: If the remote URL cannot be parsed.
        """
        remote = self.get_remote(remote_name)
        parser = GitUrlParser(remote.url)

        return RepositoryInfo(
            owner=parser.owner,
            repo=parser.repo,
            host=parser.host,
            remote_name=remote.name,
        )

    def detect_github_repository(self, remote_name: str | None = None) -> str | None:
        """Return "owner/repo" when the remote points at GitHub, else None."""
        info = self.parse_repository(remote_name)
        if not info.is_github:
            return None
        return info.full_name
