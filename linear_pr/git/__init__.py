"""Git access for linear-pr.

Two concerns live here:

    Discovery: reading remotes to find the GitHub repository (setup)
    Version control: the branch, push and commit operations used while
        preparing a pull request

Example:
    >>> from linear_pr.git import GitDiscovery, GitPythonVersionControl
    >>> GitDiscovery().detect_github_repository()
    'acme/web'
    >>> GitPythonVersionControl().current_branch()
    'development'
"""

from linear_pr.git.discovery import GitDiscovery
from linear_pr.git.exceptions import (
    GitDiscoveryError,
    InvalidGitUrlError,
    NoRemotesError,
    NotGitRepositoryError,
)
from linear_pr.git.models import GitRemote, RepositoryInfo
from linear_pr.git.parser import GitUrlParser
from linear_pr.git.vcs import GitPythonVersionControl, VersionControlPort

__all__ = [
    "GitDiscovery",
    "GitDiscoveryError",
    "GitPythonVersionControl",
    "GitRemote",
    "GitUrlParser",
    "InvalidGitUrlError",
    "NoRemotesError",
    "NotGitRepositoryError",
    "RepositoryInfo",
    "VersionControlPort",
]
