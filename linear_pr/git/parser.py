"""Git remote URL parsing.

Supported URL formats:
    SSH:
        - git@github.com:owner/repo.git
        - git@github.com:owner/repo
        - org-123@github.com:owner/repo.git

    HTTPS:
        - https://github.com/owner/repo.git
        - https://github.com/owner/repo
        - https://github.example.com:8443/owner/repo.git

Example:
    >>> parser = GitUrlParser("git@github.com:acme/web.git")
    >>> parser.full_name
    'acme/web'
    >>> parser.is_github
    True
"""

import re
from typing import Literal

from linear_pr.git.exceptions import InvalidGitUrlError


class GitUrlParser:
    """Parser for Git URLs in SSH and HTTPS formats.

    Parsing happens in the constructor; an unrecognized URL raises
    InvalidGitUrlError, so every property is valid on a constructed parser.

    Attributes:
        url: Original URL, whitespace trimmed
        url_type: 'ssh' or 'https'
        host: Hostname of the Git server
        owner: Repository owner/organization name
        repo: Repository name without the .git suffix
    """

    # Requires user@ so URLs with a scheme never match
    SSH_PATTERN = re.compile(r"^(?P<user>[\w.-]+)@(?P<host>[a-zA-Z0-9._-]+):(?P<path>.+?)(?:\.git)?/?$")
    HTTPS_PATTERN = re.compile(
        r"^https?://(?:[^@/]+@)?(?P<host>[a-zA-Z0-9._-]+)(?::\d+)?/(?P<path>.+?)(?:\.git)?/?$"
    )

    def __init__(self, url: str) -> None:
        self.url = url.strip()
        self.url_type: Literal["ssh", "https"]

        ssh_match = self.SSH_PATTERN.match(self.url)
        https_match = None if ssh_match else self.HTTPS_PATTERN.match(self.url)

        if ssh_match:
            self.url_type = "ssh"
            self.host = ssh_match.group("host")
            path = ssh_match.group("path")
        elif https_match:
            self.url_type = "https"
            self.host = https_match.group("host")
            path = https_match.group("path")
        else:
            raise InvalidGitUrlError(
                self.url,
                reason="Must be SSH (git@host:path) or HTTPS (https://host/path)",
            )

        self.owner, self.repo = self._split_owner_repo(path)

    def _split_owner_repo(self, path: str) -> tuple[str, str]:
        """Take owner and repo from the first two path components."""
        parts = path.strip("/").removesuffix(".git").split("/")

        if len(parts) < 2 or not parts[0] or not parts[1]:
            raise InvalidGitUrlError(self.url, reason=f"Path must contain owner/repo (got: {path})")

        return parts[0], parts[1]

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def is_github(self) -> bool:
        """True for github.com and GitHub Enterprise hosts named after GitHub."""
        return "github" in self.host.lower()
