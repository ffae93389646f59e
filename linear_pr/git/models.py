"""Git repository data models.

Example:
    >>> from linear_pr.git.models import RepositoryInfo
    >>> info = RepositoryInfo(owner="acme", repo="web", host="github.com", remote_name="origin")
    >>> info.full_name
    'acme/web'
"""

from dataclasses import dataclass

from pydantic import BaseModel, field_validator


@dataclass(frozen=True)
class GitRemote:
    """A remote from the local git config.

    Attributes:
        name: Remote name (e.g., 'origin', 'upstream')
        url: Raw URL from git config
    """

    name: str
    url: str


class RepositoryInfo(BaseModel):
    """Repository identity parsed from a remote URL."""

    owner: str
    repo: str
    host: str
    remote_name: str

    @field_validator("owner", "repo")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Owner and repo must not be empty")
        return v.strip()

    @field_validator("repo")
    @classmethod
    def validate_no_git_suffix(cls, v: str) -> str:
        return v.removesuffix(".git")

    @property
    def full_name(self) -> str:
        """Return owner/repo format."""
        return f"{self.owner}/{self.repo}"

    @property
    def is_github(self) -> bool:
        return "github" in self.host.lower()
