"""
Stored configuration model.

The persisted key/value configuration written by ``linear-pr setup`` and
``linear-pr config-oauth``. Values are validated with Pydantic when loaded;
secret fields may hold credential references (``@keyring:github/token``,
``${GITHUB_TOKEN}``) until the store resolves them.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator

from linear_pr.enums import AuthMode
from linear_pr.exceptions import ConfigurationError

DEFAULT_BASE_BRANCH = "development"

REPO_PATH_PATTERN = re.compile(r"^[\w.-]+/[\w.-]+$")

# Field name -> (keyring service, keyring key)
SECRET_FIELDS: dict[str, tuple[str, str]] = {
    "github_token": ("github", "token"),
    "linear_access_token": ("linear", "access_token"),
    "linear_oauth_client_secret": ("linear", "oauth_client_secret"),
}


class StoredConfig(BaseModel):
    """Everything linear-pr persists between invocations."""

    github_token: str | None = Field(default=None, description="GitHub personal access token")
    github_username: str | None = Field(default=None, description="Login the GitHub token belongs to")
    github_repo: str | None = Field(default=None, description="Default repository as owner/repo")
    default_branch: str = Field(default=DEFAULT_BASE_BRANCH, description="Base branch for new work")
    linear_access_token: str | None = Field(default=None, description="Linear API key or OAuth token")
    linear_auth_mode: AuthMode | None = Field(default=None, description="How the Linear token was obtained")
    linear_oauth_client_id: str | None = Field(default=None, description="Linear OAuth application id")
    linear_oauth_client_secret: str | None = Field(default=None, description="Linear OAuth application secret")

    @field_validator("github_repo")
    @classmethod
    def validate_repo_path(cls, v: str | None) -> str | None:
        """Ensure the repository is given as owner/repo."""
        if v is None:
            return v
        v = v.strip()
        if not REPO_PATH_PATTERN.match(v):
            raise ValueError(f"Repository must be in owner/repo form (got: {v})")
        return v.removesuffix(".git")

    @field_validator("default_branch")
    @classmethod
    def validate_default_branch(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Default branch must not be empty")
        return v.strip()

    @property
    def repo_owner(self) -> str:
        return self.require_github_repo().split("/", 1)[0]

    @property
    def repo_name(self) -> str:
        return self.require_github_repo().split("/", 1)[1]

    @property
    def is_linear_api_key(self) -> bool:
        return self.linear_auth_mode != AuthMode.OAUTH

    def require_github_token(self) -> str:
        if not self.github_token:
            raise ConfigurationError("GitHub is not set up. Run `linear-pr setup` first.")
        return self.github_token

    def require_github_repo(self) -> str:
        if not self.github_repo:
            raise ConfigurationError("GitHub repository not configured. Run `linear-pr setup` first.")
        return self.github_repo

    def require_linear_token(self) -> str:
        if not self.linear_access_token:
            raise ConfigurationError("Linear is not set up. Run `linear-pr setup` first.")
        return self.linear_access_token

    def require_oauth_client(self) -> tuple[str, str]:
        if not self.linear_oauth_client_id or not self.linear_oauth_client_secret:
            raise ConfigurationError(
                "OAuth credentials not configured. Run `linear-pr config-oauth` first."
            )
        return self.linear_oauth_client_id, self.linear_oauth_client_secret
