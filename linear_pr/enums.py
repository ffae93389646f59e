"""Enumerations for pull request types, auth modes and branch outcomes."""

from enum import Enum


class PullRequestType(str, Enum):
    """Conventional-commit types allowed in a pull request title."""

    FEAT = "feat"
    FIX = "fix"
    DOCS = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    PERF = "perf"
    TEST = "test"
    CHORE = "chore"
    CI = "ci"
    BUILD = "build"
    REVERT = "revert"

    def __str__(self) -> str:
        return self.value


class AuthMode(str, Enum):
    """How the stored Linear token was obtained.

    Linear expects personal API keys as the raw Authorization header value,
    while OAuth access tokens use the Bearer scheme.
    """

    API_KEY = "api_key"
    OAUTH = "oauth"

    def __str__(self) -> str:
        return self.value


class BranchOutcome(str, Enum):
    """How the target branch was reconciled with local and remote state."""

    REUSE_LOCAL = "reuse-local"
    CHECKOUT_REMOTE = "checkout-remote"
    CREATE_FROM_BASE = "create-from-base"
    CREATE_FROM_HEAD_FALLBACK = "create-from-head-fallback"

    def __str__(self) -> str:
        return self.value
