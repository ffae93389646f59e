"""Factories that build the gateways from stored configuration."""

import structlog

from linear_pr.config.settings import StoredConfig
from linear_pr.enums import AuthMode
from linear_pr.providers.base import IssueTracker, SourceHost
from linear_pr.providers.github_rest import GitHubRestProvider
from linear_pr.providers.linear_graphql import LinearGraphQLProvider

log = structlog.get_logger(__name__)


def create_issue_tracker(config: StoredConfig) -> IssueTracker:
    """Create the Linear gateway.

    Raises:
        ConfigurationError: If Linear has not been set up

    Example:
        >>> tracker = create_issue_tracker(store.load())
        >>> issue = await tracker.get_issue("ENG-42")
    """
    token = config.require_linear_token()
    auth_mode = AuthMode.API_KEY if config.is_linear_api_key else AuthMode.OAUTH
    log.debug("creating_linear_provider", auth_mode=str(auth_mode))
    return LinearGraphQLProvider(token=token, auth_mode=auth_mode)


def create_source_host(config: StoredConfig) -> SourceHost:
    """Create the GitHub gateway for the configured repository.

    Raises:
        ConfigurationError: If the token or repository is missing
    """
    token = config.require_github_token()
    log.debug("creating_github_provider", repo=config.require_github_repo())
    return GitHubRestProvider(token=token, owner=config.repo_owner, repo=config.repo_name)
