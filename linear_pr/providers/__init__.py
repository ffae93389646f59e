"""Gateways to the issue tracker and the source host.

Key Components:
    - IssueTracker: Abstract base for issue tracker gateways
    - SourceHost: Abstract base for source host gateways
    - LinearGraphQLProvider: Linear GraphQL API over httpx
    - GitHubRestProvider: GitHub REST API via PyGithub

Example:
    >>> from linear_pr.providers import create_issue_tracker, create_source_host
    >>> tracker = create_issue_tracker(config)
    >>> host = create_source_host(config)
"""

from linear_pr.providers.base import IssueTracker, SourceHost
from linear_pr.providers.factory import create_issue_tracker, create_source_host
from linear_pr.providers.github_rest import GitHubRestProvider
from linear_pr.providers.linear_graphql import LinearGraphQLProvider

__all__ = [
    "GitHubRestProvider",
    "IssueTracker",
    "LinearGraphQLProvider",
    "SourceHost",
    "create_issue_tracker",
    "create_source_host",
]
