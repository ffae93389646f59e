"""Linear issue tracker implementation using the GraphQL API over httpx."""

from typing import Any

import httpx
import structlog

from linear_pr.enums import AuthMode
from linear_pr.exceptions import ExternalServiceError
from linear_pr.models.domain import Issue, Viewer
from linear_pr.providers.base import IssueTracker

log = structlog.get_logger(__name__)

LINEAR_API_URL = "https://api.linear.app/graphql"

ISSUE_FIELDS = """
    id
    identifier
    title
    description
    url
    project { name }
    assignee { id name }
    state { name }
"""

ISSUE_QUERY = f"""
query IssueByIdentifier($teamKey: String!, $number: Float!) {{
  issues(filter: {{ team: {{ key: {{ eq: $teamKey }} }}, number: {{ eq: $number }} }}, first: 1) {{
    nodes {{ {ISSUE_FIELDS} }}
  }}
}}
"""

ASSIGNED_ISSUES_QUERY = f"""
query AssignedIssues($first: Int!) {{
  viewer {{
    assignedIssues(
      first: $first
      filter: {{ state: {{ type: {{ nin: ["completed", "canceled"] }} }} }}
    ) {{
      nodes {{ {ISSUE_FIELDS} }}
    }}
  }}
}}
"""

VIEWER_QUERY = """
query Viewer {
  viewer { id name email }
}
"""

COMMENT_MUTATION = """
mutation CreateComment($issueId: String!, $body: String!) {
  commentCreate(input: { issueId: $issueId, body: $body }) {
    success
  }
}
"""


def authorization_header(token: str, auth_mode: AuthMode | str) -> str:
    """Linear takes personal API keys bare and OAuth tokens as Bearer."""
    if AuthMode(auth_mode) == AuthMode.OAUTH:
        return f"Bearer {token}"
    return token


class LinearGraphQLProvider(IssueTracker):
    """Linear implementation using direct GraphQL calls."""

    def __init__(
        self,
        token: str,
        auth_mode: AuthMode | str = AuthMode.API_KEY,
        api_url: str = LINEAR_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ):
        """Initialize Linear provider.

        Args:
            token: Personal API key or OAuth access token
            auth_mode: How the token was obtained; selects the header format
            api_url: GraphQL endpoint
            transport: Optional httpx transport, used by tests
            timeout: Per-request timeout in seconds
        """
        self.token = token.strip() if token else token
        self.auth_mode = AuthMode(auth_mode)
        self.api_url = api_url
        self._transport = transport
        self._timeout = timeout

    async def _execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """POST a GraphQL document and return its ``data`` payload.

        Raises:
            ExternalServiceError: On transport errors, non-2xx responses or
                GraphQL errors in the response body
        """
        headers = {
            "Authorization": authorization_header(self.token, self.auth_mode),
            "Content-Type": "application/json",
        }
        payload: dict[str, Any] = {"query": query, "variables": variables or {}}

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as e:
            log.error("linear_request_failed", status=e.response.status_code)
            raise ExternalServiceError(
                f"Linear API returned HTTP {e.response.status_code}",
                service="linear",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            log.error("linear_request_error", error=str(e))
            raise ExternalServiceError(f"Linear API request failed: {e}", service="linear") from e

        errors = body.get("errors")
        if errors:
            messages = "; ".join(err.get("message", "unknown error") for err in errors)
            log.error("linear_graphql_errors", errors=messages)
            raise ExternalServiceError(f"Linear API error: {messages}", service="linear", details=errors)

        return body.get("data") or {}

    async def get_issue(self, task_id: str) -> Issue | None:
        log.info("get_issue", task_id=task_id)

        team_key, _, number = task_id.partition("-")
        if not team_key or not number.isdigit():
            raise ExternalServiceError(f"Invalid task ID format: {task_id}", service="linear")

        data = await self._execute(ISSUE_QUERY, {"teamKey": team_key.upper(), "number": int(number)})
        nodes = (data.get("issues") or {}).get("nodes") or []
        if not nodes:
            return None

        return self._parse_issue(nodes[0])

    async def get_assigned_issues(self, limit: int = 100) -> list[Issue]:
        log.info("get_assigned_issues", limit=limit)

        data = await self._execute(ASSIGNED_ISSUES_QUERY, {"first": limit})
        nodes = ((data.get("viewer") or {}).get("assignedIssues") or {}).get("nodes") or []
        return [self._parse_issue(node) for node in nodes]

    async def get_viewer(self) -> Viewer:
        data = await self._execute(VIEWER_QUERY)
        viewer = data.get("viewer")
        if not viewer:
            raise ExternalServiceError("Linear API returned no viewer", service="linear")

        return Viewer(id=viewer["id"], name=viewer["name"], email=viewer.get("email"))

    async def add_comment(self, issue: Issue, body: str) -> None:
        log.info("add_comment", issue=issue.identifier)

        data = await self._execute(COMMENT_MUTATION, {"issueId": issue.id, "body": body})
        if not (data.get("commentCreate") or {}).get("success"):
            raise ExternalServiceError(
                f"Linear did not confirm the comment on {issue.identifier}",
                service="linear",
            )

    def _parse_issue(self, data: dict[str, Any]) -> Issue:
        """Parse a GraphQL issue node into an Issue model."""
        project = data.get("project") or {}
        assignee = data.get("assignee") or {}
        state = data.get("state") or {}

        return Issue(
            id=data["id"],
            identifier=data["identifier"],
            title=data["title"],
            description=data.get("description") or "",
            url=data["url"],
            project_name=project.get("name"),
            assignee_id=assignee.get("id"),
            assignee_name=assignee.get("name"),
            state=state.get("name"),
        )
