"""Tests for linear_pr/providers/linear_graphql.py - Linear GraphQL gateway."""

import json

import httpx
import pytest

from linear_pr.enums import AuthMode
from linear_pr.exceptions import ExternalServiceError
from linear_pr.models.domain import Issue
from linear_pr.providers.linear_graphql import LINEAR_API_URL, LinearGraphQLProvider, authorization_header

ISSUE_NODE = {
    "id": "9b2f0c1e-issue-uuid",
    "identifier": "ENG-42",
    "title": "Round invoice totals",
    "description": None,
    "url": "https://linear.app/acme/issue/ENG-42",
    "project": {"name": "Billing"},
    "assignee": {"id": "user-1", "name": "Dana Lee"},
    "state": {"name": "In Progress"},
}


class Recorder:
    """MockTransport handler that records requests and replays responses."""

    def __init__(self, *responses: httpx.Response):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.pop(0)

    def body(self, index: int = 0) -> dict:
        return json.loads(self.requests[index].content)


def make_provider(recorder: Recorder, auth_mode: AuthMode = AuthMode.API_KEY) -> LinearGraphQLProvider:
    return LinearGraphQLProvider(
        token="lin_api_test",
        auth_mode=auth_mode,
        transport=httpx.MockTransport(recorder),
    )


class TestAuthorizationHeader:
    """Tests for header selection by auth mode."""

    def test_api_key_sent_raw(self):
        assert authorization_header("lin_api_abc", AuthMode.API_KEY) == "lin_api_abc"

    def test_oauth_uses_bearer(self):
        assert authorization_header("tok", "oauth") == "Bearer tok"

    @pytest.mark.asyncio
    async def test_request_carries_header(self):
        recorder = Recorder(httpx.Response(200, json={"data": {"viewer": {"id": "u", "name": "n"}}}))

        await make_provider(recorder, AuthMode.OAUTH).get_viewer()

        request = recorder.requests[0]
        assert str(request.url) == LINEAR_API_URL
        assert request.headers["Authorization"] == "Bearer lin_api_test"


class TestGetIssue:
    """Tests for issue lookup by identifier."""

    @pytest.mark.asyncio
    async def test_found(self):
        recorder = Recorder(httpx.Response(200, json={"data": {"issues": {"nodes": [ISSUE_NODE]}}}))

        issue = await make_provider(recorder).get_issue("ENG-42")

        assert issue == Issue(
            id="9b2f0c1e-issue-uuid",
            identifier="ENG-42",
            title="Round invoice totals",
            description="",
            url="https://linear.app/acme/issue/ENG-42",
            project_name="Billing",
            assignee_id="user-1",
            assignee_name="Dana Lee",
            state="In Progress",
        )
        assert recorder.body()["variables"] == {"teamKey": "ENG", "number": 42}

    @pytest.mark.asyncio
    async def test_not_found_returns_none(self):
        recorder = Recorder(httpx.Response(200, json={"data": {"issues": {"nodes": []}}}))

        assert await make_provider(recorder).get_issue("ENG-404") is None

    @pytest.mark.asyncio
    async def test_missing_optional_relations(self):
        node = {**ISSUE_NODE, "project": None, "assignee": None, "state": None}
        recorder = Recorder(httpx.Response(200, json={"data": {"issues": {"nodes": [node]}}}))

        issue = await make_provider(recorder).get_issue("ENG-42")

        assert issue.project_name is None
        assert issue.assignee_id is None

    @pytest.mark.asyncio
    async def test_http_error(self):
        recorder = Recorder(httpx.Response(401, text="unauthorized"))

        with pytest.raises(ExternalServiceError) as exc_info:
            await make_provider(recorder).get_issue("ENG-42")

        assert exc_info.value.status_code == 401
        assert exc_info.value.service == "linear"

    @pytest.mark.asyncio
    async def test_graphql_errors(self):
        recorder = Recorder(httpx.Response(200, json={"errors": [{"message": "Entity not found"}]}))

        with pytest.raises(ExternalServiceError, match="Entity not found"):
            await make_provider(recorder).get_issue("ENG-42")

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        provider = LinearGraphQLProvider(token="t", transport=httpx.MockTransport(handler))

        with pytest.raises(ExternalServiceError, match="connection refused"):
            await provider.get_issue("ENG-42")


class TestViewerAndAssigned:
    """Tests for viewer and assigned issue queries."""

    @pytest.mark.asyncio
    async def test_viewer(self):
        recorder = Recorder(
            httpx.Response(200, json={"data": {"viewer": {"id": "user-1", "name": "Dana Lee", "email": "d@x.io"}}})
        )

        viewer = await make_provider(recorder).get_viewer()

        assert viewer.id == "user-1"
        assert viewer.email == "d@x.io"

    @pytest.mark.asyncio
    async def test_assigned_issues(self):
        second = {**ISSUE_NODE, "id": "other", "identifier": "ENG-7", "title": "Other"}
        recorder = Recorder(
            httpx.Response(200, json={"data": {"viewer": {"assignedIssues": {"nodes": [ISSUE_NODE, second]}}}})
        )

        issues = await make_provider(recorder).get_assigned_issues()

        assert [issue.identifier for issue in issues] == ["ENG-42", "ENG-7"]


class TestAddComment:
    """Tests for the comment mutation."""

    @pytest.mark.asyncio
    async def test_posts_comment_by_issue_uuid(self, sample_issue):
        recorder = Recorder(httpx.Response(200, json={"data": {"commentCreate": {"success": True}}}))

        await make_provider(recorder).add_comment(sample_issue, "Created PR: https://github.com/acme/web/pull/7")

        body = recorder.body()
        assert "commentCreate" in body["query"]
        assert body["variables"] == {
            "issueId": "9b2f0c1e-issue-uuid",
            "body": "Created PR: https://github.com/acme/web/pull/7",
        }

    @pytest.mark.asyncio
    async def test_unconfirmed_comment_raises(self, sample_issue):
        recorder = Recorder(httpx.Response(200, json={"data": {"commentCreate": {"success": False}}}))

        with pytest.raises(ExternalServiceError):
            await make_provider(recorder).add_comment(sample_issue, "x")
