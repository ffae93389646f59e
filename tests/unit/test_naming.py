"""Tests for linear_pr/naming.py - identifier, branch and title rules."""

import pytest

from linear_pr.enums import PullRequestType
from linear_pr.exceptions import LinearPrError
from linear_pr.models.domain import Issue
from linear_pr.naming import (
    compose_body,
    compose_title,
    extract_task_id,
    format_scope,
    is_canonical_task_id,
    is_valid_scope,
    looks_like_branch,
    parse_task_reference,
    sanitize_title,
    sort_key_for_task_id,
    synthesize_branch_name,
)


class TestTaskIds:
    """Tests for identifier validation and extraction."""

    @pytest.mark.parametrize("value", ["ENG-123", "eng-1", "Team-0042"])
    def test_canonical(self, value):
        assert is_canonical_task_id(value)

    @pytest.mark.parametrize("value", ["ENG123", "ENG-", "-123", "ENG-12a", "EN G-1", "feature/ENG-1"])
    def test_not_canonical(self, value):
        assert not is_canonical_task_id(value)

    def test_extract_from_feature_branch(self):
        assert extract_task_id("feature/team-1234-cool-feature") == "TEAM-1234"

    def test_extract_ignores_prefix_segments(self):
        """Should only search after the last slash."""
        assert extract_task_id("abc-1/bugfix/xyz-99-thing") == "XYZ-99"

    def test_extract_without_slash(self):
        assert extract_task_id("eng-5-quick-fix") == "ENG-5"

    def test_extract_none(self):
        assert extract_task_id("feature/no-task-here") is None

    def test_looks_like_branch(self):
        assert looks_like_branch("feature/x")
        assert looks_like_branch("eng-5-quick-fix")
        assert not looks_like_branch("ENG-5")
        assert not looks_like_branch("ENG5")


class TestParseTaskReference:
    """Tests for turning raw input into a TaskReference."""

    def test_bare_id_uppercased(self):
        ref = parse_task_reference("eng-42")

        assert ref.task_id == "ENG-42"
        assert ref.raw == "eng-42"
        assert ref.branch_like is False

    def test_branch_input(self):
        ref = parse_task_reference("bugfix/abc-123-fix-something")

        assert ref.task_id == "ABC-123"
        assert ref.branch_like is True

    def test_branch_without_id_rejected(self):
        with pytest.raises(LinearPrError, match="Could not extract a valid Linear task ID from: feature/no-task-here"):
            parse_task_reference("feature/no-task-here")

    def test_invalid_id_rejected(self):
        with pytest.raises(LinearPrError, match="Invalid task ID format"):
            parse_task_reference("ENG42")

    def test_empty_rejected(self):
        with pytest.raises(LinearPrError, match="required"):
            parse_task_reference("   ")


class TestBranchNames:
    """Tests for branch name synthesis."""

    def test_synthesize(self):
        assert synthesize_branch_name("TEAM-123", "Add Login Flow") == "feature/team-123-add-login-flow"

    def test_punctuation_dropped_and_whitespace_collapsed(self):
        assert synthesize_branch_name("ENG-9", "  Fix: the   API (v2)! ") == "feature/eng-9-fix-the-api-v2"

    def test_empty_title(self):
        assert synthesize_branch_name("ENG-9", "!!!") == "feature/eng-9"

    def test_sanitize_idempotent(self):
        once = sanitize_title("Add Login Flow")
        assert sanitize_title(once) == once

    def test_synthesized_name_round_trips_to_id(self):
        name = synthesize_branch_name("ENG-42", "Round invoice totals")
        assert extract_task_id(name) == "ENG-42"


class TestScopes:
    """Tests for scope formatting and validation."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("My Module!!", "my-module"),
            ("billing", "billing"),
            ("--Core__API--", "core-api"),
            ("Mobile App (iOS)", "mobile-app-ios"),
        ],
    )
    def test_format_scope(self, raw, expected):
        assert format_scope(raw) == expected

    def test_format_scope_idempotent(self):
        assert format_scope(format_scope("My Module!!")) == "my-module"

    def test_valid_scopes(self):
        assert is_valid_scope("billing")
        assert is_valid_scope("api-v2")

    @pytest.mark.parametrize("value", ["My Module", "-billing", "api--v2", "", "billing-"])
    def test_invalid_scopes(self, value):
        assert not is_valid_scope(value)


class TestTitleAndBody:
    """Tests for PR title and body composition."""

    def test_compose_title(self):
        assert compose_title("feat", "Auth", "eng-123", "Add OAuth") == "feat(auth): [ENG-123] Add OAuth"

    def test_compose_title_with_enum(self):
        title = compose_title(PullRequestType.FIX, "billing", "ENG-42", "Round invoice totals")

        assert title == "fix(billing): [ENG-42] Round invoice totals"

    def test_description_not_escaped(self):
        assert compose_title("docs", "readme", "DOC-1", "Use `code` & [links]").endswith("Use `code` & [links]")

    def test_body_links_issue(self, sample_issue):
        body = compose_body(sample_issue)

        assert body.startswith("This PR addresses Linear task [ENG-42](https://linear.app/acme/issue/ENG-42/")
        assert body.endswith("Totals are off by a cent on some invoices.")

    def test_body_without_description(self):
        issue = Issue(id="x", identifier="ENG-1", title="t", description="", url="https://linear.app/i/ENG-1")

        assert compose_body(issue) == "This PR addresses Linear task [ENG-1](https://linear.app/i/ENG-1)"


def test_sort_key_is_natural():
    ids = ["ENG-10", "ENG-9", "API-2"]

    assert sorted(ids, key=sort_key_for_task_id) == ["API-2", "ENG-9", "ENG-10"]
