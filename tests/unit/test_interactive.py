"""Tests for linear_pr/utils/interactive.py - issue picker and prompts."""

from unittest.mock import patch

import pytest

from linear_pr.models.domain import Issue
from linear_pr.utils.interactive import (
    ClickPrompter,
    filter_issues,
    prompt_for_reference,
    render_issue_table,
    select_issue,
    sort_issues,
)


def make_issue(identifier, title, state="Todo", project=None):
    return Issue(
        id=f"uuid-{identifier}",
        identifier=identifier,
        title=title,
        description="",
        url=f"https://linear.app/acme/issue/{identifier}",
        project_name=project,
        state=state,
    )


@pytest.fixture
def issues():
    return [
        make_issue("ENG-10", "Fix login redirect", state="Todo", project="Auth"),
        make_issue("ENG-9", "Round invoice totals", state="In Progress", project="Billing"),
        make_issue("API-2", "Paginate search results", state="Backlog"),
    ]


class TestFilterAndSort:
    def test_filter_matches_title_case_insensitive(self, issues):
        assert [i.identifier for i in filter_issues(issues, "INVOICE")] == ["ENG-9"]

    def test_filter_matches_project(self, issues):
        assert [i.identifier for i in filter_issues(issues, "auth")] == ["ENG-10"]

    def test_empty_filter_keeps_all(self, issues):
        assert filter_issues(issues, "") == issues

    def test_sort_by_id_is_natural(self, issues):
        assert [i.identifier for i in sort_issues(issues)] == ["API-2", "ENG-9", "ENG-10"]

    def test_sort_by_state(self, issues):
        assert [i.identifier for i in sort_issues(issues, "state")] == ["API-2", "ENG-9", "ENG-10"]

    def test_sort_by_project_missing_first(self, issues):
        assert [i.identifier for i in sort_issues(issues, "project")] == ["API-2", "ENG-10", "ENG-9"]


class TestRenderIssueTable:
    def test_rows_numbered(self, issues):
        table = render_issue_table(issues)
        lines = table.splitlines()

        assert lines[0].split() == ["#", "ID", "State", "Project", "Title"]
        assert lines[2].startswith("1")
        assert "ENG-10" in lines[2]
        assert "-" in lines[4].split()

    def test_long_titles_truncated(self):
        table = render_issue_table([make_issue("ENG-1", "x" * 80)])

        assert ("x" * 57 + "...") in table
        assert ("x" * 58) not in table


class TestSelectIssue:
    """Tests for the interactive picker loop."""

    def test_select_by_number(self, issues, make_prompter):
        prompter = make_prompter(answers=["2"])

        chosen = select_issue(issues, prompter)

        # Rows are shown sorted by id: API-2, ENG-9, ENG-10
        assert chosen.identifier == "ENG-9"

    @pytest.mark.parametrize("answer", ["q", "quit", "EXIT"])
    def test_quit(self, issues, make_prompter, answer):
        assert select_issue(issues, make_prompter(answers=[answer])) is None

    def test_search_then_select(self, issues, make_prompter):
        prompter = make_prompter(answers=["/search login", "1"])

        assert select_issue(issues, prompter).identifier == "ENG-10"

    def test_empty_search_clears_filter(self, issues, make_prompter, capsys):
        prompter = make_prompter(answers=["/search nothing-matches", "/search", "3"])

        chosen = select_issue(issues, prompter)

        assert chosen.identifier == "ENG-10"
        assert "No issues match 'nothing-matches'." in capsys.readouterr().out

    def test_sort_then_select(self, issues, make_prompter):
        prompter = make_prompter(answers=["/sort project", "3"])

        assert select_issue(issues, prompter).identifier == "ENG-9"

    def test_unknown_sort_field(self, issues, make_prompter, capsys):
        prompter = make_prompter(answers=["/sort priority", "1"])

        assert select_issue(issues, prompter).identifier == "API-2"
        assert "Unknown sort field 'priority'" in capsys.readouterr().out

    def test_invalid_selection_reprompts(self, issues, make_prompter, capsys):
        prompter = make_prompter(answers=["9", "abc", "1"])

        assert select_issue(issues, prompter).identifier == "API-2"
        out = capsys.readouterr().out
        assert "Invalid selection: 9" in out
        assert "Invalid selection: abc" in out


class TestPromptForReference:
    def test_reprompts_until_valid(self, make_prompter, capsys):
        prompter = make_prompter(answers=["ENG42", "feature/no-id", " eng-42 "])

        assert prompt_for_reference(prompter) == "eng-42"
        assert len(prompter.questions) == 3
        assert "Invalid task ID format" in capsys.readouterr().out

    def test_accepts_branch_name(self, make_prompter):
        prompter = make_prompter(answers=["feature/eng-42-round-invoice-totals"])

        assert prompt_for_reference(prompter) == "feature/eng-42-round-invoice-totals"


class TestClickPrompter:
    @patch("linear_pr.utils.interactive.click.prompt", return_value="billing")
    def test_ask(self, mock_prompt):
        assert ClickPrompter().ask("Module", default="core") == "billing"
        mock_prompt.assert_called_once_with("Module", default="core", type=str)

    @patch("linear_pr.utils.interactive.click.confirm", return_value=True)
    def test_confirm(self, mock_confirm):
        assert ClickPrompter().confirm("Use it?") is True
        mock_confirm.assert_called_once_with("Use it?", default=False)
