"""Tests for linear_pr/engine/branching.py - branch creation strategies."""

import pytest

from linear_pr.engine.branching import (
    CurrentHeadStrategy,
    LocalBaseStrategy,
    RemoteBaseStrategy,
    UpdatedBaseStrategy,
    create_branch_with_fallbacks,
)
from linear_pr.enums import BranchOutcome
from linear_pr.exceptions import LinearPrError

BRANCH = "feature/eng-7-add-login"


class TestStrategies:
    """Tests for the individual strategies."""

    def test_updated_base_refreshes_existing_local_base(self, make_vcs):
        vcs = make_vcs()

        assert UpdatedBaseStrategy(vcs).create(BRANCH, "development") is True
        assert vcs.calls[-3:] == [
            ("branch_exists_local", "development"),
            ("update_local_branch", "development"),
            ("create_branch", BRANCH, "origin/development"),
        ]

    def test_updated_base_creates_missing_local_base(self, make_vcs):
        vcs = make_vcs(local=set())

        assert UpdatedBaseStrategy(vcs).create(BRANCH, "development") is True
        assert ("track_branch", "development", "origin/development") in vcs.calls

    def test_failure_returns_false_and_keeps_error(self, make_vcs):
        vcs = make_vcs(fail_on={("fetch",)})
        strategy = UpdatedBaseStrategy(vcs)

        assert strategy.create(BRANCH, "development") is False
        assert strategy.last_error is not None
        assert vcs.called("create_branch") == []

    def test_remote_base(self, make_vcs):
        vcs = make_vcs()

        assert RemoteBaseStrategy(vcs).create(BRANCH, "main") is True
        assert vcs.calls == [("create_branch", BRANCH, "origin/main")]

    def test_local_base(self, make_vcs):
        vcs = make_vcs()

        assert LocalBaseStrategy(vcs).create(BRANCH, "main") is True
        assert vcs.calls == [("create_branch", BRANCH, "main")]

    def test_current_head_outcome(self, make_vcs):
        vcs = make_vcs()
        strategy = CurrentHeadStrategy(vcs)

        assert strategy.create(BRANCH, "main") is True
        assert strategy.outcome == BranchOutcome.CREATE_FROM_HEAD_FALLBACK
        assert vcs.calls == [("create_branch", BRANCH, None)]


class TestCreateBranchWithFallbacks:
    """Tests for the ordered fallback chain."""

    def test_first_success_wins(self, make_vcs):
        vcs = make_vcs()

        assert create_branch_with_fallbacks(vcs, BRANCH, "development") == BranchOutcome.CREATE_FROM_BASE
        assert len(vcs.called("create_branch")) == 1

    def test_falls_through_to_remote_ref(self, make_vcs):
        vcs = make_vcs(fail_on={("update_local_branch",)})

        outcome = create_branch_with_fallbacks(vcs, BRANCH, "development")

        assert outcome == BranchOutcome.CREATE_FROM_BASE
        assert vcs.called("create_branch") == [("create_branch", BRANCH, "origin/development")]

    def test_falls_through_to_head(self, make_vcs):
        vcs = make_vcs(
            fail_on={
                ("fetch",),
                ("create_branch", BRANCH, "origin/development"),
                ("create_branch", BRANCH, "development"),
            }
        )

        outcome = create_branch_with_fallbacks(vcs, BRANCH, "development")

        assert outcome == BranchOutcome.CREATE_FROM_HEAD_FALLBACK
        assert vcs.called("create_branch")[-1] == ("create_branch", BRANCH, None)

    def test_all_fail_reports_last_error(self, make_vcs):
        vcs = make_vcs(fail_on={("fetch",), ("create_branch",)})

        with pytest.raises(LinearPrError, match="Failed to create branch: create_branch failed"):
            create_branch_with_fallbacks(vcs, BRANCH, "development")

    def test_custom_strategy_order(self, make_vcs):
        vcs = make_vcs()

        outcome = create_branch_with_fallbacks(vcs, BRANCH, "development", strategies=[CurrentHeadStrategy])

        assert outcome == BranchOutcome.CREATE_FROM_HEAD_FALLBACK
