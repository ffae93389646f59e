"""Orchestration of the task-to-pull-request pipeline."""

from linear_pr.engine.branching import DEFAULT_STRATEGIES, create_branch_with_fallbacks
from linear_pr.engine.orchestrator import PullRequestOrchestrator

__all__ = ["DEFAULT_STRATEGIES", "PullRequestOrchestrator", "create_branch_with_fallbacks"]
