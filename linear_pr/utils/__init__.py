"""Utility modules for linear-pr."""
