"""linear-pr: create GitHub draft pull requests from Linear issues."""

__version__ = "1.0.0"
