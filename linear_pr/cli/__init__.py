"""CLI commands for linear-pr.

Key Commands:
    setup (linear_pr.cli.setup):
        Connects Linear (API key or OAuth) and GitHub, verifying each token
        and detecting the repository from the ``origin`` remote.

    config-oauth (linear_pr.cli.setup):
        Stores the Linear OAuth application credentials used by ``setup``.

    create (linear_pr.cli.create):
        Creates a draft pull request from a Linear task ID or branch name.

Usage Examples::

    $ linear-pr setup
    $ linear-pr create ENG-123 --type fix --module billing
"""

from linear_pr.cli.create import create_command
from linear_pr.cli.setup import config_oauth_command, setup_command

__all__ = ["config_oauth_command", "create_command", "setup_command"]
