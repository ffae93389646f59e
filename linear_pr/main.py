"""CLI entry point for linear-pr."""

import click

from linear_pr import __version__
from linear_pr.cli import config_oauth_command, create_command, setup_command
from linear_pr.config.store import YamlConfigStore
from linear_pr.utils.logging_config import DEFAULT_LOG_LEVEL, configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="linear-pr")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=DEFAULT_LOG_LEVEL,
    help="Logging level",
)
@click.option("--json-logs", is_flag=True, default=False, help="Emit logs as JSON lines")
@click.pass_context
def cli(ctx: click.Context, log_level: str, json_logs: bool) -> None:
    """linear-pr: Create GitHub PRs from Linear tasks."""
    configure_logging(log_level, json_output=json_logs)

    # Tests inject their own store through CliRunner.invoke(obj=...)
    ctx.ensure_object(dict)
    ctx.obj.setdefault("store", None)
    ctx.obj["json_logs"] = json_logs
    if ctx.obj["store"] is None:
        ctx.obj["store"] = YamlConfigStore.default()


cli.add_command(setup_command)
cli.add_command(config_oauth_command)
cli.add_command(create_command)


if __name__ == "__main__":
    cli()
