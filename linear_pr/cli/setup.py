"""Setup commands: ``linear-pr setup`` and ``linear-pr config-oauth``.

``setup`` connects Linear first, then GitHub. Each token is verified
against its service before it is stored, so a stored token is always one
that worked at least once.

Example:
    Non-interactive setup for scripted environments::

        $ linear-pr setup --linear-api-key lin_api_... --github-token ghp_...
"""

import asyncio
import sys

import click
import structlog

from linear_pr.auth.oauth import REDIRECT_URI, LinearOAuthFlow
from linear_pr.config.settings import DEFAULT_BASE_BRANCH, REPO_PATH_PATTERN
from linear_pr.config.store import ConfigStore
from linear_pr.enums import AuthMode
from linear_pr.exceptions import AuthenticationError, ConfigurationError, LinearPrError
from linear_pr.git.discovery import GitDiscovery
from linear_pr.providers.github_rest import GitHubRestProvider
from linear_pr.providers.linear_graphql import LinearGraphQLProvider

log = structlog.get_logger(__name__)

LINEAR_API_KEY_HELP = """To get your Personal API key:
1. Go to Linear -> your avatar/profile -> Personal Settings
2. Select "API" from the menu
3. Under "Personal API keys", create a new key
4. Copy the generated key (you'll only see it once)
"""

GITHUB_TOKEN_HELP = """To create a GitHub personal access token:
1. Go to https://github.com/settings/tokens
2. Click "Generate new token" (classic)
3. Select at least the "repo" scope
4. Create and copy your token
"""

OAUTH_APP_HELP = f"""You need to create an OAuth application in Linear:
1. Go to your workspace settings
2. Select "API" from the menu
3. Create a new OAuth application
4. Set the redirect URL to: {REDIRECT_URI}
"""


@click.command(name="setup")
@click.option("--linear-api-key", help="Linear personal API key (skips the Linear prompts)")
@click.option("--github-token", help="GitHub personal access token (skips the token prompt)")
@click.pass_context
def setup_command(ctx: click.Context, linear_api_key: str | None, github_token: str | None) -> None:
    """Configure Linear and GitHub credentials."""
    store: ConfigStore = ctx.obj["store"]
    interactive = not (linear_api_key or github_token)

    try:
        asyncio.run(_run_setup(store, linear_api_key, github_token, interactive))
    except click.Abort:
        click.echo("\nCancelled")
        return
    except LinearPrError as e:
        click.echo(click.style(f"Error during setup: {e.message}", fg="red"), err=True)
        log.debug("setup_error", exc_info=True)
        sys.exit(1)

    click.echo(click.style("Setup complete!", fg="green"))


async def _run_setup(
    store: ConfigStore,
    linear_api_key: str | None,
    github_token: str | None,
    interactive: bool,
) -> None:
    await _setup_linear(store, linear_api_key)
    await _setup_github(store, github_token, interactive)


async def _setup_linear(store: ConfigStore, api_key: str | None) -> None:
    click.echo(click.style("Setting up Linear integration", fg="blue"))

    if api_key:
        await _verify_and_store_linear(store, api_key, AuthMode.API_KEY)
        return

    method = click.prompt(
        "Choose Linear authentication method",
        type=click.Choice(["api-key", "oauth"]),
        default="api-key",
    )

    if method == "api-key":
        click.echo(click.style(LINEAR_API_KEY_HELP, fg="yellow"))
        api_key = click.prompt("Enter your Linear Personal API key", hide_input=True)
        await _verify_and_store_linear(store, api_key, AuthMode.API_KEY)
        return

    client_id, client_secret = store.load().require_oauth_client()
    click.echo(click.style("You will be redirected to Linear to authorize this application.", fg="yellow"))
    token = await LinearOAuthFlow(client_id=client_id, client_secret=client_secret).run()
    await _verify_and_store_linear(store, token, AuthMode.OAUTH)


async def _verify_and_store_linear(store: ConfigStore, token: str, auth_mode: AuthMode) -> None:
    token = token.strip()
    try:
        viewer = await LinearGraphQLProvider(token=token, auth_mode=auth_mode).get_viewer()
    except LinearPrError as e:
        raise AuthenticationError(f"Failed to connect to Linear: {e.message}") from e

    store.update(linear_access_token=token, linear_auth_mode=auth_mode)
    log.info("linear_configured", auth_mode=str(auth_mode), viewer=viewer.name)
    click.echo(click.style(f"Connected to Linear as {viewer.name}", fg="green"))


async def _setup_github(store: ConfigStore, token: str | None, interactive: bool) -> None:
    click.echo(click.style("Setting up GitHub integration", fg="blue"))

    if not token:
        click.echo(click.style(GITHUB_TOKEN_HELP, fg="yellow"))
        token = click.prompt("Enter your GitHub personal access token", hide_input=True)
    token = token.strip()

    provider = GitHubRestProvider(token=token)
    try:
        login = await provider.get_authenticated_user()
    except LinearPrError as e:
        raise AuthenticationError(f"Failed to connect to GitHub: {e.message}") from e
    finally:
        await provider.close()

    click.echo(click.style(f"Connected to GitHub as {login}", fg="green"))

    repo_path = _choose_repository(interactive)
    store.update(
        github_token=token,
        github_username=login,
        github_repo=repo_path,
        default_branch=DEFAULT_BASE_BRANCH,
    )
    log.info("github_configured", login=login, repo=repo_path)
    click.echo(click.style(f"Default GitHub repository set to {repo_path}", fg="green"))
    click.echo(click.style(f"Default base branch set to {DEFAULT_BASE_BRANCH}", fg="green"))


def _choose_repository(interactive: bool) -> str:
    """Offer the GitHub repository behind ``origin``, else ask for one.

    Without prompts, a detected repository is required.
    """
    try:
        detected = GitDiscovery().detect_github_repository("origin")
    except (LinearPrError, ValueError) as e:
        log.debug("repository_detection_failed", error=str(e))
        detected = None

    if not interactive:
        if detected:
            return detected
        raise ConfigurationError(
            "Could not detect a GitHub repository from the origin remote. "
            "Run `linear-pr setup` from a GitHub clone, or without flags to enter one."
        )

    if detected:
        if click.confirm(f'Use "{detected}" as the default GitHub repository?', default=True):
            return detected

    return _prompt_repository()


def _prompt_repository() -> str:
    while True:
        value = click.prompt("Enter your GitHub repository (owner/repo)").strip()
        if REPO_PATH_PATTERN.match(value):
            return value
        click.echo("Please enter a valid repository path (owner/repo)")


@click.command(name="config-oauth")
@click.option("--client-id", help="Linear OAuth application client id")
@click.option("--client-secret", help="Linear OAuth application client secret")
@click.pass_context
def config_oauth_command(ctx: click.Context, client_id: str | None, client_secret: str | None) -> None:
    """Configure Linear OAuth application credentials."""
    store: ConfigStore = ctx.obj["store"]

    click.echo(click.style("Setting up Linear OAuth credentials", fg="blue"))
    click.echo(click.style(OAUTH_APP_HELP, fg="yellow"))

    try:
        if not client_id:
            client_id = click.prompt("Enter your OAuth Client ID")
        if not client_secret:
            client_secret = click.prompt("Enter your OAuth Client Secret", hide_input=True)
        store.update(
            linear_oauth_client_id=client_id.strip(),
            linear_oauth_client_secret=client_secret.strip(),
        )
    except click.Abort:
        click.echo("\nCancelled")
        return
    except LinearPrError as e:
        click.echo(click.style(f"Error saving OAuth credentials: {e.message}", fg="red"), err=True)
        sys.exit(1)

    click.echo(click.style("Linear OAuth credentials configured!", fg="green"))
    click.echo(click.style("Now run `linear-pr setup` to complete authentication.", fg="yellow"))
