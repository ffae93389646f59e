"""Linear OAuth2 authorization-code flow with a loopback callback.

The flow opens the browser on Linear's consent page and waits for Linear to
redirect back to ``http://localhost:45678/callback``. A small FastAPI app
served by uvicorn handles that single request, exchanges the code for an
access token and hands the result back to the waiting coroutine.

Example:
    >>> flow = LinearOAuthFlow(client_id="abc", client_secret="s3cret")
    >>> token = asyncio.run(flow.run())
"""

import asyncio
import secrets
import socket
import webbrowser
from collections.abc import Awaitable, Callable
from urllib.parse import urlencode

import click
import httpx
import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.responses import HTMLResponse

from linear_pr.exceptions import AuthenticationError

log = structlog.get_logger(__name__)

OAUTH_PORT = 45678
OAUTH_HOST = "127.0.0.1"
REDIRECT_URI = f"http://localhost:{OAUTH_PORT}/callback"
AUTHORIZE_URL = "https://linear.app/oauth/authorize"
TOKEN_URL = "https://api.linear.app/oauth/token"  # nosec B105
OAUTH_SCOPE = "read,write"
OAUTH_TIMEOUT_SECONDS = 300

SUCCESS_PAGE = """<html><body>
<h1>Authentication successful</h1>
<p>You can close this window and return to the terminal.</p>
</body></html>"""

FAILURE_PAGE = """<html><body>
<h1>Authentication failed</h1>
<p>{message}</p>
</body></html>"""

CodeExchange = Callable[[str], Awaitable[str]]
CompletionSink = Callable[[str | None, Exception | None], None]


def build_authorize_url(client_id: str, state: str, redirect_uri: str = REDIRECT_URI) -> str:
    """Build the Linear consent page URL."""
    params = {
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "response_type": "code",
        "state": state,
        "scope": OAUTH_SCOPE,
    }
    return f"{AUTHORIZE_URL}?{urlencode(params)}"


async def exchange_code(
    code: str,
    client_id: str,
    client_secret: str,
    redirect_uri: str = REDIRECT_URI,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Exchange an authorization code for an access token.

    Args:
        code: Code received on the callback
        client_id: OAuth application id
        client_secret: OAuth application secret
        redirect_uri: Must match the URI used for the authorization request
        transport: Optional httpx transport, used by tests

    Returns:
        The access token

    Raises:
        AuthenticationError: If Linear rejects the exchange or the request fails
    """
    data = {
        "grant_type": "authorization_code",
        "code": code,
        "redirect_uri": redirect_uri,
        "client_id": client_id,
        "client_secret": client_secret,
    }

    try:
        async with httpx.AsyncClient(transport=transport, timeout=30.0) as client:
            response = await client.post(TOKEN_URL, data=data)
            response.raise_for_status()
            payload = response.json()
    except httpx.HTTPStatusError as e:
        raise AuthenticationError(
            f"Token exchange failed: HTTP {e.response.status_code} {e.response.text}"
        ) from e
    except (httpx.HTTPError, ValueError) as e:
        raise AuthenticationError(f"Token exchange failed: {e}") from e

    if not isinstance(payload, dict):
        raise AuthenticationError("Token exchange returned an unexpected response")

    token = payload.get("access_token")
    if not token:
        raise AuthenticationError("Token exchange returned no access token")
    return token


def create_callback_app(expected_state: str, exchange: CodeExchange, on_complete: CompletionSink) -> FastAPI:
    """Build the app that receives the OAuth redirect.

    Args:
        expected_state: Anti-forgery value sent with the authorization request
        exchange: Coroutine turning a code into an access token
        on_complete: Called once with ``(token, None)`` or ``(None, error)``

    Returns:
        FastAPI application with a single ``GET /callback`` route
    """
    app = FastAPI(title="linear-pr OAuth callback", docs_url=None, redoc_url=None, openapi_url=None)

    def fail(message: str, status_code: int) -> HTMLResponse:
        log.warning("oauth_callback_rejected", reason=message, status=status_code)
        on_complete(None, AuthenticationError(message))
        return HTMLResponse(FAILURE_PAGE.format(message=message), status_code=status_code)

    @app.get("/callback", response_class=HTMLResponse)
    async def callback(code: str | None = None, state: str | None = None, error: str | None = None):
        if state is None or not secrets.compare_digest(state, expected_state):
            return fail("Invalid state parameter", 400)

        if error:
            return fail(f"Authorization error: {error}", 400)

        if not code:
            return fail("No authorization code returned", 400)

        try:
            token = await exchange(code)
        except AuthenticationError as e:
            log.error("oauth_exchange_failed", error=e.message)
            on_complete(None, e)
            return HTMLResponse(FAILURE_PAGE.format(message="Could not complete sign-in."), status_code=500)
        except Exception as e:
            log.error("oauth_exchange_failed", error=str(e), exc_info=True)
            on_complete(None, AuthenticationError(f"Token exchange failed: {e}"))
            return HTMLResponse(FAILURE_PAGE.format(message="Could not complete sign-in."), status_code=500)

        log.info("oauth_callback_completed")
        on_complete(token, None)
        return HTMLResponse(SUCCESS_PAGE, status_code=200)

    return app


class LinearOAuthFlow:
    """Runs the loopback authorization-code flow once."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        port: int = OAUTH_PORT,
        timeout: float = OAUTH_TIMEOUT_SECONDS,
        open_browser: Callable[[str], object] = webbrowser.open,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.port = port
        self.timeout = timeout
        self.open_browser = open_browser
        self._transport = transport

    async def _exchange(self, code: str) -> str:
        return await exchange_code(code, self.client_id, self.client_secret, transport=self._transport)

    def _bind(self) -> socket.socket:
        """Bind the callback port up front so a busy port is a clean error."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((OAUTH_HOST, self.port))
        except OSError as e:
            sock.close()
            raise AuthenticationError(f"Cannot listen on port {self.port} for the OAuth callback: {e}") from e
        return sock

    async def run(self) -> str:
        """Open the consent page and wait for the callback.

        Returns:
            The Linear access token

        Raises:
            AuthenticationError: On a rejected callback, failed exchange,
                busy port or timeout
        """
        state = secrets.token_urlsafe(32)
        result: asyncio.Future[str] = asyncio.get_running_loop().create_future()

        def on_complete(token: str | None, error: Exception | None) -> None:
            if result.done():
                return
            if error is not None:
                result.set_exception(error)
            else:
                result.set_result(token)

        app = create_callback_app(state, self._exchange, on_complete)
        sock = self._bind()
        server = uvicorn.Server(uvicorn.Config(app, log_level="warning", lifespan="off"))
        serve_task = asyncio.create_task(server.serve(sockets=[sock]))

        try:
            url = build_authorize_url(self.client_id, state)
            log.info("oauth_flow_started", port=self.port)
            click.echo("Opening your browser to authorize linear-pr...")
            click.echo(f"If it does not open, visit:\n{url}")
            self.open_browser(url)

            done, _ = await asyncio.wait(
                {result, serve_task},
                timeout=self.timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
            if result in done:
                return result.result()
            if serve_task in done:
                raise AuthenticationError("OAuth callback server stopped unexpectedly")

            minutes = int(self.timeout // 60)
            raise AuthenticationError(f"Authentication timed out after {minutes} minutes")
        finally:
            server.should_exit = True
            await asyncio.gather(serve_task, return_exceptions=True)
            sock.close()
            if not result.done():
                result.cancel()
            log.debug("oauth_listener_stopped")
