"""Interactive authentication against Linear."""

from linear_pr.auth.oauth import (
    OAUTH_PORT,
    REDIRECT_URI,
    LinearOAuthFlow,
    build_authorize_url,
    create_callback_app,
    exchange_code,
)

__all__ = [
    "OAUTH_PORT",
    "REDIRECT_URI",
    "LinearOAuthFlow",
    "build_authorize_url",
    "create_callback_app",
    "exchange_code",
]
