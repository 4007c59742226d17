"""Account linking authorize page.

The account_link button sends users here. A real deployment would log
the user in before redirecting; this page just offers the redirect with
a fixed authorization code.
"""

import html
import logging

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from src.constants import DEMO_AUTHORIZATION_CODE
from src.logging_config import redact_tokens

logger = logging.getLogger(__name__)
router = APIRouter()


def build_success_redirect(redirect_uri: str, authorization_code: str) -> str:
    """The URI Messenger expects after a successful login."""
    return f"{redirect_uri}&authorization_code={authorization_code}"


@router.get("", response_class=HTMLResponse)
async def authorize(request: Request):
    """Render the account linking page."""
    account_linking_token = request.query_params.get("account_linking_token", "")
    redirect_uri = request.query_params.get("redirect_uri", "")

    redirect_success = build_success_redirect(redirect_uri, DEMO_AUTHORIZATION_CODE)
    logger.info(
        "Rendering authorize page params=%s",
        redact_tokens(dict(request.query_params)),
    )

    return HTMLResponse(
        f"""<!DOCTYPE html>
<html>
  <head><title>Link your account</title></head>
  <body>
    <h1>Link your account</h1>
    <p>Account linking token: <code>{html.escape(account_linking_token)}</code></p>
    <p>Redirect URI: <code>{html.escape(redirect_uri)}</code></p>
    <p><a href="{html.escape(redirect_success, quote=True)}">Complete account link</a></p>
    <p><a href="{html.escape(redirect_uri, quote=True)}">Cancel</a></p>
  </body>
</html>
"""
    )
