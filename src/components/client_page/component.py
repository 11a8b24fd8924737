"""
Client page component.

Builds the HTML shell served to signed-in participants: session JSON, client
flags JSON, websocket address and a username/domain top bar. The collaborative
client itself is loaded by the script the shell references.
"""

from __future__ import annotations

import html
import json
import secrets
from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from src.domain.entities import Account

from .models import ClientPageInput, ClientPageOutput

# Session JSON keys understood by the client
SESSION_DOMAIN = "domain"
SESSION_ADDRESS = "address"
SESSION_ID_SEED = "id"

ID_SEED_LENGTH = 10
_WEB_SAFE_BASE64 = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"


def random_id_seed(length: int = ID_SEED_LENGTH) -> str:
    return "".join(secrets.choice(_WEB_SAFE_BASE64) for _ in range(length))


def build_session_json(domain: str, address: str | None, id_seed: str | None = None) -> dict[str, Any]:
    session: dict[str, Any] = {SESSION_DOMAIN: domain}
    if address is not None:
        session[SESSION_ADDRESS] = address
    session[SESSION_ID_SEED] = id_seed or random_id_seed()
    return session


def locale_redirect_url(
    url: str, query_params: Mapping[str, str], account: Account | None
) -> str | None:
    """
    URL to redirect to so the request carries the account's locale.

    Returns None when no redirect is needed: no account, no stored locale, or
    the request already names a locale.
    """
    if account is None or not account.locale:
        return None
    if "locale" in query_params:
        return None

    parts = urlsplit(url)
    query = parse_qsl(parts.query, keep_blank_values=True)
    query.append(("locale", account.locale))
    return urlunsplit(parts._replace(query=urlencode(query)))


def _script_json(value: Any) -> str:
    # Keep "</script>" sequences inside JSON from closing the tag.
    return json.dumps(value).replace("</", "<\\/")


def run_render(inp: ClientPageInput) -> ClientPageOutput:
    session_json = build_session_json(inp.domain, inp.address, inp.id_seed)
    analytics = (
        f'<meta name="analytics-account" content="{html.escape(inp.analytics_account)}">'
        if inp.analytics_account
        else ""
    )
    page = f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>Wave</title>
{analytics}
<script>
var __session = {_script_json(session_json)};
var __client_flags = {_script_json(inp.flags)};
var __websocket_address = {_script_json(inp.websocket_address)};
</script>
</head>
<body>
<div id="topbar">
<span class="username">{html.escape(inp.username)}</span>@<span class="domain">{html.escape(inp.user_domain)}</span>
</div>
<div id="app"></div>
<script src="/static/webclient.nocache.js"></script>
</body>
</html>
"""
    return ClientPageOutput(html=page, session_json=session_json)


def run(inp: ClientPageInput) -> ClientPageOutput:
    return run_render(inp)
