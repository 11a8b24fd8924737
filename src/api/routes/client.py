"""
Client entry point.

``GET /`` either serves the client page to a signed-in participant or, for a
request arriving through the trusted proxy without a session, provisions the
participant, attaches them to the welcome document and redirects to it.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse, Response

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.auth.session_store import InMemorySessionStore
from src.adapters.clock import SystemClock
from src.adapters.fs.welcome_pointer import FileWelcomePointer
from src.adapters.rpc.document_service import RobotRpcDocumentService
from src.adapters.sqlite.repos import SQLiteAccountRepo
from src.api.deps import (
    get_account_repo,
    get_auth_adapter,
    get_clock,
    get_document_service,
    get_flag_table,
    get_header_config,
    get_pointer,
    get_rules,
    get_session_identity,
    get_session_store,
    get_welcome_config,
)
from src.components.bootstrap import BootstrapInput, run_bootstrap
from src.components.client_page import (
    ClientFlagTable,
    ClientPageInput,
    locale_redirect_url,
    run_render,
)
from src.components.identity import TrustedHeaderConfig
from src.components.session import CreateSessionInput, run_create_session
from src.components.welcome import WelcomeConfig
from src.domain.entities import Account
from src.domain.participant import ParticipantId
from src.ports.accounts import AccountStoreError
from src.rules.models import Rules

logger = logging.getLogger(__name__)

router = APIRouter()


def _lookup_account(repo: SQLiteAccountRepo, identity: ParticipantId) -> Account | None:
    try:
        return repo.get_account(identity)
    except AccountStoreError as e:
        logger.warning("Could not load account %s for locale lookup: %s", identity, e)
        return None


def _render_page(
    request: Request,
    identity: ParticipantId,
    rules: Rules,
    account_repo: SQLiteAccountRepo,
    flag_table: ClientFlagTable,
) -> Response:
    account = _lookup_account(account_repo, identity)
    if account is not None and not account.is_agent:
        target = locale_redirect_url(str(request.url), request.query_params, account)
        if target is not None:
            return RedirectResponse(target, status_code=302)

    page = run_render(
        ClientPageInput(
            domain=rules.server.domain,
            address=identity.address,
            username=identity.name,
            user_domain=identity.domain,
            websocket_address=rules.server.resolved_presented_address(),
            flags=flag_table.to_json(request.query_params),
            analytics_account=rules.server.analytics_account,
        )
    )
    return HTMLResponse(page.html)


@router.get("/")
def client_entry(
    request: Request,
    session_identity: ParticipantId | None = Depends(get_session_identity),
    rules: Rules = Depends(get_rules),
    account_repo: SQLiteAccountRepo = Depends(get_account_repo),
    pointer: FileWelcomePointer = Depends(get_pointer),
    documents: RobotRpcDocumentService = Depends(get_document_service),
    auth_adapter: JWTAuthAdapter = Depends(get_auth_adapter),
    session_store: InMemorySessionStore = Depends(get_session_store),
    clock: SystemClock = Depends(get_clock),
    header_config: TrustedHeaderConfig = Depends(get_header_config),
    welcome_config: WelcomeConfig = Depends(get_welcome_config),
    flag_table: ClientFlagTable = Depends(get_flag_table),
) -> Response:
    """Serve the client, or bootstrap a first visit from the trusted proxy."""
    if session_identity is not None:
        return _render_page(request, session_identity, rules, account_repo, flag_table)

    output = run_bootstrap(
        BootstrapInput(
            session_identity=None,
            headers=request.headers,
            domain=rules.server.domain,
        ),
        account_repo=account_repo,
        hasher=auth_adapter,
        pointer=pointer,
        documents=documents,
        time=clock,
        header_config=header_config,
        welcome_config=welcome_config,
    )

    if not output.success or output.redirect_to is None:
        logger.error(
            "Bootstrap failed: error=%s context=%s detail=%s",
            output.error.value if output.error else None,
            output.error_context,
            output.detail,
        )
        message = output.message(rules.trusted_headers.host_name) or "Internal error"
        return PlainTextResponse(message, status_code=500)

    assert output.identity is not None
    session = run_create_session(
        CreateSessionInput(identity=output.identity, ttl_minutes=rules.sessions.ttl_minutes),
        auth_adapter,
        session_store,
        clock,
    )

    response = Response(status_code=302)
    # Fragment target; set verbatim rather than through a redirect helper.
    response.headers["Location"] = output.redirect_to
    cookie = rules.sessions.cookie
    response.set_cookie(
        key=cookie.name,
        value=session.token_raw or "",
        httponly=cookie.http_only,
        max_age=rules.sessions.ttl_minutes * 60,
        samesite=cookie.same_site,
        secure=cookie.secure,
    )
    return response
