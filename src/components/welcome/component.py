"""
Welcome component implementation.

Every newly bootstrapped user joins one server-wide welcome document. The
document is created by the welcome agent on the first bootstrap, and its id
is kept in the welcome pointer for everyone after.

Pointer modes:
- legacy: ``read`` then a separate ``write``. Two concurrent first requests
  can both see an absent pointer and each create a document; the last write
  wins the pointer and the other document is left with one participant.
- atomic: the absent -> present transition runs under a process-wide lock
  and commits through ``try_initialize``. A creator that still loses (another
  process) joins the winning document instead.

Neither mode rolls back a created document when the pointer write fails.
"""

from __future__ import annotations

import logging
import threading

from src.domain.entities import Account
from src.domain.errors import BootstrapError
from src.domain.participant import InvalidParticipantAddress, ParticipantId
from src.ports.accounts import AccountStoreError
from src.ports.documents import RpcError
from src.ports.pointer import PointerStoreError

from .models import AttachParticipantInput, AttachParticipantOutput, WelcomeConfig
from .ports import (
    AgentAccountLookupPort,
    DocumentServicePort,
    DocumentSessionPort,
    WelcomePointerPort,
)

logger = logging.getLogger(__name__)

_creation_lock = threading.Lock()


class _AgentUnavailable(Exception):
    pass


class _PointerReadError(Exception):
    pass


def _read_pointer(pointer: WelcomePointerPort) -> str | None:
    try:
        return pointer.read()
    except PointerStoreError as e:
        raise _PointerReadError(str(e)) from e


def _load_agent(
    account_repo: AgentAccountLookupPort, agent_name: str, domain: str
) -> Account:
    try:
        agent_id = ParticipantId.of(f"{agent_name}@{domain}")
    except InvalidParticipantAddress as e:
        raise _AgentUnavailable(str(e)) from e

    account = account_repo.get_account(agent_id)
    if account is None:
        raise _AgentUnavailable(f"No account for agent {agent_id}")
    if not account.is_agent or not account.consumer_secret:
        raise _AgentUnavailable(f"Account {agent_id} is not an agent account")
    return account


def _join_existing(
    session: DocumentSessionPort, document_id: str, collection: str, identity: ParticipantId
) -> None:
    handle = session.fetch_document(document_id, collection)
    session.add_participant(handle, identity.address)
    session.submit(handle)


def _create_welcome(
    session: DocumentSessionPort, domain: str, identity: ParticipantId, greeting: str
) -> str:
    handle = session.create_document(domain, {identity.address})
    session.post_line(handle, greeting.format(domain=domain))
    document_id = session.submit(handle)
    logger.info("Created welcome document %s for %s", document_id, identity)
    return document_id


def _attach_legacy(
    inp: AttachParticipantInput,
    session: DocumentSessionPort,
    pointer: WelcomePointerPort,
    config: WelcomeConfig,
) -> AttachParticipantOutput:
    existing = _read_pointer(pointer)
    if existing:
        _join_existing(session, existing, config.collection, inp.identity)
        return AttachParticipantOutput(document_id=existing, success=True)

    document_id = _create_welcome(session, inp.domain, inp.identity, config.greeting)
    try:
        pointer.write(document_id)
    except PointerStoreError:
        logger.error("Welcome document %s created but its pointer was not stored", document_id)
        raise
    return AttachParticipantOutput(document_id=document_id, created=True, success=True)


def _attach_atomic(
    inp: AttachParticipantInput,
    session: DocumentSessionPort,
    pointer: WelcomePointerPort,
    config: WelcomeConfig,
) -> AttachParticipantOutput:
    existing = _read_pointer(pointer)
    if existing:
        _join_existing(session, existing, config.collection, inp.identity)
        return AttachParticipantOutput(document_id=existing, success=True)

    with _creation_lock:
        existing = _read_pointer(pointer)
        if existing:
            _join_existing(session, existing, config.collection, inp.identity)
            return AttachParticipantOutput(document_id=existing, success=True)

        document_id = _create_welcome(session, inp.domain, inp.identity, config.greeting)
        try:
            stored = pointer.try_initialize(document_id)
        except PointerStoreError:
            logger.error(
                "Welcome document %s created but its pointer was not stored", document_id
            )
            raise
        if stored:
            return AttachParticipantOutput(document_id=document_id, created=True, success=True)

    winner = _read_pointer(pointer)
    if not winner:
        raise _PointerReadError("Welcome pointer lost its value after a failed initialize")
    logger.warning(
        "Welcome document %s orphaned: pointer already holds %s", document_id, winner
    )
    _join_existing(session, winner, config.collection, inp.identity)
    return AttachParticipantOutput(
        document_id=winner, orphaned_document_id=document_id, success=True
    )


def run_attach(
    inp: AttachParticipantInput,
    account_repo: AgentAccountLookupPort,
    pointer: WelcomePointerPort,
    documents: DocumentServicePort,
    config: WelcomeConfig | None = None,
) -> AttachParticipantOutput:
    """
    Add ``inp.identity`` to the welcome document, creating it if none exists.

    Args:
        inp: Identity to attach and the server domain.
        account_repo: Used to look up the welcome agent account.
        pointer: Persisted welcome document id.
        documents: Document RPC service.
        config: Agent name, pointer mode, collection and greeting.

    Returns:
        AttachParticipantOutput with the document id to redirect to.
    """
    config = config or WelcomeConfig()

    # 1. Agent credentials
    try:
        agent = _load_agent(account_repo, config.agent_name, inp.domain)
    except AccountStoreError as e:
        return AttachParticipantOutput.failed(BootstrapError.STORAGE_ERROR, str(e), "agent")
    except _AgentUnavailable as e:
        return AttachParticipantOutput.failed(BootstrapError.AGENT_ACCOUNT_MISSING, str(e))

    # 2. Authenticated document session
    assert agent.consumer_secret is not None
    session = documents.connect(agent.address, agent.consumer_secret)

    # 3. Pointer protocol
    try:
        if config.pointer_mode == "atomic":
            return _attach_atomic(inp, session, pointer, config)
        return _attach_legacy(inp, session, pointer, config)
    except RpcError as e:
        return AttachParticipantOutput.failed(BootstrapError.RPC_ERROR, str(e))
    except PointerStoreError as e:
        return AttachParticipantOutput.failed(BootstrapError.STORAGE_ERROR, str(e), "pointer")
    except _PointerReadError as e:
        return AttachParticipantOutput.failed(
            BootstrapError.STORAGE_ERROR, str(e), "pointer_read"
        )


def run(
    inp: AttachParticipantInput,
    *,
    account_repo: AgentAccountLookupPort,
    pointer: WelcomePointerPort,
    documents: DocumentServicePort,
    config: WelcomeConfig | None = None,
) -> AttachParticipantOutput:
    """Main entry point for the welcome component."""
    return run_attach(inp, account_repo, pointer, documents, config)
