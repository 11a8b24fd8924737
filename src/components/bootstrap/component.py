"""Bootstrap component implementation.

Request-level composition of first-use provisioning: resolve (and if needed
create) the caller's account, then attach it to the welcome document. Stops
at the first failure; nothing already done is rolled back, so an account
created in step 1 survives a failure in step 2.
"""

from __future__ import annotations

from src.components.identity import (
    ResolveIdentityInput,
    TrustedHeaderConfig,
    run_resolve,
)
from src.components.welcome import AttachParticipantInput, WelcomeConfig, run_attach

from .models import BootstrapInput, BootstrapOutput
from .ports import (
    AccountStorePort,
    DocumentServicePort,
    SecretHasherPort,
    TimePort,
    WelcomePointerPort,
)


def run_bootstrap(
    bootstrap_input: BootstrapInput,
    account_repo: AccountStorePort,
    hasher: SecretHasherPort,
    pointer: WelcomePointerPort,
    documents: DocumentServicePort,
    time: TimePort,
    header_config: TrustedHeaderConfig | None = None,
    welcome_config: WelcomeConfig | None = None,
) -> BootstrapOutput:
    """Execute the bootstrap process.

    Args:
        bootstrap_input: Session identity, request headers, server domain.
        account_repo: Account store for users and the welcome agent.
        hasher: Secret generation and digesting for new accounts.
        pointer: Persisted welcome document id.
        documents: Document RPC service.
        time: Time provider for deterministic timestamps.
        header_config: Trusted header names.
        welcome_config: Welcome agent and pointer settings.

    Returns:
        BootstrapOutput with the redirect target or the failure cause.
    """
    # 1. Already signed in: nothing to do
    if bootstrap_input.session_identity is not None:
        return BootstrapOutput.skipped_with(bootstrap_input.session_identity)

    # 2. Identity
    resolved = run_resolve(
        ResolveIdentityInput(
            session_identity=None,
            headers=bootstrap_input.headers,
            domain=bootstrap_input.domain,
        ),
        account_repo,
        hasher,
        time,
        header_config,
    )
    if not resolved.success or resolved.identity is None:
        assert resolved.error is not None
        return BootstrapOutput.failed(resolved.error, resolved.detail, resolved.error_context)

    # 3. Welcome document
    attached = run_attach(
        AttachParticipantInput(identity=resolved.identity, domain=bootstrap_input.domain),
        account_repo,
        pointer,
        documents,
        welcome_config,
    )
    if not attached.success:
        assert attached.error is not None
        return BootstrapOutput.failed(
            attached.error,
            attached.detail,
            attached.error_context,
            identity=resolved.identity,
            provisioned=resolved.provisioned,
        )

    return BootstrapOutput(
        identity=resolved.identity,
        document_id=attached.document_id,
        provisioned=resolved.provisioned,
        created_document=attached.created,
        success=True,
    )


def run(
    bootstrap_input: BootstrapInput,
    *,
    account_repo: AccountStorePort,
    hasher: SecretHasherPort,
    pointer: WelcomePointerPort,
    documents: DocumentServicePort,
    time: TimePort,
    header_config: TrustedHeaderConfig | None = None,
    welcome_config: WelcomeConfig | None = None,
) -> BootstrapOutput:
    """Main entry point for the bootstrap component."""
    return run_bootstrap(
        bootstrap_input,
        account_repo,
        hasher,
        pointer,
        documents,
        time,
        header_config,
        welcome_config,
    )
