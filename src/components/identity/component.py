"""Identity component implementation.

Resolves the participant behind a request and provisions an account for it on
first sight.

Trust boundary: the username and user-id headers are taken verbatim. They are
only trustworthy because the upstream proxy strips them from client requests
and injects its own. This component performs no authentication of its own and
does not check the external user id against any identity provider.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from src.domain.entities import Account
from src.domain.errors import BootstrapError
from src.domain.participant import InvalidParticipantAddress, check_new_username
from src.ports.accounts import AccountStoreError

from .models import ResolveIdentityInput, ResolveIdentityOutput, TrustedHeaderConfig
from .ports import AccountStorePort, SecretHasherPort, TimePort

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s")


def _header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is not None:
        return value
    # Plain dicts are case-sensitive; HTTP header names are not.
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None


def normalize_username(username: str, separator: str = "_") -> str:
    """Trim the display name and replace each whitespace character."""
    return _WHITESPACE.sub(separator, username.strip())


def read_trusted_headers(
    headers: Mapping[str, str], config: TrustedHeaderConfig
) -> tuple[str, str] | None:
    """Return (username, external_user_id), or None if either is missing/blank."""
    username = _header(headers, config.username_header)
    user_id = _header(headers, config.user_id_header)
    if not username or not username.strip():
        return None
    if not user_id or not user_id.strip():
        return None
    return username.strip(), user_id.strip()


def run_resolve(
    inp: ResolveIdentityInput,
    account_repo: AccountStorePort,
    hasher: SecretHasherPort,
    time: TimePort,
    config: TrustedHeaderConfig | None = None,
) -> ResolveIdentityOutput:
    """
    Resolve the request's identity, provisioning an account if needed.

    Args:
        inp: Session identity (if any), request headers and server domain.
        account_repo: Account store.
        hasher: Generates and digests the throwaway account secret.
        time: Time provider for deterministic timestamps.
        config: Trusted header names.

    Returns:
        ResolveIdentityOutput; ``error`` is set on failure.
    """
    # 1. Existing session wins, no store access
    if inp.session_identity is not None:
        return ResolveIdentityOutput(
            identity=inp.session_identity, from_session=True, success=True
        )

    # 2. Trusted headers
    config = config or TrustedHeaderConfig()
    trusted = read_trusted_headers(inp.headers, config)
    if trusted is None:
        return ResolveIdentityOutput.failed(
            BootstrapError.UNAUTHORIZED, "Trusted identity headers missing or blank"
        )
    username, external_user_id = trusted

    # 3. Address
    try:
        identity = check_new_username(
            inp.domain, normalize_username(username, config.whitespace_separator)
        )
    except InvalidParticipantAddress as e:
        return ResolveIdentityOutput.failed(BootstrapError.INVALID_IDENTITY, str(e))

    # 4. Account
    try:
        account = account_repo.get_account(identity)
    except AccountStoreError as e:
        return ResolveIdentityOutput.failed(BootstrapError.STORAGE_ERROR, str(e), "account")

    provisioned = False
    if account is None:
        digest = hasher.hash_password(hasher.generate_secret())
        account = Account.human(identity, digest, time.now_utc())
        try:
            account_repo.put_account(account)
        except AccountStoreError as e:
            return ResolveIdentityOutput.failed(
                BootstrapError.STORAGE_ERROR, str(e), "account"
            )
        provisioned = True
        logger.info("Provisioned account %s (external id %s)", identity, external_user_id)

    return ResolveIdentityOutput(
        identity=identity,
        account=account,
        provisioned=provisioned,
        external_user_id=external_user_id,
        success=True,
    )


def run(
    inp: ResolveIdentityInput,
    *,
    account_repo: AccountStorePort,
    hasher: SecretHasherPort,
    time: TimePort,
    config: TrustedHeaderConfig | None = None,
) -> ResolveIdentityOutput:
    """Main entry point for the identity component."""
    return run_resolve(inp, account_repo, hasher, time, config)
