"""
Identity component - trusted-header identity bootstrap.

Resolves the participant behind a request from its session or from the
headers injected by the trusted proxy, creating a local account on first
sight.
"""

from .component import normalize_username, read_trusted_headers, run, run_resolve
from .models import ResolveIdentityInput, ResolveIdentityOutput, TrustedHeaderConfig
from .ports import AccountStorePort, SecretHasherPort, TimePort

__all__ = [
    # Entry points
    "run",
    "run_resolve",
    # Helpers
    "normalize_username",
    "read_trusted_headers",
    # Models
    "ResolveIdentityInput",
    "ResolveIdentityOutput",
    "TrustedHeaderConfig",
    # Ports
    "AccountStorePort",
    "SecretHasherPort",
    "TimePort",
]
