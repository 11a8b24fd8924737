"""Bootstrap component for first-use provisioning.

Resolves the caller's identity from trusted proxy headers, creates the local
account on first sight and attaches it to the server-wide welcome document.
"""

from .component import run, run_bootstrap
from .models import BootstrapInput, BootstrapOutput, operator_message
from .ports import (
    AccountStorePort,
    DocumentServicePort,
    SecretHasherPort,
    TimePort,
    WelcomePointerPort,
)

__all__ = [
    # Entry points
    "run",
    "run_bootstrap",
    # Models
    "BootstrapInput",
    "BootstrapOutput",
    "operator_message",
    # Ports
    "AccountStorePort",
    "DocumentServicePort",
    "SecretHasherPort",
    "TimePort",
    "WelcomePointerPort",
]
