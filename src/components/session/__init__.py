"""
Session component - binds a resolved participant to a server-side session.
"""

from .component import run, run_create_session, run_verify_session
from .models import CreateSessionInput, SessionOutput, VerifySessionInput
from .ports import SessionStorePort, TimePort, TokenAdapterPort

__all__ = [
    # Entry points
    "run",
    "run_create_session",
    "run_verify_session",
    # Models
    "CreateSessionInput",
    "SessionOutput",
    "VerifySessionInput",
    # Ports
    "SessionStorePort",
    "TimePort",
    "TokenAdapterPort",
]
