"""
Welcome component - the server-wide welcome document.

Creates the welcome document once, remembers it through the welcome pointer
and adds each newly bootstrapped participant to it.
"""

from .component import run, run_attach
from .models import AttachParticipantInput, AttachParticipantOutput, PointerMode, WelcomeConfig
from .ports import (
    AgentAccountLookupPort,
    DocumentServicePort,
    DocumentSessionPort,
    WelcomePointerPort,
)

__all__ = [
    # Entry points
    "run",
    "run_attach",
    # Models
    "AttachParticipantInput",
    "AttachParticipantOutput",
    "PointerMode",
    "WelcomeConfig",
    # Ports
    "AgentAccountLookupPort",
    "DocumentServicePort",
    "DocumentSessionPort",
    "WelcomePointerPort",
]
