"""
Client page component - the page served to signed-in participants.
"""

from .component import (
    build_session_json,
    locale_redirect_url,
    random_id_seed,
    run,
    run_render,
)
from .flags import ClientFlagTable, FlagSpec
from .models import ClientPageInput, ClientPageOutput

__all__ = [
    # Entry points
    "run",
    "run_render",
    # Helpers
    "build_session_json",
    "locale_redirect_url",
    "random_id_seed",
    # Flags
    "ClientFlagTable",
    "FlagSpec",
    # Models
    "ClientPageInput",
    "ClientPageOutput",
]
