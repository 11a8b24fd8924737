from enum import Enum


class BootstrapError(str, Enum):
    """Why a bootstrap request could not complete.

    Every value maps to the same HTTP status; the distinction is for
    operators reading the logs.
    """

    UNAUTHORIZED = "unauthorized"
    INVALID_IDENTITY = "invalid_identity"
    STORAGE_ERROR = "storage_error"
    AGENT_ACCOUNT_MISSING = "agent_account_missing"
    RPC_ERROR = "rpc_error"
