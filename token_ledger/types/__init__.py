"""
Lightweight value types shared across the ledger: account ids, events, call
status and results. Import from here for convenience:

    from token_ledger.types import TransferEvent, ApprovalEvent, CallResult
"""

from .account import (AccountId, format_account, format_bytes, parse_account,
                      parse_bytes, require_account)
from .events import ApprovalEvent, LedgerEvent, TransferEvent, event_from_dict
from .result import CallResult
from .status import CallStatus

__all__ = [
    "AccountId",
    "format_account",
    "format_bytes",
    "parse_account",
    "parse_bytes",
    "require_account",
    "TransferEvent",
    "ApprovalEvent",
    "LedgerEvent",
    "event_from_dict",
    "CallStatus",
    "CallResult",
]
