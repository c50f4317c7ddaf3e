"""
Ledger runtime: the `Ledger` state machine and the host-side `Dispatcher`.
"""

from .dispatcher import OPERATIONS, Call, Dispatcher
from .ledger import Ledger

__all__ = ["Ledger", "Dispatcher", "Call", "OPERATIONS"]
