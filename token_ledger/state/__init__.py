"""
Ledger state: the mutable record, its journal, and the event output channel.
"""

from .events import (EventRecord, EventSink, InMemoryEventSink,
                     JsonlEventSink, NullEventSink)
from .journal import Journal
from .store import FileStateStore, LedgerState

__all__ = [
    "LedgerState",
    "FileStateStore",
    "Journal",
    "EventRecord",
    "EventSink",
    "InMemoryEventSink",
    "JsonlEventSink",
    "NullEventSink",
]
