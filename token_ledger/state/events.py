"""
token_ledger.state.events — pluggable event sinks.

The ledger's output channel. A sink receives the events of every *committed*
call, in emission order, and stamps each one with a strictly increasing
sequence number. Three backends ship here:

- InMemoryEventSink: fast, test/dev friendly; keeps all records in RAM.
- JsonlEventSink: append-only JSONL file; durable and simple to operate.
- NullEventSink: no-op sink for setups that ignore events.

Querying is deliberately simple: filter by event name and/or by an account
that appears in the event (either side of a Transfer or Approval).
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import (Iterable, Iterator, List, Optional, Protocol, Sequence,
                    Union, runtime_checkable)

import msgspec

from ..errors import LedgerError
from ..types.account import AccountId
from ..types.events import LedgerEvent, event_from_dict

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventRecord:
    """An event together with its position in the sink (0-based `seq`)."""

    seq: int
    event: LedgerEvent

    @property
    def name(self) -> str:
        return self.event.name

    def to_dict(self) -> dict:
        d = {"seq": self.seq}
        d.update(self.event.to_dict())
        return d


@runtime_checkable
class EventSink(Protocol):
    def append(self, event: LedgerEvent) -> EventRecord:
        """Append a single event. Returns the stored record."""

    def extend(self, events: Sequence[LedgerEvent]) -> List[EventRecord]:
        """Append several events in order."""

    def records(
        self,
        *,
        name: Optional[str] = None,
        account: Optional[AccountId] = None,
        limit: Optional[int] = None,
    ) -> Iterable[EventRecord]:
        """Iterate matching records in ascending `seq` order."""

    def flush(self) -> None:
        """Force persistence, if applicable."""

    def close(self) -> None:
        """Release resources (files, buffers)."""


def _matches(rec: EventRecord, name: Optional[str], account: Optional[AccountId]) -> bool:
    if name is not None and rec.name != name:
        return False
    if account is not None and account not in rec.event.accounts:
        return False
    return True


def _limited(it: Iterator[EventRecord], limit: Optional[int]) -> Iterator[EventRecord]:
    if limit is None:
        yield from it
        return
    n = 0
    for rec in it:
        if n >= limit:
            break
        yield rec
        n += 1


# =============================================================================
# In-memory sink
# =============================================================================


class InMemoryEventSink:
    """
    A simple, thread-safe in-memory sink.

    Keeps all records in RAM; suited to tests and short-lived hosts.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._records: List[EventRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    @property
    def events(self) -> List[LedgerEvent]:
        with self._lock:
            return [r.event for r in self._records]

    def append(self, event: LedgerEvent) -> EventRecord:
        with self._lock:
            rec = EventRecord(seq=len(self._records), event=event)
            self._records.append(rec)
        return rec

    def extend(self, events: Sequence[LedgerEvent]) -> List[EventRecord]:
        with self._lock:
            return [self.append(ev) for ev in events]

    def records(
        self,
        *,
        name: Optional[str] = None,
        account: Optional[AccountId] = None,
        limit: Optional[int] = None,
    ) -> Iterator[EventRecord]:
        with self._lock:
            snapshot = list(self._records)
        return _limited((r for r in snapshot if _matches(r, name, account)), limit)

    def flush(self) -> None:
        return

    def close(self) -> None:
        with self._lock:
            self._records.clear()


# =============================================================================
# JSONL sink (durable)
# =============================================================================


class JsonlEventSink:
    """
    Append-only JSONL sink. Each line is one EventRecord:

        {"seq":0,"event":"Transfer","from":"0x…","to":"0x…","amount":"300"}

    Sequence numbers continue from the last line already in the file, so a
    host that reopens the log across process runs keeps one ordering.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path).expanduser()
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()
        self._next_seq = self._scan_next_seq()
        self._fh = open(self._path, "a", encoding="utf-8", buffering=1)  # line-buffered

    @property
    def path(self) -> Path:
        return self._path

    def _scan_next_seq(self) -> int:
        if not self._path.exists():
            return 0
        last = -1
        with open(self._path, "r", encoding="utf-8") as fh:
            for line in fh:
                if not line.strip():
                    continue
                try:
                    last = int(msgspec.json.decode(line)["seq"])
                except (msgspec.DecodeError, LedgerError, KeyError, TypeError, ValueError) as e:
                    log.warning("Ignoring malformed event line while scanning %s: %r", self._path, e)
        return last + 1

    @staticmethod
    def _decode(line: str) -> EventRecord:
        obj = msgspec.json.decode(line)
        if not isinstance(obj, dict):
            raise ValueError("event line is not a JSON object")
        return EventRecord(seq=int(obj["seq"]), event=event_from_dict(obj))

    def append(self, event: LedgerEvent) -> EventRecord:
        with self._lock:
            rec = EventRecord(seq=self._next_seq, event=event)
            self._fh.write(msgspec.json.encode(rec.to_dict()).decode("utf-8") + "\n")
            self._next_seq += 1
        return rec

    def extend(self, events: Sequence[LedgerEvent]) -> List[EventRecord]:
        with self._lock:
            return [self.append(ev) for ev in events]

    def records(
        self,
        *,
        name: Optional[str] = None,
        account: Optional[AccountId] = None,
        limit: Optional[int] = None,
    ) -> Iterator[EventRecord]:
        with self._lock:
            self._fh.flush()
            out: List[EventRecord] = []
            with open(self._path, "r", encoding="utf-8") as fh:
                for line in fh:
                    if not line.strip():
                        continue
                    try:
                        rec = self._decode(line)
                    except (msgspec.DecodeError, LedgerError, KeyError, TypeError, ValueError) as e:
                        log.warning("Skipping malformed event line: %s (%r)", line[:120], e)
                        continue
                    out.append(rec)
        return _limited((r for r in out if _matches(r, name, account)), limit)

    def flush(self) -> None:
        with self._lock:
            self._fh.flush()
            os.fsync(self._fh.fileno())

    def close(self) -> None:
        with self._lock:
            if not self._fh.closed:
                self._fh.flush()
                self._fh.close()


# =============================================================================
# Null sink
# =============================================================================


class NullEventSink:
    """A sink that drops everything (sequence numbers still advance)."""

    def __init__(self) -> None:
        self._next_seq = 0

    def append(self, event: LedgerEvent) -> EventRecord:
        rec = EventRecord(seq=self._next_seq, event=event)
        self._next_seq += 1
        return rec

    def extend(self, events: Sequence[LedgerEvent]) -> List[EventRecord]:
        return [self.append(ev) for ev in events]

    def records(
        self,
        *,
        name: Optional[str] = None,
        account: Optional[AccountId] = None,
        limit: Optional[int] = None,
    ) -> Iterator[EventRecord]:
        return iter(())

    def flush(self) -> None:
        return

    def close(self) -> None:
        return


__all__ = [
    "EventRecord",
    "EventSink",
    "InMemoryEventSink",
    "JsonlEventSink",
    "NullEventSink",
]
