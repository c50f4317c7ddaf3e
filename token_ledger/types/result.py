"""
token_ledger.types.result — CallResult container for dispatched calls.

`CallResult` is what the host dispatcher hands back for one call: whether it
succeeded, the events it emitted (in emission order; empty on failure) and,
on failure, the `LedgerError` that aborted it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple

from ..errors import LedgerError, error_to_result_fields
from .events import LedgerEvent
from .status import CallStatus


@dataclass(frozen=True)
class CallResult:
    op: str
    status: CallStatus
    events: Tuple[LedgerEvent, ...] = ()
    error: Optional[LedgerError] = None

    @classmethod
    def success(cls, op: str, events: Iterable[LedgerEvent] = ()) -> "CallResult":
        return cls(op=op, status=CallStatus.SUCCESS, events=tuple(events))

    @classmethod
    def failure(cls, op: str, error: LedgerError) -> "CallResult":
        return cls(op=op, status=CallStatus.FAILED, error=error)

    @property
    def is_success(self) -> bool:
        return self.status.is_success

    def to_dict(self) -> Dict[str, Any]:
        if self.error is not None:
            out = error_to_result_fields(self.error)
            out["op"] = self.op
            return out
        return {
            "op": self.op,
            "status": self.status.value,
            "events": [ev.to_dict() for ev in self.events],
        }


__all__ = ["CallResult"]
