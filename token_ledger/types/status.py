"""
token_ledger.types.status — outcome of a dispatched ledger call.

String forms:
  - str(CallStatus.SUCCESS) -> "success"   (good for logs)
  - CallStatus.SUCCESS.code -> "SUCCESS"   (good for results/protocols)
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class CallStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"

    @property
    def code(self) -> str:
        return self.value.upper()

    @property
    def is_success(self) -> bool:
        return self is CallStatus.SUCCESS

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value

    @classmethod
    def from_str(cls, s: str, *, default: Optional["CallStatus"] = None) -> "CallStatus":
        """
        Parse a status leniently: "success"/"ok" or "failed"/"fail"/"error".

        Raises:
            ValueError if parsing fails and no default is provided.
        """
        norm = (s or "").strip().lower()
        if norm in {"success", "ok"}:
            return cls.SUCCESS
        if norm in {"failed", "fail", "error"}:
            return cls.FAILED
        if default is not None:
            return default
        raise ValueError(f"unknown CallStatus: {s!r}")


__all__ = ["CallStatus"]
