"""
token_ledger.types.events — event records emitted by the ledger.

Two event shapes exist, mirroring the usual fungible-token surface:

* `TransferEvent(from_, to, amount)`      — name "Transfer"
* `ApprovalEvent(owner, spender, amount)` — name "Approval"; `amount` is the
  *new total* allowance after the call, never the delta.

Helpers
-------
* `to_dict()` / `event_from_dict()` convert to/from JSON-friendly forms
  (accounts as 0x-hex, amounts as decimal strings).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping, Tuple, Union

from .account import AccountId, format_account, parse_account


@dataclass(frozen=True)
class TransferEvent:
    """Value moved from `from_` to `to`."""

    NAME: ClassVar[str] = "Transfer"

    from_: AccountId
    to: AccountId
    amount: int

    @property
    def name(self) -> str:
        return self.NAME

    @property
    def accounts(self) -> Tuple[AccountId, AccountId]:
        return (self.from_, self.to)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": self.NAME,
            "from": format_account(self.from_),
            "to": format_account(self.to),
            "amount": str(self.amount),
        }


@dataclass(frozen=True)
class ApprovalEvent:
    """Allowance of `spender` over `owner`'s funds is now `amount`."""

    NAME: ClassVar[str] = "Approval"

    owner: AccountId
    spender: AccountId
    amount: int

    @property
    def name(self) -> str:
        return self.NAME

    @property
    def accounts(self) -> Tuple[AccountId, AccountId]:
        return (self.owner, self.spender)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": self.NAME,
            "owner": format_account(self.owner),
            "spender": format_account(self.spender),
            "amount": str(self.amount),
        }


LedgerEvent = Union[TransferEvent, ApprovalEvent]


def event_from_dict(d: Mapping[str, Any]) -> LedgerEvent:
    """Inverse of `.to_dict()` for either event kind."""
    kind = d.get("event")
    if kind == TransferEvent.NAME:
        return TransferEvent(
            from_=parse_account(d["from"]),
            to=parse_account(d["to"]),
            amount=int(d["amount"]),
        )
    if kind == ApprovalEvent.NAME:
        return ApprovalEvent(
            owner=parse_account(d["owner"]),
            spender=parse_account(d["spender"]),
            amount=int(d["amount"]),
        )
    raise ValueError(f"unknown event kind: {kind!r}")


__all__ = ["TransferEvent", "ApprovalEvent", "LedgerEvent", "event_from_dict"]
