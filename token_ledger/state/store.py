"""
token_ledger.state.store
========================

The ledger's state record and a file-backed store for it.

`LedgerState` is the single mutable record the ledger operates on: the
genesis configuration, the `initialized` flag, the balances map and the
allowances map. It is passed by reference; the host owns it and decides when
to persist it.

`FileStateStore` keeps one state in a single JSON file, written atomically
(temp file + fsync + rename). JSON is encoded with ``msgspec``; the format is
a node-local persistence detail. Amounts are decimal strings so that
wide balances survive any JSON reader:

    {
      "owner": "0x…", "total_supply": "1000", "name": "0x…", "ticker": "0x…",
      "initialized": true,
      "balances": {"0x…": "700", "0x…": "300"},
      "allowances": [{"owner": "0x…", "spender": "0x…", "amount": "100"}]
    }
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple, Union

import msgspec

from ..genesis import Genesis
from ..safe_uint import is_uint
from ..types.account import (AccountId, format_account, format_bytes,
                             parse_account, parse_bytes)

log = logging.getLogger(__name__)

AllowanceKey = Tuple[AccountId, AccountId]


def _amount(value: Any) -> int:
    n = int(value)
    if n < 0:
        raise ValueError(f"negative amount in ledger state: {value!r}")
    return n


@dataclass
class LedgerState:
    owner: AccountId
    total_supply: int
    name: bytes = b""
    ticker: bytes = b""
    initialized: bool = False
    balances: Dict[AccountId, int] = field(default_factory=dict)
    allowances: Dict[AllowanceKey, int] = field(default_factory=dict)

    @classmethod
    def from_genesis(cls, genesis: Genesis) -> "LedgerState":
        return cls(
            owner=genesis.owner,
            total_supply=genesis.total_supply,
            name=genesis.name,
            ticker=genesis.ticker,
        )

    def circulating(self) -> int:
        """Sum of all balance records; equals total_supply once initialized."""
        return sum(self.balances.values())

    def check_width(self, bits: int) -> "LedgerState":
        """
        Raise ValueError unless the supply, every balance and every allowance
        fit in [0, 2**bits - 1].
        """
        if not is_uint(self.total_supply, bits):
            raise ValueError(f"total_supply {self.total_supply} does not fit in {bits} bits")
        for acct, v in self.balances.items():
            if not is_uint(v, bits):
                raise ValueError(f"balance of {format_account(acct)} ({v}) does not fit in {bits} bits")
        for (o, s), v in self.allowances.items():
            if not is_uint(v, bits):
                raise ValueError(
                    f"allowance {format_account(o)} -> {format_account(s)} ({v}) does not fit in {bits} bits"
                )
        return self

    # -- JSON form -------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "owner": format_account(self.owner),
            "total_supply": str(self.total_supply),
            "name": format_bytes(self.name),
            "ticker": format_bytes(self.ticker),
            "initialized": self.initialized,
            "balances": {format_account(a): str(v) for a, v in sorted(self.balances.items())},
            "allowances": [
                {"owner": format_account(o), "spender": format_account(s), "amount": str(v)}
                for (o, s), v in sorted(self.allowances.items())
            ],
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "LedgerState":
        balances = {parse_account(a): _amount(v) for a, v in d.get("balances", {}).items()}
        allowances = {
            (parse_account(e["owner"]), parse_account(e["spender"])): _amount(e["amount"])
            for e in d.get("allowances", [])
        }
        return cls(
            owner=parse_account(d["owner"]),
            total_supply=_amount(d["total_supply"]),
            name=parse_bytes(d.get("name", b"")),
            ticker=parse_bytes(d.get("ticker", b"")),
            initialized=bool(d.get("initialized", False)),
            balances=balances,
            allowances=allowances,
        )


# ------------------------------ File-backed ------------------------------ #


def _atomic_write(path: Path, data: bytes) -> None:
    tmp = path.parent / ("." + path.name + ".tmp")
    with open(tmp, "wb") as f:
        f.write(data)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp, path)


class FileStateStore:
    """Persist a LedgerState in a single JSON file (atomic writes)."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path).expanduser().absolute()

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> LedgerState:
        """Raises FileNotFoundError when no state has been saved yet."""
        payload = self.path.read_bytes()
        state = LedgerState.from_dict(msgspec.json.decode(payload))
        log.debug("loaded ledger state from %s (%d balances)", self.path, len(state.balances))
        return state

    def save(self, state: LedgerState) -> None:
        payload = msgspec.json.format(msgspec.json.encode(state.to_dict()), indent=2)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        _atomic_write(self.path, payload)
        log.debug("saved ledger state to %s", self.path)


__all__ = ["AllowanceKey", "LedgerState", "FileStateStore"]
