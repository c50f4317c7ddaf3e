"""
token_ledger.genesis — deployment-time configuration of a ledger.

A genesis fixes the four configuration fields that never change afterwards:
the `owner` allowed to run `initialize`, the fixed `total_supply`, and the
descriptive `name` / `ticker` byte strings.

JSON form (byte fields accept "0x" hex or plain text):

    {
      "owner": "0x616c696365",
      "total_supply": 1000,
      "name": "Example Token",
      "ticker": "EXT"
    }
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Union

import msgspec

from .errors import LedgerError
from .safe_uint import DEFAULT_BITS, is_uint
from .types.account import (AccountId, format_account, format_bytes,
                            parse_account, parse_bytes)

log = logging.getLogger(__name__)


class GenesisError(ValueError):
    """Malformed or out-of-range genesis configuration."""


@dataclass(frozen=True)
class Genesis:
    owner: AccountId
    total_supply: int
    name: bytes = b""
    ticker: bytes = b""

    def validate(self, *, bits: int = DEFAULT_BITS) -> "Genesis":
        if not isinstance(self.owner, bytes) or not self.owner:
            raise GenesisError("owner must be non-empty bytes")
        if not is_uint(self.total_supply, bits):
            raise GenesisError(f"total_supply must be an integer in [0, 2**{bits} - 1]")
        if not isinstance(self.name, bytes) or not isinstance(self.ticker, bytes):
            raise GenesisError("name and ticker must be bytes")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "owner": format_account(self.owner),
            "total_supply": str(self.total_supply),
            "name": format_bytes(self.name),
            "ticker": format_bytes(self.ticker),
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any], *, bits: int = DEFAULT_BITS) -> "Genesis":
        try:
            owner = parse_account(d["owner"])
            supply = d["total_supply"]
            name = parse_bytes(d.get("name", b""))
            ticker = parse_bytes(d.get("ticker", b""))
        except KeyError as e:
            raise GenesisError(f"genesis is missing field {e.args[0]!r}") from None
        except (LedgerError, TypeError, ValueError) as e:
            raise GenesisError(f"invalid genesis field: {e}") from e
        if isinstance(supply, str):
            try:
                supply = int(supply, 0)
            except ValueError:
                raise GenesisError(f"total_supply is not an integer: {supply!r}") from None
        return cls(owner=owner, total_supply=supply, name=name, ticker=ticker).validate(bits=bits)


def load_genesis(path: Union[str, Path], *, bits: int = DEFAULT_BITS) -> Genesis:
    """Read and validate a genesis JSON file."""
    p = Path(path)
    try:
        data = msgspec.json.decode(p.read_bytes())
    except msgspec.DecodeError as e:
        raise GenesisError(f"{p}: not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise GenesisError(f"{p}: genesis must be a JSON object")
    genesis = Genesis.from_dict(data, bits=bits)
    log.debug("loaded genesis from %s (supply=%d)", p, genesis.total_supply)
    return genesis


__all__ = ["Genesis", "GenesisError", "load_genesis"]
