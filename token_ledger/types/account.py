"""
token_ledger.types.account — account identity helpers.

The ledger treats an account id as opaque, non-empty `bytes`; how an id is
produced or authenticated belongs to the host. These helpers only convert
between bytes and the text forms used in JSON files and on the command line:

  * "0x"-prefixed hex        -> the decoded bytes
  * any other non-empty text -> its UTF-8 bytes

Formatting always produces "0x" hex so the JSON form round-trips losslessly.
"""

from __future__ import annotations

from typing import Union

from ..errors import InvalidAccount

AccountId = bytes
HexLike = Union[str, bytes, bytearray, memoryview]


def is_account(value: object) -> bool:
    return isinstance(value, bytes) and len(value) > 0


def require_account(value: object) -> AccountId:
    if not is_account(value):
        raise InvalidAccount(value)
    return value  # type: ignore[return-value]


def parse_account(value: HexLike) -> AccountId:
    """Parse a text or bytes-like account id."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return require_account(bytes(value))
    if not isinstance(value, str):
        raise InvalidAccount(value)
    s = value.strip()
    if s.startswith(("0x", "0X")):
        try:
            return require_account(bytes.fromhex(s[2:]))
        except ValueError:
            raise InvalidAccount(value) from None
    return require_account(s.encode("utf-8"))


def format_account(account: AccountId) -> str:
    return "0x" + bytes(account).hex()


def parse_bytes(value: HexLike) -> bytes:
    """Same text rules as `parse_account`, but empty values are allowed (names, tickers)."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if not isinstance(value, str):
        raise TypeError(f"expected str or bytes, got {type(value).__name__}")
    if value.startswith(("0x", "0X")):
        return bytes.fromhex(value[2:])
    return value.encode("utf-8")


def format_bytes(value: bytes) -> str:
    return "0x" + bytes(value).hex()


__all__ = [
    "AccountId",
    "HexLike",
    "is_account",
    "require_account",
    "parse_account",
    "format_account",
    "parse_bytes",
    "format_bytes",
]
