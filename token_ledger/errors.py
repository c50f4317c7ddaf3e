"""
token_ledger.errors — caller-visible ledger exceptions.

The ledger communicates failures via *typed exceptions*. The dispatcher turns
them into failed call results; direct users of `Ledger` catch them. Every error
is terminal for the call it was raised in and guarantees that no state
mutation survived (the journal reverts before the exception escapes).

Hierarchy
---------
LedgerError (base)
 ├─ AlreadyInitialized     : initialize() ran before
 ├─ NotOwner               : initialize() by someone other than the owner
 ├─ AccountNotFound        : source account has no balance record
 ├─ AllowanceNotFound      : no allowance entry for the consulted pair
 ├─ InsufficientBalance    : balance below the requested amount
 ├─ InsufficientAllowance  : allowance below the requested amount
 ├─ ArithmeticOverflow     : result above the configured width maximum
 ├─ ArithmeticUnderflow    : result below zero
 ├─ InvalidAmount          : amount not an int within the width
 ├─ InvalidAccount         : account id not non-empty bytes
 ├─ UnknownOperation       : dispatcher was asked for an unknown call
 └─ InvalidArguments       : dispatched call has the wrong arguments

This module imports nothing from the rest of the package so it can be used
from the lowest layers (safe_uint, journal) without cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class LedgerError(Exception):
    """
    Base ledger error.

    Attributes:
        message: Human-readable explanation.
        code:    Stable machine code string (e.g., 'NOT_OWNER').
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "ledger error"
    code: str = "LEDGER_ERROR"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for results/logs."""
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


def _hex(account: Any) -> Any:
    if isinstance(account, (bytes, bytearray)):
        return "0x" + bytes(account).hex()
    return account


class AlreadyInitialized(LedgerError):
    def __init__(self, message: str = "ledger already initialized"):
        super().__init__(message=message, code="ALREADY_INITIALIZED")


class NotOwner(LedgerError):
    def __init__(self, caller: Optional[bytes] = None, *, message: str = "only the owner can initialize"):
        data = {"caller": _hex(caller)} if caller is not None else None
        super().__init__(message=message, code="NOT_OWNER", data=data)


class AccountNotFound(LedgerError):
    """The account has never been funded, so it has no balance record."""

    def __init__(self, account: Optional[bytes] = None, *, message: str = "account does not own this token"):
        data = {"account": _hex(account)} if account is not None else None
        super().__init__(message=message, code="ACCOUNT_NOT_FOUND", data=data)


class AllowanceNotFound(LedgerError):
    def __init__(
        self,
        owner: Optional[bytes] = None,
        spender: Optional[bytes] = None,
        *,
        message: str = "allowance does not exist",
    ):
        d: Dict[str, Any] = {}
        if owner is not None:
            d["owner"] = _hex(owner)
        if spender is not None:
            d["spender"] = _hex(spender)
        super().__init__(message=message, code="ALLOWANCE_NOT_FOUND", data=d or None)


class InsufficientBalance(LedgerError):
    def __init__(
        self,
        *,
        available: Optional[int] = None,
        requested: Optional[int] = None,
        message: str = "not enough balance",
    ):
        d: Dict[str, Any] = {}
        if available is not None:
            d["available"] = available
        if requested is not None:
            d["requested"] = requested
        super().__init__(message=message, code="INSUFFICIENT_BALANCE", data=d or None)


class InsufficientAllowance(LedgerError):
    def __init__(
        self,
        *,
        available: Optional[int] = None,
        requested: Optional[int] = None,
        message: str = "not enough allowance",
    ):
        d: Dict[str, Any] = {}
        if available is not None:
            d["available"] = available
        if requested is not None:
            d["requested"] = requested
        super().__init__(message=message, code="INSUFFICIENT_ALLOWANCE", data=d or None)


class ArithmeticOverflow(LedgerError):
    def __init__(self, message: str = "overflow in checked addition", *, bits: Optional[int] = None):
        data = {"bits": bits} if bits is not None else None
        super().__init__(message=message, code="ARITHMETIC_OVERFLOW", data=data)


class ArithmeticUnderflow(LedgerError):
    def __init__(self, message: str = "underflow in checked subtraction", *, bits: Optional[int] = None):
        data = {"bits": bits} if bits is not None else None
        super().__init__(message=message, code="ARITHMETIC_UNDERFLOW", data=data)


class InvalidAmount(LedgerError):
    def __init__(self, value: Any = None, *, message: str = "amount must be an unsigned integer within the balance width"):
        data = {"value": repr(value)} if value is not None else None
        super().__init__(message=message, code="INVALID_AMOUNT", data=data)


class InvalidAccount(LedgerError):
    def __init__(self, value: Any = None, *, message: str = "account id must be non-empty bytes"):
        data = {"value": repr(value)} if value is not None else None
        super().__init__(message=message, code="INVALID_ACCOUNT", data=data)


class UnknownOperation(LedgerError):
    def __init__(self, op: str, *, message: str = "unknown ledger operation"):
        super().__init__(message=message, code="UNKNOWN_OPERATION", data={"op": op})


class InvalidArguments(LedgerError):
    def __init__(self, op: str, detail: str, *, message: str = "arguments do not match the operation"):
        super().__init__(message=message, code="INVALID_ARGUMENTS", data={"op": op, "detail": detail})


# -------- helper utilities ---------------------------------------------------


def error_to_result_fields(err: LedgerError) -> Dict[str, Any]:
    """
    Map a LedgerError to canonical call-result fields.

    Returns:
        {"status": "failed", "error": {code, message, data?}}
    """
    return {"status": "failed", "error": err.to_dict()}


__all__ = [
    "LedgerError",
    "AlreadyInitialized",
    "NotOwner",
    "AccountNotFound",
    "AllowanceNotFound",
    "InsufficientBalance",
    "InsufficientAllowance",
    "ArithmeticOverflow",
    "ArithmeticUnderflow",
    "InvalidAmount",
    "InvalidAccount",
    "UnknownOperation",
    "InvalidArguments",
    "error_to_result_fields",
]
