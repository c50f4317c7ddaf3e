"""
token_ledger.safe_uint
======================

Checked unsigned-integer helpers for ledger balances and allowances.

Goals
-----
- Integer-only arithmetic with an explicit bit width (default 128).
- **Checked** style only: overflow/underflow raise a typed `LedgerError`,
  the result never wraps and never clamps.
- Argument domains validated (0..2**bits-1) before any math.

Python ints are unbounded, so the width is a policy rather than a machine
limit: it is what makes "adding to a balance at the maximum" an observable
`ArithmeticOverflow` instead of silently growing.
"""

from __future__ import annotations

from typing import Final

from .errors import ArithmeticOverflow, ArithmeticUnderflow, InvalidAmount

DEFAULT_BITS: Final[int] = 128
MIN_BITS: Final[int] = 8
MAX_BITS: Final[int] = 256


def require_bits(bits: int) -> int:
    """Validate a configured width: 8..256 in multiples of 8."""
    if isinstance(bits, bool) or not isinstance(bits, int):
        raise ValueError(f"bit width must be an int, got {type(bits).__name__}")
    if bits < MIN_BITS or bits > MAX_BITS or bits % 8:
        raise ValueError(f"bit width must be a multiple of 8 in [{MIN_BITS}, {MAX_BITS}], got {bits}")
    return bits


def max_uint(bits: int = DEFAULT_BITS) -> int:
    """Largest representable value for `bits`."""
    return (1 << require_bits(bits)) - 1


def is_uint(x: object, bits: int = DEFAULT_BITS) -> bool:
    # bool is an int subclass; True is not an amount
    if isinstance(x, bool) or not isinstance(x, int):
        return False
    return 0 <= x <= max_uint(bits)


def require_uint(x: object, bits: int = DEFAULT_BITS) -> int:
    """Return `x` if it is an unsigned int within the width, else raise InvalidAmount."""
    if not is_uint(x, bits):
        raise InvalidAmount(x)
    return x  # type: ignore[return-value]


def checked_add(x: int, y: int, *, bits: int = DEFAULT_BITS) -> int:
    """Checked add: raise ArithmeticOverflow when x + y exceeds the width."""
    require_uint(x, bits)
    require_uint(y, bits)
    s = x + y
    if s > max_uint(bits):
        raise ArithmeticOverflow(bits=bits)
    return s


def checked_sub(x: int, y: int, *, bits: int = DEFAULT_BITS) -> int:
    """Checked sub: raise ArithmeticUnderflow when y > x."""
    require_uint(x, bits)
    require_uint(y, bits)
    if y > x:
        raise ArithmeticUnderflow(bits=bits)
    return x - y


__all__ = [
    "DEFAULT_BITS",
    "MIN_BITS",
    "MAX_BITS",
    "require_bits",
    "max_uint",
    "is_uint",
    "require_uint",
    "checked_add",
    "checked_sub",
]
