from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from token_ledger.errors import (ArithmeticOverflow, ArithmeticUnderflow,
                                 InvalidAmount)
from token_ledger.safe_uint import (DEFAULT_BITS, checked_add, checked_sub,
                                    is_uint, max_uint, require_bits,
                                    require_uint)


def test_default_width_is_u128() -> None:
    assert DEFAULT_BITS == 128
    assert max_uint() == 2**128 - 1
    assert max_uint(8) == 255


@pytest.mark.parametrize("bits", [0, 7, 12, 264, -8])
def test_require_bits_rejects_bad_widths(bits: int) -> None:
    with pytest.raises(ValueError):
        require_bits(bits)


def test_require_bits_rejects_non_int() -> None:
    with pytest.raises(ValueError):
        require_bits(True)
    with pytest.raises(ValueError):
        require_bits("128")  # type: ignore[arg-type]


@pytest.mark.parametrize("value", [-1, 256, True, 1.0, "1", None])
def test_is_uint_rejects_out_of_domain(value: object) -> None:
    assert not is_uint(value, 8)
    with pytest.raises(InvalidAmount):
        require_uint(value, 8)


def test_checked_add_at_boundary() -> None:
    assert checked_add(254, 1, bits=8) == 255
    with pytest.raises(ArithmeticOverflow) as ei:
        checked_add(255, 1, bits=8)
    assert ei.value.code == "ARITHMETIC_OVERFLOW"
    assert ei.value.data == {"bits": 8}


def test_checked_sub_never_goes_negative() -> None:
    assert checked_sub(5, 5) == 0
    with pytest.raises(ArithmeticUnderflow):
        checked_sub(4, 5)


@given(
    x=st.integers(min_value=0, max_value=2**64 - 1),
    y=st.integers(min_value=0, max_value=2**64 - 1),
)
def test_add_then_sub_restores(x: int, y: int) -> None:
    bits = 64
    try:
        s = checked_add(x, y, bits=bits)
    except ArithmeticOverflow:
        assert x + y > max_uint(bits)
        return
    assert checked_sub(s, y, bits=bits) == x
