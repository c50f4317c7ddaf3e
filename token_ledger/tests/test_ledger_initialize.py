from __future__ import annotations

import copy

import pytest

from token_ledger.errors import (AlreadyInitialized, ArithmeticOverflow,
                                 InvalidAccount, NotOwner)
from token_ledger.runtime import Ledger
from token_ledger.state import LedgerState

ALICE = b"alice"
BOB = b"bob"
SUPPLY = 1000


def test_reads_before_initialize(ledger) -> None:
    assert ledger.is_initialized() is False
    assert ledger.owner() == ALICE
    assert ledger.total_supply() == SUPPLY
    assert ledger.name() == b"Example Token"
    assert ledger.ticker() == b"EXT"
    assert ledger.balance_of(ALICE) == 0
    assert ledger.has_account(ALICE) is False
    assert ledger.holders() == []


def test_owner_initializes_and_receives_supply(ledger, sink) -> None:
    events = ledger.initialize(ALICE)
    assert events == ()
    assert ledger.is_initialized() is True
    assert ledger.balance_of(ALICE) == SUPPLY
    assert ledger.holders() == [ALICE]
    assert len(sink) == 0


def test_non_owner_is_rejected_without_change(ledger, state) -> None:
    before = copy.deepcopy(state)
    with pytest.raises(NotOwner) as ei:
        ledger.initialize(BOB)
    assert ei.value.data == {"caller": "0x" + BOB.hex()}
    assert state == before


def test_second_initialize_fails(live, state) -> None:
    before = copy.deepcopy(state)
    with pytest.raises(AlreadyInitialized):
        live.initialize(ALICE)
    assert state == before


def test_already_initialized_is_checked_before_owner(live) -> None:
    with pytest.raises(AlreadyInitialized):
        live.initialize(BOB)


def test_initialize_rejects_bad_caller(ledger) -> None:
    with pytest.raises(InvalidAccount):
        ledger.initialize(b"")
    assert ledger.is_initialized() is False


def test_zero_supply_genesis(state) -> None:
    state.total_supply = 0
    ledger = Ledger(state)
    ledger.initialize(ALICE)
    assert ledger.has_account(ALICE)
    assert ledger.balance_of(ALICE) == 0


def test_supply_at_width_maximum_is_spendable() -> None:
    a, b = b"a", b"b"
    ledger = Ledger(LedgerState(owner=a, total_supply=255), balance_bits=8)
    ledger.initialize(a)
    ledger.transfer(a, b, 1)
    assert (ledger.balance_of(a), ledger.balance_of(b)) == (254, 1)


def test_supply_beyond_width_is_refused_at_construction() -> None:
    with pytest.raises(ValueError):
        Ledger(LedgerState(owner=b"a", total_supply=1000), balance_bits=8)


def test_initialize_never_mints_beyond_width() -> None:
    state = LedgerState(owner=b"a", total_supply=255)
    ledger = Ledger(state, balance_bits=8)
    state.total_supply = 256
    with pytest.raises(ArithmeticOverflow) as ei:
        ledger.initialize(b"a")
    assert ei.value.data == {"bits": 8}
    assert state.balances == {}
    assert state.initialized is False
