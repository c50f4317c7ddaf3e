"""
Property tests: random call sequences never create or destroy value.

Every call either succeeds or raises a LedgerError; after each one the
balances must still sum to the supply and stay within the width, and a
failed call must leave the state exactly as it was.
"""
from __future__ import annotations

import copy
from typing import List, Tuple

from hypothesis import given, settings
from hypothesis import strategies as st

from token_ledger.errors import LedgerError
from token_ledger.runtime import Ledger
from token_ledger.safe_uint import max_uint
from token_ledger.state import LedgerState
from token_ledger.types.events import ApprovalEvent, TransferEvent

ACCOUNTS = [b"a", b"b", b"c", b"d"]
OWNER = ACCOUNTS[0]
BITS = 16

accounts = st.sampled_from(ACCOUNTS)
amounts = st.one_of(
    st.integers(min_value=0, max_value=64),
    st.integers(min_value=0, max_value=max_uint(BITS)),
)

Op = Tuple[str, bytes, bytes, bytes, int]

ops = st.lists(
    st.tuples(
        st.sampled_from(["transfer", "approve", "transfer_from"]),
        accounts,
        accounts,
        accounts,
        amounts,
    ),
    max_size=40,
)


def _apply(ledger: Ledger, op: Op):
    kind, caller, x, y, amount = op
    if kind == "transfer":
        return ledger.transfer(caller, x, amount)
    if kind == "approve":
        return ledger.approve(caller, x, amount)
    return ledger.transfer_from(caller, x, y, amount)


@settings(max_examples=150, deadline=None)
@given(supply=st.integers(min_value=0, max_value=max_uint(BITS)), seq=ops)
def test_supply_is_conserved(supply: int, seq: List[Op]) -> None:
    state = LedgerState(owner=OWNER, total_supply=supply)
    ledger = Ledger(state, balance_bits=BITS)
    ledger.initialize(OWNER)

    for op in seq:
        before = copy.deepcopy(state)
        try:
            events = _apply(ledger, op)
        except LedgerError:
            assert state == before
            continue
        assert sum(state.balances.values()) == supply
        assert all(0 <= v <= max_uint(BITS) for v in state.balances.values())
        assert all(0 <= v <= max_uint(BITS) for v in state.allowances.values())
        assert isinstance(events[-1], (TransferEvent, ApprovalEvent))


@settings(max_examples=100, deadline=None)
@given(seq=ops)
def test_sink_sees_exactly_the_returned_events(seq: List[Op]) -> None:
    state = LedgerState(owner=OWNER, total_supply=1000)
    ledger = Ledger(state, balance_bits=BITS)
    ledger.initialize(OWNER)

    emitted = []
    for op in seq:
        try:
            emitted.extend(_apply(ledger, op))
        except LedgerError:
            pass
    assert ledger.sink.events == emitted
    assert [r.seq for r in ledger.sink.records()] == list(range(len(emitted)))
