"""
Shared fixtures for the token ledger tests.

Accounts are short byte strings so failures stay readable. The default
genesis gives ALICE ownership of a supply of 1000 under the default width.
"""
from __future__ import annotations

import pytest

from token_ledger.genesis import Genesis
from token_ledger.runtime import Dispatcher, Ledger
from token_ledger.state import InMemoryEventSink, LedgerState

ALICE = b"alice"
BOB = b"bob"
CAROL = b"carol"
DAVE = b"dave"

SUPPLY = 1000


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in (
        "TOKEN_LEDGER_BALANCE_BITS",
        "TOKEN_LEDGER_STATE_PATH",
        "TOKEN_LEDGER_EVENTS_PATH",
        "TOKEN_LEDGER_LOG_LEVEL",
        "TOKEN_LEDGER_BUILD",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def genesis() -> Genesis:
    return Genesis(owner=ALICE, total_supply=SUPPLY, name=b"Example Token", ticker=b"EXT")


@pytest.fixture
def state(genesis: Genesis) -> LedgerState:
    return LedgerState.from_genesis(genesis)


@pytest.fixture
def sink() -> InMemoryEventSink:
    return InMemoryEventSink()


@pytest.fixture
def ledger(state: LedgerState, sink: InMemoryEventSink) -> Ledger:
    return Ledger(state, sink=sink)


@pytest.fixture
def live(ledger: Ledger) -> Ledger:
    """A ledger whose supply has already been minted to ALICE."""
    ledger.initialize(ALICE)
    return ledger


@pytest.fixture
def dispatcher(ledger: Ledger) -> Dispatcher:
    return Dispatcher(ledger)
