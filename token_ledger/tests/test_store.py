from __future__ import annotations

import json
from pathlib import Path

import pytest

from token_ledger.state.store import FileStateStore, LedgerState


def mk_state() -> LedgerState:
    return LedgerState(
        owner=b"alice",
        total_supply=2**120,
        name=b"Example Token",
        ticker=b"EXT",
        initialized=True,
        balances={b"alice": 2**120 - 300, b"bob": 300},
        allowances={(b"bob", b"carol"): 100, (b"alice", b"bob"): 0},
    )


def test_dict_form_is_lossless() -> None:
    st = mk_state()
    d = st.to_dict()
    assert d["total_supply"] == str(2**120)
    assert d["balances"]["0x626f62"] == "300"
    assert {"owner": "0x626f62", "spender": "0x6361726f6c", "amount": "100"} in d["allowances"]
    assert LedgerState.from_dict(d) == st


def test_file_store_round_trip(tmp_path: Path) -> None:
    store = FileStateStore(tmp_path / "nested" / "state.json")
    assert not store.exists()
    with pytest.raises(FileNotFoundError):
        store.load()

    st = mk_state()
    store.save(st)
    assert store.exists()
    assert json.loads(store.path.read_text())["initialized"] is True
    assert store.load() == st
    assert not (store.path.parent / ".state.json.tmp").exists()


def test_from_genesis_starts_empty() -> None:
    from token_ledger.genesis import Genesis

    st = LedgerState.from_genesis(Genesis(owner=b"alice", total_supply=5))
    assert st.initialized is False
    assert st.balances == {}
    assert st.allowances == {}
    assert st.circulating() == 0


def test_check_width_flags_every_field() -> None:
    assert mk_state().check_width(128) is not None
    with pytest.raises(ValueError, match="total_supply"):
        mk_state().check_width(64)

    st = LedgerState(owner=b"a", total_supply=10, balances={b"a": 256})
    with pytest.raises(ValueError, match="balance of 0x61"):
        st.check_width(8)

    st = LedgerState(owner=b"a", total_supply=10, allowances={(b"a", b"b"): 300})
    with pytest.raises(ValueError, match="allowance"):
        st.check_width(8)


@pytest.mark.parametrize("field", ["total_supply", "balance", "allowance"])
def test_from_dict_rejects_negative_amounts(field: str) -> None:
    d = LedgerState(
        owner=b"a", total_supply=10, balances={b"a": 10}, allowances={(b"a", b"b"): 1}
    ).to_dict()
    if field == "total_supply":
        d["total_supply"] = "-1"
    elif field == "balance":
        d["balances"]["0x61"] = "-1"
    else:
        d["allowances"][0]["amount"] = "-1"
    with pytest.raises(ValueError, match="negative"):
        LedgerState.from_dict(d)
