from __future__ import annotations

import logging
from pathlib import Path

import pytest

from token_ledger.config import LedgerConfig, load_config, summary


def test_defaults() -> None:
    cfg = load_config({})
    assert cfg == LedgerConfig()
    assert cfg.balance_bits == 128
    assert cfg.state_path == Path("ledger_state.json")
    assert cfg.events_path is None
    assert cfg.log_level_no == logging.WARNING


def test_env_values() -> None:
    cfg = load_config(
        {
            "TOKEN_LEDGER_BALANCE_BITS": "64",
            "TOKEN_LEDGER_STATE_PATH": "/tmp/x/state.json",
            "TOKEN_LEDGER_EVENTS_PATH": "/tmp/x/events.jsonl",
            "TOKEN_LEDGER_LOG_LEVEL": "debug",
        }
    )
    assert cfg.balance_bits == 64
    assert cfg.state_path == Path("/tmp/x/state.json")
    assert cfg.events_path == Path("/tmp/x/events.jsonl")
    assert cfg.log_level == "DEBUG"
    assert cfg.to_dict()["events_path"] == "/tmp/x/events.jsonl"


def test_overrides_win_and_none_is_ignored() -> None:
    env = {"TOKEN_LEDGER_BALANCE_BITS": "64", "TOKEN_LEDGER_LOG_LEVEL": "INFO"}
    cfg = load_config(env, overrides={"balance_bits": 32, "log_level": None})
    assert cfg.balance_bits == 32
    assert cfg.log_level == "INFO"


@pytest.mark.parametrize(
    "env",
    [
        {"TOKEN_LEDGER_BALANCE_BITS": "12"},
        {"TOKEN_LEDGER_BALANCE_BITS": "lots"},
        {"TOKEN_LEDGER_LOG_LEVEL": "LOUD"},
    ],
)
def test_malformed_values(env) -> None:
    with pytest.raises(ValueError):
        load_config(env)


def test_summary() -> None:
    s = summary(load_config({}))
    assert s == "ledger{bits=128, state=ledger_state.json, events=-, log=WARNING}"
