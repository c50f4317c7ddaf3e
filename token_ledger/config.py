"""
token_ledger.config — runtime configuration for the token ledger.

This module centralizes knobs for:
  • Integer width used for balances and allowances (checked arithmetic bound)
  • Where the host keeps the persisted ledger state and the event log
  • Log verbosity for the CLI

Configuration may be provided via environment variables. Safe defaults are chosen so a
local run works out of the box.

Environment variables (all optional):
  TOKEN_LEDGER_BALANCE_BITS   -> 8..256, multiple of 8 (default: 128)
  TOKEN_LEDGER_STATE_PATH     -> path to the state JSON (default: ./ledger_state.json)
  TOKEN_LEDGER_EVENTS_PATH    -> path to a JSONL event log (default: unset, no log)
  TOKEN_LEDGER_LOG_LEVEL      -> DEBUG|INFO|WARNING|ERROR (default: WARNING)

Programmatic usage:
    from token_ledger.config import get_config
    cfg = get_config()
    ledger = Ledger(state, balance_bits=cfg.balance_bits)
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from .safe_uint import DEFAULT_BITS, require_bits

DEFAULT_STATE_PATH = "ledger_state.json"
DEFAULT_LOG_LEVEL = "WARNING"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _int_env(value: Optional[str], default: int) -> int:
    if value is None or value.strip() == "":
        return default
    try:
        return int(value.strip(), 10)
    except ValueError:
        raise ValueError(f"expected an integer, got {value!r}") from None


def _path_env(value: Optional[str]) -> Optional[Path]:
    if value is None or value.strip() == "":
        return None
    return Path(value.strip()).expanduser()


def _log_level(value: Optional[str], default: str) -> str:
    if value is None or value.strip() == "":
        return default
    lvl = value.strip().upper()
    if lvl not in _LOG_LEVELS:
        raise ValueError(f"log level must be one of {', '.join(_LOG_LEVELS)}, got {value!r}")
    return lvl


@dataclass(frozen=True)
class LedgerConfig:
    balance_bits: int = DEFAULT_BITS
    state_path: Path = Path(DEFAULT_STATE_PATH)
    events_path: Optional[Path] = None
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def log_level_no(self) -> int:
        return getattr(logging, self.log_level, logging.WARNING)

    def to_dict(self) -> Dict[str, object]:
        d = asdict(self)
        d["state_path"] = str(self.state_path)
        d["events_path"] = str(self.events_path) if self.events_path is not None else None
        return d


def load_config(
    env: Optional[Mapping[str, str]] = None,
    *,
    overrides: Optional[Mapping[str, Union[str, int, Path, None]]] = None,
) -> LedgerConfig:
    """
    Build a LedgerConfig from environment and optional overrides.

    Args:
        env: mapping to read variables from (default: os.environ)
        overrides: explicit field overrides; keys support
          'balance_bits', 'state_path', 'events_path', 'log_level'.
          A value of None means "not overridden".

    Raises:
        ValueError on malformed values (bad width, unknown log level).
    """
    env = os.environ if env is None else env
    ov = {k: v for k, v in dict(overrides or {}).items() if v is not None}

    if "balance_bits" in ov:
        bits = int(ov["balance_bits"])  # type: ignore[arg-type]
    else:
        bits = _int_env(env.get("TOKEN_LEDGER_BALANCE_BITS"), DEFAULT_BITS)
    require_bits(bits)

    if "state_path" in ov:
        state_path = Path(ov["state_path"]).expanduser()  # type: ignore[arg-type]
    else:
        state_path = _path_env(env.get("TOKEN_LEDGER_STATE_PATH")) or Path(DEFAULT_STATE_PATH)

    if "events_path" in ov:
        events_path: Optional[Path] = Path(ov["events_path"]).expanduser()  # type: ignore[arg-type]
    else:
        events_path = _path_env(env.get("TOKEN_LEDGER_EVENTS_PATH"))

    log_level = _log_level(
        str(ov["log_level"]) if "log_level" in ov else env.get("TOKEN_LEDGER_LOG_LEVEL"),
        DEFAULT_LOG_LEVEL,
    )

    return LedgerConfig(
        balance_bits=bits,
        state_path=state_path,
        events_path=events_path,
        log_level=log_level,
    )


@lru_cache(maxsize=1)
def get_config() -> LedgerConfig:
    """Cached global config for application bootstraps."""
    return load_config()


def summary(cfg: Optional[LedgerConfig] = None) -> str:
    """One-line human-friendly summary of the active configuration."""
    cfg = cfg or get_config()
    events = cfg.events_path if cfg.events_path is not None else "-"
    return (
        "ledger{"
        f"bits={cfg.balance_bits}, state={cfg.state_path}, events={events}, log={cfg.log_level}"
        "}"
    )


__all__ = [
    "DEFAULT_STATE_PATH",
    "DEFAULT_LOG_LEVEL",
    "LedgerConfig",
    "load_config",
    "get_config",
    "summary",
]
