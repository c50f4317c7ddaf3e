"""
token_ledger.state.journal — journaling writes, checkpoints, revert/commit.

The journal wraps a `LedgerState` and gives the ledger an all-or-nothing
boundary around each call. Writes are applied to the state in place, and the
first write to every key inside a checkpoint records the value it replaced
(a first-write log). Emitted events are staged in the same checkpoint.

- `revert()` restores every touched key in reverse first-touch order and drops
  the staged events.
- `commit()` folds the checkpoint into its parent (the parent keeps its own,
  older, first-write entries). Committing the outermost checkpoint releases
  the staged events to the `on_release` callback, in emission order.

Checkpoints nest, so a host can wrap several ledger calls in one outer
checkpoint and commit or revert them as a unit:

    j = Journal(state, on_release=sink.extend)
    with j.atomic():
        j.set_balance(alice, 700)
        j.set_balance(bob, 300)
        j.emit(TransferEvent(alice, bob, 300))
    # state updated, sink received the event

Notes
-----
- This journal does not enforce economic rules; the ledger validates before
  it writes. Writes outside a checkpoint are rejected.
- Keys are ("balance", account), ("allowance", (owner, spender)) and
  ("initialized", None).
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import (Any, Callable, Dict, Iterator, List, Optional, Sequence,
                    Tuple)

from ..types.account import AccountId
from ..types.events import LedgerEvent
from .store import LedgerState

log = logging.getLogger(__name__)

_MISSING = object()

_Key = Tuple[str, Any]
ReleaseHook = Callable[[Sequence[LedgerEvent]], None]


@dataclass
class _Checkpoint:
    id: int
    # first-write log: key -> previous value (or _MISSING)
    prev: Dict[_Key, object] = field(default_factory=dict)
    events: List[LedgerEvent] = field(default_factory=list)


class Journal:
    def __init__(self, state: LedgerState, *, on_release: Optional[ReleaseHook] = None) -> None:
        self.state = state
        self.on_release = on_release
        self._stack: List[_Checkpoint] = []
        self._next_id = 1

    # --- reads ----

    def balance(self, account: AccountId) -> Optional[int]:
        """Balance record of `account`, or None when it has none."""
        return self.state.balances.get(account)

    def allowance(self, owner: AccountId, spender: AccountId) -> Optional[int]:
        return self.state.allowances.get((owner, spender))

    def depth(self) -> int:
        return len(self._stack)

    def pending_events(self) -> Tuple[LedgerEvent, ...]:
        """Events staged in the innermost open checkpoint."""
        if not self._stack:
            return ()
        return tuple(self._stack[-1].events)

    # --- writes ----

    def _top(self) -> _Checkpoint:
        if not self._stack:
            raise RuntimeError("journal write outside of a checkpoint")
        return self._stack[-1]

    def _remember(self, key: _Key, current: object) -> None:
        top = self._top()
        if key not in top.prev:
            top.prev[key] = current

    def set_balance(self, account: AccountId, value: int) -> None:
        self._remember(("balance", account), self.state.balances.get(account, _MISSING))
        self.state.balances[account] = value

    def set_allowance(self, owner: AccountId, spender: AccountId, value: int) -> None:
        key = (owner, spender)
        self._remember(("allowance", key), self.state.allowances.get(key, _MISSING))
        self.state.allowances[key] = value

    def set_initialized(self, value: bool) -> None:
        self._remember(("initialized", None), self.state.initialized)
        self.state.initialized = value

    def emit(self, event: LedgerEvent) -> None:
        self._top().events.append(event)

    # --- checkpoints ----

    def begin(self) -> int:
        cid = self._next_id
        self._next_id += 1
        self._stack.append(_Checkpoint(cid))
        return cid

    def commit(self) -> None:
        cp = self._top()
        self._stack.pop()
        if self._stack:
            parent = self._stack[-1]
            for key, old in cp.prev.items():
                parent.prev.setdefault(key, old)
            parent.events.extend(cp.events)
            return
        if cp.events and self.on_release is not None:
            self.on_release(tuple(cp.events))

    def revert(self) -> None:
        cp = self._top()
        self._stack.pop()
        for (kind, k), old in reversed(list(cp.prev.items())):
            if kind == "balance":
                target: Dict[Any, int] = self.state.balances
            elif kind == "allowance":
                target = self.state.allowances
            else:
                self.state.initialized = bool(old)
                continue
            if old is _MISSING:
                target.pop(k, None)
            else:
                target[k] = old  # type: ignore[assignment]
        log.debug("reverted checkpoint %d (%d keys, %d events dropped)", cp.id, len(cp.prev), len(cp.events))

    @contextmanager
    def atomic(self) -> Iterator["Journal"]:
        """Open a checkpoint; commit on normal exit, revert and re-raise on error."""
        self.begin()
        try:
            yield self
        except BaseException:
            self.revert()
            raise
        self.commit()


__all__ = ["Journal", "ReleaseHook"]
