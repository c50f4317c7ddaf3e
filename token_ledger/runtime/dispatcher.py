"""
token_ledger.runtime.dispatcher — host-side call dispatcher.

The dispatcher plays the host's role around a `Ledger`: it receives one call
at a time (operation name, authenticated caller, arguments), runs it, and
turns the outcome into a `CallResult` instead of letting `LedgerError`s
escape. Calls are applied strictly in the order they are dispatched.

    d = Dispatcher(ledger)
    r = d.dispatch("transfer", alice, bob, 300)
    if not r.is_success:
        print(r.error.code)

`dispatch_batch` applies several calls inside one outer journal checkpoint:
either every call succeeds and all of them commit, or the first failure stops
the batch and none of them take effect.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Tuple

from ..errors import InvalidArguments, LedgerError, UnknownOperation
from ..types.account import AccountId, format_account
from ..types.result import CallResult
from .ledger import Ledger

log = logging.getLogger(__name__)

OPERATIONS: Tuple[str, ...] = ("initialize", "transfer", "approve", "transfer_from")


@dataclass(frozen=True)
class Call:
    op: str
    caller: AccountId
    args: Tuple[Any, ...] = ()


class _BatchAborted(Exception):
    def __init__(self, result: CallResult) -> None:
        super().__init__(result.op)
        self.result = result


class Dispatcher:
    def __init__(self, ledger: Ledger) -> None:
        self.ledger = ledger
        self._ops: Dict[str, Callable[..., Tuple[Any, ...]]] = {
            op: getattr(ledger, op) for op in OPERATIONS
        }
        self.calls = 0
        self.failures = 0

    def dispatch(self, op: str, caller: AccountId, *args: Any) -> CallResult:
        self.calls += 1
        fn = self._ops.get(op)
        try:
            if fn is None:
                raise UnknownOperation(op)
            _check_arguments(op, fn, caller, args)
            events = fn(caller, *args)
        except LedgerError as err:
            self.failures += 1
            log.info("call %s by %s failed: %s", op, _fmt(caller), err.code)
            return CallResult.failure(op, err)
        log.debug("call %s by %s ok (%d events)", op, _fmt(caller), len(events))
        return CallResult.success(op, events)

    def dispatch_call(self, call: Call) -> CallResult:
        return self.dispatch(call.op, call.caller, *call.args)

    def dispatch_batch(self, calls: Iterable[Call]) -> List[CallResult]:
        """
        All-or-nothing batch. Returns every result on success; on failure the
        results up to and including the failing call, with state untouched.
        """
        results: List[CallResult] = []
        try:
            with self.ledger.journal.atomic():
                for call in calls:
                    r = self.dispatch_call(call)
                    results.append(r)
                    if not r.is_success:
                        raise _BatchAborted(r)
        except _BatchAborted as aborted:
            log.info("batch aborted at call %d (%s)", len(results) - 1, aborted.result.op)
        return results


def _check_arguments(op: str, fn: Callable[..., Any], caller: Any, args: Tuple[Any, ...]) -> None:
    try:
        inspect.signature(fn).bind(caller, *args)
    except TypeError as e:
        raise InvalidArguments(op, str(e)) from None


def _fmt(caller: Any) -> str:
    if isinstance(caller, bytes):
        return format_account(caller)
    return repr(caller)


__all__ = ["OPERATIONS", "Call", "Dispatcher"]
