"""
token_ledger.runtime.ledger
===========================

The fungible-token ledger: balances, delegated allowances, and the rules
that keep them honest.

Public interface
----------------
# reads (no side effects, never fail)
is_initialized() -> bool
owner() -> bytes
total_supply() -> int
name() -> bytes
ticker() -> bytes
balance_of(account: bytes) -> int                 # 0 when no record
allowance_of(owner: bytes, spender: bytes) -> int # 0 when absent
has_account(account: bytes) -> bool               # a balance record exists
holders() -> list[bytes]

# state-changing (explicit, already-authenticated caller)
initialize(caller) -> ()
transfer(caller, to, amount) -> (Transfer,)
approve(caller, spender, amount) -> (Approval,)
transfer_from(caller, from_, to, amount) -> (Approval, Transfer)

Every state-changing call runs inside one journal checkpoint. Preconditions
are checked before writing, and any error raised part-way (e.g. the inner
transfer of `transfer_from`) reverts the whole call, staged events included.
On success the call returns the events it emitted, and the same events are
released to the event sink.

Non-standard behaviour
----------------------
- `approve` is *additive*: it adds `amount` to the existing allowance instead
  of replacing it. This differs from the common ERC-20 convention.
- `transfer_from` consults and decrements the allowance keyed by
  `(from_, to)`, the transfer's own source and destination. The calling
  spender's identity plays no part in the check.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from ..errors import (AccountNotFound, AllowanceNotFound, AlreadyInitialized,
                      ArithmeticOverflow, InsufficientAllowance,
                      InsufficientBalance, NotOwner)
from ..safe_uint import (DEFAULT_BITS, checked_add, checked_sub, is_uint,
                         require_bits, require_uint)
from ..state.events import EventSink, InMemoryEventSink
from ..state.journal import Journal
from ..state.store import LedgerState
from ..types.account import AccountId, format_account, require_account
from ..types.events import ApprovalEvent, LedgerEvent, TransferEvent

log = logging.getLogger(__name__)

Events = Tuple[LedgerEvent, ...]


class Ledger:
    def __init__(
        self,
        state: LedgerState,
        *,
        sink: Optional[EventSink] = None,
        balance_bits: int = DEFAULT_BITS,
    ) -> None:
        self._bits = require_bits(balance_bits)
        state.check_width(self._bits)
        self.state = state
        self.sink: EventSink = sink if sink is not None else InMemoryEventSink()
        self.journal = Journal(state, on_release=self.sink.extend)

    @property
    def balance_bits(self) -> int:
        return self._bits

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def is_initialized(self) -> bool:
        return self.state.initialized

    def owner(self) -> AccountId:
        return self.state.owner

    def total_supply(self) -> int:
        return self.state.total_supply

    def name(self) -> bytes:
        return self.state.name

    def ticker(self) -> bytes:
        return self.state.ticker

    def balance_of(self, account: AccountId) -> int:
        return self.state.balances.get(account, 0)

    def allowance_of(self, owner: AccountId, spender: AccountId) -> int:
        return self.state.allowances.get((owner, spender), 0)

    def has_account(self, account: AccountId) -> bool:
        return account in self.state.balances

    def holders(self) -> List[AccountId]:
        return sorted(self.state.balances)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def initialize(self, caller: AccountId) -> Events:
        """One-time mint of the whole supply to the owner."""
        require_account(caller)
        with self.journal.atomic():
            if self.state.initialized:
                raise AlreadyInitialized()
            if caller != self.state.owner:
                raise NotOwner(caller)
            if not is_uint(self.state.total_supply, self._bits):
                raise ArithmeticOverflow("total supply exceeds the balance width", bits=self._bits)
            self.journal.set_balance(caller, self.state.total_supply)
            self.journal.set_initialized(True)
            events = self.journal.pending_events()
        log.debug("initialized: %s holds %d", format_account(caller), self.state.total_supply)
        return events

    def transfer(self, caller: AccountId, to: AccountId, amount: int) -> Events:
        with self.journal.atomic():
            self._transfer(caller, to, amount)
            events = self.journal.pending_events()
        return events

    def approve(self, caller: AccountId, spender: AccountId, amount: int) -> Events:
        """Add `amount` to the allowance of `spender` over `caller`'s balance."""
        require_account(caller)
        require_account(spender)
        require_uint(amount, self._bits)
        with self.journal.atomic():
            if self.journal.balance(caller) is None:
                raise AccountNotFound(caller)
            current = self.journal.allowance(caller, spender) or 0
            updated = checked_add(current, amount, bits=self._bits)
            self.journal.set_allowance(caller, spender, updated)
            self.journal.emit(ApprovalEvent(owner=caller, spender=spender, amount=updated))
            events = self.journal.pending_events()
        log.debug(
            "approve %s -> %s: allowance now %d",
            format_account(caller), format_account(spender), updated,
        )
        return events

    def transfer_from(self, caller: AccountId, from_: AccountId, to: AccountId, amount: int) -> Events:
        """
        Move `amount` from `from_` to `to` against the `(from_, to)` allowance.

        `caller` is validated but does not select the allowance.
        """
        require_account(caller)
        require_account(from_)
        require_account(to)
        require_uint(amount, self._bits)
        with self.journal.atomic():
            allowed = self.journal.allowance(from_, to)
            if allowed is None:
                raise AllowanceNotFound(from_, to)
            if allowed < amount:
                raise InsufficientAllowance(available=allowed, requested=amount)
            updated = checked_sub(allowed, amount, bits=self._bits)
            self.journal.set_allowance(from_, to, updated)
            self.journal.emit(ApprovalEvent(owner=from_, spender=to, amount=updated))
            self._transfer(from_, to, amount)
            events = self.journal.pending_events()
        return events

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _transfer(self, from_: AccountId, to: AccountId, amount: int) -> None:
        """Shared primitive; must run inside an open checkpoint."""
        require_account(from_)
        require_account(to)
        require_uint(amount, self._bits)

        from_bal = self.journal.balance(from_)
        if from_bal is None:
            raise AccountNotFound(from_)
        if from_bal < amount:
            raise InsufficientBalance(available=from_bal, requested=amount)

        new_from = checked_sub(from_bal, amount, bits=self._bits)
        # receiver read after the debit so that from_ == to nets to zero
        to_bal = new_from if to == from_ else (self.journal.balance(to) or 0)
        new_to = checked_add(to_bal, amount, bits=self._bits)

        self.journal.set_balance(from_, new_from)
        self.journal.set_balance(to, new_to)
        self.journal.emit(TransferEvent(from_=from_, to=to, amount=amount))
        log.debug("transfer %s -> %s: %d", format_account(from_), format_account(to), amount)


__all__ = ["Ledger", "Events"]
