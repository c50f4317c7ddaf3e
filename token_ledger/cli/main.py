"""
token-ledger — command-line host for a single token ledger.

The CLI plays the host: it keeps the ledger state in a JSON file between
invocations, authenticates nobody (the `--caller` option *is* the caller),
applies exactly one call per invocation, and appends committed events to an
optional JSONL log.

Commands:
  token-ledger genesis        Write a fresh, uninitialized state
  token-ledger init           Run initialize as --caller
  token-ledger transfer       Move tokens from --caller to --to
  token-ledger approve        Add to the allowance of --spender
  token-ledger transfer-from  Move tokens from --from to --to against the (from, to) allowance
  token-ledger balance        Show the balance of an account
  token-ledger allowance      Show an allowance
  token-ledger info           Show token configuration and totals
  token-ledger events         Dump the event log
  token-ledger version        Show version metadata

Global options:
  --state PATH       State file (env: TOKEN_LEDGER_STATE_PATH)
  --events PATH      JSONL event log (env: TOKEN_LEDGER_EVENTS_PATH)
  --bits INTEGER     Balance width in bits (env: TOKEN_LEDGER_BALANCE_BITS)
  --log-level TEXT   Logging level (env: TOKEN_LEDGER_LOG_LEVEL)

Accounts are given as 0x-hex or as plain text (taken as UTF-8 bytes).

Exit codes: 0 success, 1 the ledger rejected the call, 2 usage/state problems.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

import msgspec
import typer

from ..config import LedgerConfig, load_config, summary
from ..errors import LedgerError
from ..genesis import Genesis, GenesisError, load_genesis
from ..runtime.dispatcher import Dispatcher
from ..runtime.ledger import Ledger
from ..state.events import InMemoryEventSink, JsonlEventSink
from ..state.store import FileStateStore, LedgerState
from ..types.account import AccountId, format_account, parse_account
from ..version import version_metadata

log = logging.getLogger(__name__)

app = typer.Typer(
    name="token-ledger",
    help="Fungible-token ledger host",
    no_args_is_help=True,
    add_completion=False,
)


class GlobalContext:
    def __init__(self) -> None:
        self.cfg: LedgerConfig = LedgerConfig()


_ctx = GlobalContext()


@app.callback()
def main_callback(
    state: Optional[Path] = typer.Option(None, "--state", help="Ledger state file"),
    events: Optional[Path] = typer.Option(None, "--events", help="JSONL event log"),
    bits: Optional[int] = typer.Option(None, "--bits", help="Balance width in bits"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG|INFO|WARNING|ERROR"),
) -> None:
    """Fungible-token ledger host."""
    try:
        _ctx.cfg = load_config(
            overrides={
                "state_path": state,
                "events_path": events,
                "balance_bits": bits,
                "log_level": log_level,
            }
        )
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)

    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=_ctx.cfg.log_level_no,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    log.debug("config: %s", summary(_ctx.cfg))


# ------------------------------- helpers ------------------------------------


def _pretty(obj: Any) -> str:
    return json.dumps(obj, indent=2, ensure_ascii=False)


def _account(value: str, what: str) -> AccountId:
    try:
        return parse_account(value)
    except LedgerError:
        typer.echo(f"Error: invalid {what} account: {value!r}", err=True)
        raise typer.Exit(2)


def _store() -> FileStateStore:
    return FileStateStore(_ctx.cfg.state_path)


def _load_state() -> LedgerState:
    store = _store()
    if not store.exists():
        typer.echo(f"Error: no ledger state at {store.path}; run 'token-ledger genesis' first", err=True)
        raise typer.Exit(2)
    try:
        state = store.load()
    except (msgspec.DecodeError, ValueError, KeyError, TypeError, LedgerError) as e:
        typer.echo(f"Error: unreadable ledger state at {store.path}: {e}", err=True)
        raise typer.Exit(2)
    bits = _ctx.cfg.balance_bits
    try:
        return state.check_width(bits)
    except ValueError as e:
        typer.echo(f"Error: ledger state at {store.path} does not fit --bits {bits}: {e}", err=True)
        raise typer.Exit(2)


def _run_call(op: str, caller: AccountId, *args: Any) -> None:
    """Load → dispatch → save on success → log events → print result."""
    store = _store()
    state = _load_state()
    ledger = Ledger(state, sink=InMemoryEventSink(), balance_bits=_ctx.cfg.balance_bits)
    result = Dispatcher(ledger).dispatch(op, caller, *args)

    if result.is_success:
        store.save(state)
        if _ctx.cfg.events_path is not None and result.events:
            sink = JsonlEventSink(_ctx.cfg.events_path)
            try:
                sink.extend(result.events)
                sink.flush()
            finally:
                sink.close()

    typer.echo(_pretty(result.to_dict()))
    if not result.is_success:
        raise typer.Exit(1)


# ------------------------------- commands -----------------------------------


@app.command()
def genesis(
    owner: Optional[str] = typer.Option(None, "--owner", help="Account allowed to initialize"),
    supply: Optional[int] = typer.Option(None, "--supply", help="Fixed total supply"),
    name: str = typer.Option("", "--name", help="Token name"),
    ticker: str = typer.Option("", "--ticker", help="Token ticker"),
    from_file: Optional[Path] = typer.Option(None, "--from-file", help="Genesis JSON file"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing state file"),
) -> None:
    """Write a fresh, uninitialized ledger state."""
    bits = _ctx.cfg.balance_bits
    try:
        if from_file is not None:
            gen = load_genesis(from_file, bits=bits)
        else:
            if owner is None or supply is None:
                typer.echo("Error: --owner and --supply are required without --from-file", err=True)
                raise typer.Exit(2)
            gen = Genesis.from_dict(
                {"owner": owner, "total_supply": supply, "name": name, "ticker": ticker},
                bits=bits,
            )
    except (GenesisError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)

    store = _store()
    if store.exists() and not force:
        typer.echo(f"Error: {store.path} already exists (use --force to overwrite)", err=True)
        raise typer.Exit(2)
    store.save(LedgerState.from_genesis(gen))
    log.info("wrote genesis state to %s", store.path)
    typer.echo(_pretty({"state": str(store.path), "genesis": gen.to_dict()}))


@app.command("init")
def init_cmd(
    caller: str = typer.Option(..., "--caller", help="Calling account"),
) -> None:
    """Run the one-time initialize (owner only)."""
    _run_call("initialize", _account(caller, "caller"))


@app.command()
def transfer(
    caller: str = typer.Option(..., "--caller", help="Calling (sending) account"),
    to: str = typer.Option(..., "--to", help="Receiving account"),
    amount: int = typer.Option(..., "--amount", help="Amount to move"),
) -> None:
    """Move tokens from the caller to another account."""
    _run_call("transfer", _account(caller, "caller"), _account(to, "receiver"), amount)


@app.command()
def approve(
    caller: str = typer.Option(..., "--caller", help="Owning account"),
    spender: str = typer.Option(..., "--spender", help="Spender account"),
    amount: int = typer.Option(..., "--amount", help="Amount added to the allowance"),
) -> None:
    """Add to a spender's allowance (additive, not a reset)."""
    _run_call("approve", _account(caller, "caller"), _account(spender, "spender"), amount)


@app.command("transfer-from")
def transfer_from(
    caller: str = typer.Option(..., "--caller", help="Calling account"),
    from_: str = typer.Option(..., "--from", help="Source account"),
    to: str = typer.Option(..., "--to", help="Receiving account"),
    amount: int = typer.Option(..., "--amount", help="Amount to move"),
) -> None:
    """Move tokens between two accounts against the (from, to) allowance."""
    _run_call(
        "transfer_from",
        _account(caller, "caller"),
        _account(from_, "source"),
        _account(to, "receiver"),
        amount,
    )


@app.command()
def balance(account: str = typer.Argument(..., help="Account to query")) -> None:
    """Show the balance of an account (0 when it has no record)."""
    acct = _account(account, "queried")
    ledger = Ledger(_load_state(), balance_bits=_ctx.cfg.balance_bits)
    typer.echo(
        _pretty(
            {
                "account": format_account(acct),
                "balance": str(ledger.balance_of(acct)),
                "has_record": ledger.has_account(acct),
            }
        )
    )


@app.command()
def allowance(
    owner: str = typer.Argument(..., help="Owning account"),
    spender: str = typer.Argument(..., help="Spender account"),
) -> None:
    """Show the allowance of (owner, spender) (0 when absent)."""
    o = _account(owner, "owner")
    s = _account(spender, "spender")
    ledger = Ledger(_load_state(), balance_bits=_ctx.cfg.balance_bits)
    typer.echo(
        _pretty(
            {
                "owner": format_account(o),
                "spender": format_account(s),
                "allowance": str(ledger.allowance_of(o, s)),
            }
        )
    )


@app.command()
def info() -> None:
    """Show token configuration and totals."""
    state = _load_state()
    ledger = Ledger(state, balance_bits=_ctx.cfg.balance_bits)
    typer.echo(
        _pretty(
            {
                "name": ledger.name().decode("utf-8", "replace"),
                "ticker": ledger.ticker().decode("utf-8", "replace"),
                "owner": format_account(ledger.owner()),
                "total_supply": str(ledger.total_supply()),
                "initialized": ledger.is_initialized(),
                "holders": len(ledger.holders()),
                "circulating": str(state.circulating()),
                "balance_bits": ledger.balance_bits,
            }
        )
    )


@app.command()
def events(
    name: Optional[str] = typer.Option(None, "--name", help="Transfer or Approval"),
    account: Optional[str] = typer.Option(None, "--account", help="Only events touching this account"),
    limit: Optional[int] = typer.Option(None, "--limit", help="Maximum number of records"),
) -> None:
    """Dump the JSONL event log."""
    path = _ctx.cfg.events_path
    if path is None:
        typer.echo("Error: no event log configured (--events or TOKEN_LEDGER_EVENTS_PATH)", err=True)
        raise typer.Exit(2)
    acct = _account(account, "filter") if account is not None else None
    sink = JsonlEventSink(path)
    try:
        recs = [r.to_dict() for r in sink.records(name=name, account=acct, limit=limit)]
    finally:
        sink.close()
    typer.echo(_pretty(recs))


@app.command()
def version() -> None:
    """Show version metadata."""
    typer.echo(_pretty(version_metadata()))


def main() -> None:  # pragma: no cover - console entry point
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
