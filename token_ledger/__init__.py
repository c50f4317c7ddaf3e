"""
token_ledger — a fungible-token ledger core.

Balances, delegated allowances and the bookkeeping rules around them, driven
one call at a time by a host. This package exposes only lightweight metadata
at import time; import the runtime explicitly:

    from token_ledger.runtime import Ledger, Dispatcher
"""

from .version import __version__, version_metadata

__all__ = ["__version__", "version_metadata"]
