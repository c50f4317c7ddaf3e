"""
Command-line host for the token ledger (`token-ledger`, built on typer).
"""

from .main import app, main

__all__ = ["app", "main"]
