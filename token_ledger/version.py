"""
token_ledger.version — semantic version string and build metadata.

Kept tiny and dependency-free so it can be imported very early.

Usage:
    from token_ledger.version import __version__, version_metadata
"""

from __future__ import annotations

import os
import platform
from functools import lru_cache
from typing import Dict

# Bump this when making a tagged release. Use semver (major.minor.patch).
__version__ = "0.1.0"


@lru_cache(maxsize=1)
def version_metadata() -> Dict[str, str]:
    """
    Structured version info for logs / diagnostics.

    Keys:
        version  -> semantic version (from __version__)
        build    -> TOKEN_LEDGER_BUILD override, or "local"
        python   -> interpreter version
    """
    return {
        "version": __version__,
        "build": os.getenv("TOKEN_LEDGER_BUILD", "").strip() or "local",
        "python": platform.python_version(),
    }


__all__ = ["__version__", "version_metadata"]
