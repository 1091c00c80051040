"""Opt-in trace output for filesystem internals.

``debug()`` reports renames, allocations and journal writes on stderr when
MODKEEPER_DEBUG is 1/true/yes. Events meant for operators go through
structlog instead.
"""

import os
import sys
from typing import Any

from modkeeper.core.constants import ENV_DEBUG

# read once; tests reload the module to change it
_DEBUG_ENABLED = os.environ.get(ENV_DEBUG, "").lower() in ("1", "true", "yes")


def debug(msg: Any) -> None:
    """Write ``[DEBUG] msg`` to stderr when tracing is enabled."""
    if _DEBUG_ENABLED:
        print(f"[DEBUG] {msg}", file=sys.stderr)
