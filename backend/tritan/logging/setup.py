"""
Logging setup.

Modules log through ``getLogger(__name__)``; this only installs
a handler and level on the ``tritan`` logger tree.
"""

from __future__ import annotations

import logging
import sys
from typing import Union

_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: Union[int, str] = "INFO") -> logging.Logger:
    """Attach a single stderr handler to the ``tritan`` logger."""
    root = logging.getLogger("tritan")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)
    # sys.stderr may have been swapped since the last call
    for existing in [h for h in root.handlers if getattr(h, "_tritan", False)]:
        root.removeHandler(existing)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._tritan = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    return root
