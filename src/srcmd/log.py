"""Logging configuration for the srcmd command line tool.

The library modules only create loggers; handlers are installed here.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

_FORMATS = {
    "simple": "%(levelname)s: %(message)s",
    "standard": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}

_configured = False


def setup_logging(
    level: Optional[str] = None,
    format: Optional[str] = None,
    force: bool = False,
) -> None:
    """Configure the ``srcmd`` logger hierarchy.

    Args:
        level: Log level name. Defaults to SRCMD_LOG_LEVEL or WARNING.
        format: 'simple', 'standard' or a custom format string.
                Defaults to SRCMD_LOG_FORMAT or 'simple'.
        force: Reconfigure even if already configured.
    """
    global _configured
    if _configured and not force:
        return

    level_name = (level or os.getenv("SRCMD_LOG_LEVEL", "WARNING")).upper()
    fmt_name = format or os.getenv("SRCMD_LOG_FORMAT", "simple")
    fmt = _FORMATS.get(fmt_name, fmt_name)

    root = logging.getLogger("srcmd")
    for h in list(root.handlers):
        root.removeHandler(h)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level_name, logging.WARNING))
    root.propagate = False
    _configured = True
