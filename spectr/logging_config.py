"""spectr logging configuration.

spectr logs through the standard library under the ``spectr`` logger
namespace. Output goes to stderr so JSON reports on stdout stay parseable.
The level comes from the explicit argument, then ``SPECTR_LOG_LEVEL``,
then defaults to WARNING.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from spectr.constants import LOG_LEVEL_ENV

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """Configure spectr logging.

    Args:
        level: Optional override for `SPECTR_LOG_LEVEL`.
    """
    if level:
        os.environ[LOG_LEVEL_ENV] = level

    resolved = (os.environ.get(LOG_LEVEL_ENV) or "WARNING").upper()
    numeric = logging.getLevelName(resolved)
    if not isinstance(numeric, int):
        numeric = logging.WARNING

    root = logging.getLogger("spectr")
    root.setLevel(numeric)
    if not any(getattr(h, "_spectr_handler", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        handler._spectr_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    root.propagate = False
