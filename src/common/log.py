"""Logging setup shared by the command-line entry points."""
from __future__ import annotations

import logging
import sys
from typing import Optional


def setup_logging(verbose: bool = False, level: Optional[int] = None) -> None:
    """Configure the root logger; safe to call more than once.

    Args:
        verbose: If True, log at DEBUG, otherwise INFO
        level: Optional explicit log level (overrides verbose)
    """

    if level is None:
        level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
