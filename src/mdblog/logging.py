"""Console logger for build progress."""

from __future__ import annotations

import logging
import sys


def get_logger(name: str = "mdblog", verbose: bool = False) -> logging.Logger:
    log = logging.getLogger(name)
    log.setLevel(logging.DEBUG if verbose else logging.INFO)
    if log.handlers:
        return log
    h = logging.StreamHandler(sys.stdout)
    h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    log.addHandler(h)
    log.propagate = False
    return log
