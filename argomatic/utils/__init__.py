"""
Public façade for the *utils* package.

Anything imported here becomes part of the stable public API.
"""

from __future__ import annotations

from .display import ERROR_PREFIX, echo_error, echo_error_rule
from .logging import LOGGING_LEVELS, configure_structlog, resolve_level

__all__ = [
    "ERROR_PREFIX",
    "echo_error",
    "echo_error_rule",
    "LOGGING_LEVELS",
    "configure_structlog",
    "resolve_level",
]
