"""Pytest configuration for argomatic tests."""

import locale
import logging

import pytest
import structlog


@pytest.fixture(autouse=True)
def restore_process_state(monkeypatch):
    """Undo locale, root-logger and structlog changes made by a test.

    Args:
        monkeypatch: Used to drop ``$ARGOMATIC_CONFIG`` so the packaged
            defaults are always in effect unless a test sets it.
    """
    monkeypatch.delenv("ARGOMATIC_CONFIG", raising=False)

    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    numeric = locale.setlocale(locale.LC_NUMERIC)

    yield

    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    locale.setlocale(locale.LC_NUMERIC, numeric)
    structlog.reset_defaults()
