"""
Configuration package façade.

* :func:`load_settings` – resolve and validate the bootstrap settings.
* :class:`BootstrapSettings` – the Pydantic model behind them.
"""

from .loader import load_settings  # noqa: F401
from .schema import BootstrapSettings  # noqa: F401

__all__: list[str] = ["load_settings", "BootstrapSettings"]
