"""
Locate, read and validate the bootstrap settings.

Resolution order:

1. Explicit *path* passed by the caller.
2. ``$ARGOMATIC_CONFIG`` when set.
3. ``resources/defaults.yaml`` shipped inside the wheel.
"""

from __future__ import annotations

import os
from importlib.resources import as_file, files
from pathlib import Path
from typing import Optional

import yaml

from .schema import BootstrapSettings

ENV_VAR = "ARGOMATIC_CONFIG"

_DEFAULTS = files("argomatic.resources") / "defaults.yaml"


def _load_yaml(path: Path) -> dict:
    """Return the mapping stored in *path*, or an empty dict for empty files."""
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


def _resolve_path(explicit: Optional[Path]) -> Path:
    if explicit is not None:
        return explicit
    env = os.environ.get(ENV_VAR)
    if env:
        return Path(env).expanduser().resolve()
    with as_file(_DEFAULTS) as p:
        return p


def load_settings(path: Optional[str | Path] = None) -> BootstrapSettings:
    """Return validated :class:`BootstrapSettings`.

    Args:
        path: Explicit YAML file. ``None`` falls back to ``$ARGOMATIC_CONFIG``
            and then to the packaged defaults.

    Returns:
        The validated settings.

    Raises:
        RuntimeError: When the file cannot be read, is not valid YAML or
            fails validation.
    """
    explicit = Path(path).expanduser().resolve() if path else None
    source = _resolve_path(explicit)

    try:
        data = _load_yaml(source)
        if not isinstance(data, dict):
            raise ValueError(f"{source} must contain a mapping, got {type(data).__name__}")
        return BootstrapSettings(**data)
    except Exception as exc:  # OSError, yaml.YAMLError or pydantic.ValidationError
        raise RuntimeError(f"Invalid configuration – {exc}") from exc
