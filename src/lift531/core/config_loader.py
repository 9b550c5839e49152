"""
YAML → initial settings loader.

Reads optional user overrides for the settings a fresh `init` starts from.
The file lives at ~/.lift531/config.yaml and has a single section:

    defaults:
      unit: kg
      rounding_increment: 2.5
      bar_weight: 20
      available_plates: [25, 20, 15, 10, 5, 2.5, 1.25]

Usage:
    from lift531.core.config_loader import load_default_settings
    settings = load_default_settings()

Unknown keys are ignored.  If the file has parse errors or invalid values,
a warning is issued and the built-in defaults from config.py are used.
"""

from __future__ import annotations

import os
import warnings
from dataclasses import fields
from pathlib import Path
from typing import Any

import yaml

from .models import Settings


def get_user_yaml_path() -> Path | None:
    """Return ~/.lift531/config.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".lift531" / "config.yaml"
    return p if p.exists() else None


def load_user_config(path: Path | None = None) -> dict[str, Any]:
    """
    Load the user config file.

    Returns:
        Parsed mapping, or {} if the file is absent, empty or unreadable
    """
    if path is None:
        path = get_user_yaml_path()
    if path is None:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"lift531: ignoring config file {path} — {exc}", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def load_default_settings(path: Path | None = None) -> Settings:
    """
    Build the initial Settings, applying ``defaults:`` overrides.

    Returns:
        Settings with user overrides merged over the built-in defaults
    """
    overrides = load_user_config(path).get("defaults") or {}
    if not isinstance(overrides, dict):
        warnings.warn("lift531: 'defaults' in config file must be a mapping", stacklevel=2)
        return Settings()

    known = {f.name for f in fields(Settings)}
    kwargs = {k: v for k, v in overrides.items() if k in known}

    try:
        if "available_plates" in kwargs:
            kwargs["available_plates"] = [float(p) for p in kwargs["available_plates"]]
        return Settings(**kwargs)
    except (TypeError, ValueError) as exc:
        warnings.warn(f"lift531: invalid defaults in config file — {exc}", stacklevel=2)
        return Settings()
