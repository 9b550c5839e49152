"""
YAML → Template loader.

Loads template definitions from individual YAML files in the bundled
``src/lift531/templates/`` directory.  Each file (e.g. bbb.yaml) contains a
flat template definition matching the Template schema.

Usage (internal, called by registry.py):
    from .loader import load_templates_from_yaml
    templates = load_templates_from_yaml()   # dict or None on failure
"""

from __future__ import annotations

import warnings
from pathlib import Path

import yaml

from .base import Template

_REQUIRED_TEMPLATE_FIELDS: frozenset[str] = frozenset(
    {
        "id",
        "name",
        "description",
        "has_supplemental",
    }
)


def template_from_dict(d: dict) -> Template:
    """Convert a raw dict (from YAML) to a Template.

    Raises ValueError if any required field is absent or invalid.
    """
    missing = _REQUIRED_TEMPLATE_FIELDS - set(d)
    if missing:
        raise ValueError(f"Template missing fields: {sorted(missing)}")

    default_pct = d.get("default_percentage")

    return Template(
        id=str(d["id"]),
        name=str(d["name"]),
        description=str(d["description"]),
        has_supplemental=bool(d["has_supplemental"]),
        percentage_source=str(d.get("percentage_source", "fixed")),  # type: ignore[arg-type]
        sets=int(d.get("sets", 0)),
        reps=int(d.get("reps", 0)),
        default_percentage=int(default_pct) if default_pct is not None else None,
        modifies_main_sets=bool(d.get("modifies_main_sets", False)),
        display_order=int(d.get("display_order", 0)),
    )


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML file; return {} when it is empty or not a mapping."""
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    return data if isinstance(data, dict) else {}


def _get_bundled_templates_dir() -> Path | None:
    """Return path to the bundled templates/ data directory, or None if not found."""
    # loader.py lives at src/lift531/core/templates/loader.py
    # three levels up → src/lift531/
    candidate = Path(__file__).parent.parent.parent / "templates"
    return candidate if candidate.is_dir() else None


def load_templates_from_yaml(templates_dir: Path | None = None) -> dict[str, Template] | None:
    """Return {template_id: Template} loaded from per-template YAML files.

    Definitions are ordered by ``display_order``.  A file that cannot be
    parsed or fails validation is skipped with a warning.

    Returns None (rather than raising) so the registry can report the
    failure itself.
    """
    directory = templates_dir if templates_dir is not None else _get_bundled_templates_dir()
    if directory is None:
        return None

    loaded: list[Template] = []
    for p in sorted(directory.glob("*.yaml")):
        try:
            raw = _load_yaml_file(p)
            if not raw:
                continue
            loaded.append(template_from_dict(raw))
        except (yaml.YAMLError, ValueError, TypeError) as exc:
            warnings.warn(
                f"lift531: skipping template '{p.stem}' — {exc}",
                stacklevel=2,
            )

    loaded.sort(key=lambda t: t.display_order)
    result = {t.id: t for t in loaded}
    return result if result else None
