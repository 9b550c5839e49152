"""
Template registry.

All supported training templates are registered here.  Use get_template()
to look up a Template by its id string.

Templates are loaded from per-template YAML files in the bundled
``src/lift531/templates/`` directory at import time.  If nothing can be
loaded a RuntimeError is raised; the application cannot start without
template definitions.
"""

from .base import Template


def _build_registry() -> dict[str, Template]:
    from .loader import load_templates_from_yaml

    loaded = load_templates_from_yaml()
    if not loaded:
        raise RuntimeError(
            "lift531: no template definitions could be loaded from YAML. "
            "Check that src/lift531/templates/*.yaml files are present and valid."
        )
    return loaded


TEMPLATE_REGISTRY: dict[str, Template] = _build_registry()


def get_template(template_id: str) -> Template:
    """
    Return the Template for the given template_id.

    Args:
        template_id: One of "classic", "bbb", "fsl", "ssl", "5x531"

    Returns:
        Template for the requested id

    Raises:
        ValueError: If template_id is not in the registry
    """
    if template_id not in TEMPLATE_REGISTRY:
        valid = ", ".join(TEMPLATE_REGISTRY)
        raise ValueError(f"Unknown template '{template_id}'. Valid IDs: {valid}")
    return TEMPLATE_REGISTRY[template_id]
