"""
Training template definitions for lift531.

Each template is described by a Template object consumed by the main-set
and supplemental-set generators.
"""

from .base import Template
from .registry import TEMPLATE_REGISTRY, get_template

__all__ = [
    "Template",
    "TEMPLATE_REGISTRY",
    "get_template",
]
