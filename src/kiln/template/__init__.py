"""Kiln template package: the renderer and the shared template cache."""

from kiln.template.cache import TemplateCache, canonical_name
from kiln.template.core import Renderer, splice

__all__ = [
    "Renderer",
    "TemplateCache",
    "canonical_name",
    "splice",
]
