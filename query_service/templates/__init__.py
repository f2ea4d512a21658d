"""
Templates de requêtes : bibliothèque de fonctions et renderer Jinja2.
"""

from .renderer import JinjaRenderer, Renderer, normalize_references

__all__ = ["JinjaRenderer", "Renderer", "normalize_references"]
