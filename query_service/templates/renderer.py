"""
Rendu des templates de requêtes (corps et idx_pattern) avec Jinja2.

Le moteur est caché derrière le protocole ``Renderer`` : le reste du service
n'appelle que ``render(template, context, source)``.
"""

import logging
import re
from typing import Any, Dict, Mapping, Optional, Protocol

from jinja2 import StrictUndefined, TemplateSyntaxError
from jinja2.exceptions import TemplateError
from jinja2.sandbox import SandboxedEnvironment

from ..exceptions import TemplateRenderError
from .functions import Clock, build_filters, build_globals, utc_now

logger = logging.getLogger(__name__)

# {{.status}} / {{- .status }} : référence à un paramètre préfixée d'un point
_DOT_REFERENCE_RE = re.compile(r"(\{\{-?\s*)\.(?=[A-Za-z_])")


class Renderer(Protocol):
    def render(self, template: str, context: Mapping[str, str], source: str = "template") -> str:
        ...


def normalize_references(template: str) -> str:
    """Réécrit ``{{.name}}`` en ``{{name}}``."""
    return _DOT_REFERENCE_RE.sub(r"\1", template)


class JinjaRenderer:
    """Renderer basé sur un environnement Jinja2 sandboxé.

    Templates are parsed on every call, nothing is cached between requests.
    Undefined names raise, so a typo in a template surfaces as a
    ``TemplateRenderError`` rather than silently rendering an empty string.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or utc_now
        self.jinja_env = SandboxedEnvironment(
            undefined=StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
            cache_size=0,
        )
        self.jinja_env.filters.update(build_filters())
        self.jinja_env.globals.update(build_globals(self.clock))

    def render(self, template: str, context: Mapping[str, str], source: str = "template") -> str:
        variables: Dict[str, Any] = {"params": dict(context)}
        variables.update(context)

        try:
            compiled = self.jinja_env.from_string(normalize_references(template))
        except TemplateSyntaxError as e:
            logger.warning(f"Template syntax error in {source} (line {e.lineno}): {e.message}")
            raise TemplateRenderError(
                f"Template syntax error in {source}: {e.message}", source=source, line=e.lineno
            ) from e

        try:
            return compiled.render(variables)
        except TemplateError as e:
            logger.warning(f"Template error while rendering {source}: {e}")
            raise TemplateRenderError(f"Template error in {source}: {e}", source=source) from e
        except Exception as e:
            # erreur levée par une fonction de la bibliothèque (type, format de date...)
            logger.warning(f"Template function failed while rendering {source}: {type(e).__name__}: {e}")
            raise TemplateRenderError(
                f"Template execution failed in {source}: {type(e).__name__}: {e}", source=source
            ) from e
