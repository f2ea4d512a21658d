"""Compilation du texte rendu en corps de requête structuré."""

import json
import logging
from typing import Any, Dict

from ..exceptions import QueryCompileError

logger = logging.getLogger(__name__)

EXCERPT_RADIUS = 30


def _excerpt(text: str, position: int) -> str:
    start = max(position - EXCERPT_RADIUS, 0)
    end = min(position + EXCERPT_RADIUS, len(text))
    prefix = "..." if start > 0 else ""
    suffix = "..." if end < len(text) else ""
    return f"{prefix}{text[start:end]}{suffix}"


class QueryCompiler:
    """Parse le JSON rendu ; aucune correction n'est tentée sur un texte invalide."""

    def compile(self, text: str) -> Dict[str, Any]:
        try:
            compiled = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning(f"Rendered query is not valid JSON (line {e.lineno}, column {e.colno}): {e.msg}")
            raise QueryCompileError(
                f"Rendered query is not valid JSON: {e.msg} at line {e.lineno} column {e.colno}",
                line=e.lineno,
                column=e.colno,
                position=e.pos,
                excerpt=_excerpt(text, e.pos),
            ) from e

        if not isinstance(compiled, dict):
            raise QueryCompileError(
                f"Rendered query must be a JSON object, got {type(compiled).__name__}",
                excerpt=_excerpt(text, 0),
            )
        return compiled
