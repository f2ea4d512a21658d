"""Variantes d'exécution d'une requête stockée : statique ou templatée."""

from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union

from ..exceptions import QueryCompileError
from ..models.query import Parameter, Query
from .compiler import QueryCompiler


@dataclass(frozen=True)
class StaticQuery:
    body: Dict[str, Any]
    idx_pattern: str


@dataclass(frozen=True)
class TemplatedQuery:
    template: str
    idx_pattern: str
    parameters: Tuple[Parameter, ...]


QueryDefinition = Union[StaticQuery, TemplatedQuery]


def definition_of(query: Query, compiler: QueryCompiler) -> QueryDefinition:
    """Choisit la variante à exécuter.

    A non-empty template always wins, so a stale ``query``/``query_json`` left
    from an earlier static save is never executed alongside it.
    """
    if query.is_templated:
        return TemplatedQuery(
            template=query.query_template,
            idx_pattern=query.idx_pattern,
            parameters=tuple(query.parameters),
        )
    if query.query is not None:
        return StaticQuery(body=query.query, idx_pattern=query.idx_pattern)
    if query.query_json.strip():
        return StaticQuery(body=compiler.compile(query.query_json), idx_pattern=query.idx_pattern)
    raise QueryCompileError(f"Query {query.machine_name} has neither a query nor a query_template")
