from .binder import bind_parameters
from .compiler import QueryCompiler
from .definition import QueryDefinition, StaticQuery, TemplatedQuery, definition_of
from .engine import QueryEngine
from .executor import ExecutionResult, QueryExecutor, ResolvedQuery
from .namespace import AccountScope, NamespaceResolver, ScopeKind

__all__ = [
    "bind_parameters",
    "QueryCompiler",
    "QueryDefinition",
    "StaticQuery",
    "TemplatedQuery",
    "definition_of",
    "QueryEngine",
    "ExecutionResult",
    "QueryExecutor",
    "ResolvedQuery",
    "AccountScope",
    "NamespaceResolver",
    "ScopeKind",
]
