"""
Moteur d'exécution des requêtes stockées.

Fetch → (static | bind → render body → render idx_pattern → compile)
→ resolve path → dispatch → classify. Each call is independent; nothing is
cached or retried between requests.
"""

import json
import logging
from typing import Any, Dict, Mapping

from ..models.query import Query, QueryResult, QuerySearchResults
from ..templates.renderer import Renderer
from .binder import bind_parameters
from .compiler import QueryCompiler
from .definition import StaticQuery, TemplatedQuery, definition_of
from .executor import ExecutionResult, QueryExecutor, ResolvedQuery
from .namespace import AccountScope, NamespaceResolver

logger = logging.getLogger(__name__)


class QueryEngine:
    """Expose les opérations RunQuery, ExecuteStoredQuery, UpsertQuery, GetQuery et SearchQueries."""

    def __init__(
        self,
        store: Any,
        executor: QueryExecutor,
        renderer: Renderer,
        compiler: QueryCompiler,
        resolver: NamespaceResolver,
    ):
        self.store = store
        self.executor = executor
        self.renderer = renderer
        self.compiler = compiler
        self.resolver = resolver

    def resolve(
        self,
        scope: AccountScope,
        query: Query,
        overrides: Mapping[str, str],
        system_execution: bool = False,
    ) -> ResolvedQuery:
        """Turn a query definition into a body and target path."""
        definition = definition_of(query, self.compiler)

        if isinstance(definition, TemplatedQuery):
            bound = bind_parameters(definition.parameters, overrides)
            body_text = self.renderer.render(definition.template, bound, source="query_template")
            idx_pattern = self.renderer.render(definition.idx_pattern, bound, source="idx_pattern")
            body = self.compiler.compile(body_text)
        elif isinstance(definition, StaticQuery):
            body = definition.body
            idx_pattern = definition.idx_pattern
        else:
            raise TypeError(f"Unsupported query definition: {type(definition).__name__}")

        account = self.resolver.data_account(scope, system_execution)
        path = self.resolver.execution_path(account, query.model, idx_pattern)
        return ResolvedQuery(body=body, idx_pattern=idx_pattern, path=path)

    async def run_query(self, scope: AccountScope, query: Query, overrides: Mapping[str, str]) -> ExecutionResult:
        resolved = self.resolve(scope, query, overrides)
        return await self.executor.execute(resolved)

    async def execute_stored_query(
        self,
        scope: AccountScope,
        query_id: str,
        overrides: Mapping[str, str],
        system_execution: bool = False,
    ) -> ExecutionResult:
        # la définition vient toujours du compte appelant, même en exécution système
        stored = await self.store.get(scope, query_id)
        resolved = self.resolve(scope, stored.source, overrides, system_execution=system_execution)
        if system_execution:
            logger.info(f"System execution of {query_id} for account {scope.account} on {resolved.path}")
        return await self.executor.execute(resolved)

    async def upsert_query(self, scope: AccountScope, query: Query) -> Dict[str, Any]:
        query_json = query.query_json
        if query.query is not None:
            query_json = json.dumps(query.query)

        document = query.model_copy(update={"query": None, "query_json": query_json})
        return await self.store.put(scope, document)

    async def get_query(self, scope: AccountScope, query_id: str) -> QueryResult:
        result = await self.store.get(scope, query_id)
        source = result.source
        if not source.is_templated and source.query_json.strip():
            source = source.model_copy(update={"query": self.compiler.compile(source.query_json)})
        return result.model_copy(update={"source": source})

    async def search_queries(self, scope: AccountScope, criteria: Dict[str, Any]) -> QuerySearchResults:
        response = await self.store.search(scope, criteria)
        return QuerySearchResults.from_elasticsearch(response)
