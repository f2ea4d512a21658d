"""Persistance des définitions de requêtes dans Elasticsearch."""

import logging
from typing import Any, Dict

from ..core.namespace import AccountScope, NamespaceResolver
from ..exceptions import BackendUnavailableError, DefinitionNotFoundError, StorageError
from ..models.query import Query, QueryResult

logger = logging.getLogger(__name__)


class QueryStore:
    """Get/put/search des documents de requêtes, un index par compte."""

    def __init__(self, client: Any, resolver: NamespaceResolver):
        self.client = client
        self.resolver = resolver

    async def put(self, scope: AccountScope, query: Query) -> Dict[str, Any]:
        """Remplace intégralement le document ``query.machine_name``."""
        path = self.resolver.document_path(scope, query.machine_name)
        logger.info(f"Upsert query record account={scope.account} machine_name={query.machine_name}")

        status, body = await self.client.put(path, query.to_document())
        if 200 <= status < 300:
            return body

        logger.error(f"Es returned a non 200 on upsert ({status}) for {path}")
        if status >= 500:
            raise BackendUnavailableError(backend_status=status, backend_error=body.get("error"))
        raise StorageError(
            "there was a problem upserting the query",
            error_code="UpsertError",
            backend_status=status,
            backend_error=body.get("error"),
        )

    async def get(self, scope: AccountScope, query_id: str) -> QueryResult:
        path = self.resolver.document_path(scope, query_id)
        status, body = await self.client.get(path)

        if 400 <= status < 500 or (status == 200 and not body.get("found", True)):
            logger.info(f"Query {query_id} not found at {path}")
            raise DefinitionNotFoundError(query_id, path)
        if not 200 <= status < 300:
            logger.error(f"EsError fetching {path}: status {status}")
            raise BackendUnavailableError(backend_status=status, backend_error=body.get("error"))

        return QueryResult.model_validate(body)

    async def search(self, scope: AccountScope, criteria: Dict[str, Any]) -> Dict[str, Any]:
        path = self.resolver.document_search_path(scope)
        status, body = await self.client.post(path, criteria)

        if 200 <= status < 300:
            return body

        logger.warning(f"Query search failed on {path}: status {status}")
        if status >= 500:
            raise BackendUnavailableError(backend_status=status, backend_error=body.get("error"))
        raise StorageError(
            "There was a problem searching",
            error_code="SearchError",
            backend_status=status,
            backend_error=body.get("error"),
        )
