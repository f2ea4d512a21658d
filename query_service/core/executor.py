"""Envoi des requêtes compilées à Elasticsearch et classification des réponses."""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict

from ..exceptions import BackendUnavailableError, ClientQueryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedQuery:
    """Requête prête à l'envoi, valable le temps d'une exécution."""

    body: Dict[str, Any]
    idx_pattern: str
    path: str


@dataclass(frozen=True)
class ExecutionResult:
    status_code: int
    path: str
    result: Dict[str, Any]


class QueryExecutor:
    """Dispatch a ``ResolvedQuery`` and classify the backend answer.

    2xx returns the raw result, 4xx raises ``ClientQueryError`` and anything
    else raises ``BackendUnavailableError``. Nothing is retried here.
    """

    def __init__(self, client: Any):
        self.client = client

    async def execute(self, resolved: ResolvedQuery) -> ExecutionResult:
        start = time.perf_counter()
        status, body = await self.client.post(resolved.path, resolved.body)
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.info(f"Search code={status} path={resolved.path} took={elapsed_ms:.1f}ms")

        if 200 <= status < 300:
            return ExecutionResult(status_code=status, path=resolved.path, result=body)

        backend_error = body.get("error")
        if 400 <= status < 500:
            logger.warning(f"Search rejected by Elasticsearch ({status}) on {resolved.path}")
            raise ClientQueryError(resolved.path, backend_status=status, backend_error=backend_error)

        logger.error(f"EsError: status {status} on {resolved.path}")
        raise BackendUnavailableError(
            f"Elasticsearch returned status {status}",
            backend_status=status,
            backend_error=backend_error,
        )
