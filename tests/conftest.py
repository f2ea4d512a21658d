"""
Configuration globale des tests pour le Query Service.
"""
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import pytest

# Configuration environnement AVANT tous les imports du service
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("ELASTIC_SERVER", "http://es:9200")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from query_service.config import QueryServiceSettings
from query_service.core import NamespaceResolver, QueryCompiler, QueryEngine, QueryExecutor
from query_service.storage import QueryStore
from query_service.templates import JinjaRenderer

FIXED_NOW = datetime(2020, 3, 15, 10, 30, 0, tzinfo=timezone.utc)


class FakeElasticsearch:
    """Backend en mémoire : documents par chemin ``_doc`` et réponses programmées."""

    def __init__(self):
        self.calls: List[Tuple[str, str, Optional[Dict[str, Any]]]] = []
        self.documents: Dict[str, Dict[str, Any]] = {}
        self.responses: Dict[Tuple[str, str], Tuple[int, Dict[str, Any]]] = {}

    def respond(self, method: str, path: str, status: int, body: Dict[str, Any]) -> None:
        self.responses[(method, path)] = (status, body)

    def store(self, path: str, source: Dict[str, Any]) -> None:
        self.documents[path] = source

    async def request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None):
        self.calls.append((method, path, body))
        if (method, path) in self.responses:
            return self.responses[(method, path)]

        if "/_doc/" in path:
            index, _, doc_id = path.partition("/_doc/")
            if method == "PUT":
                created = path not in self.documents
                self.documents[path] = body
                return (201 if created else 200), {
                    "_index": index,
                    "_id": doc_id,
                    "result": "created" if created else "updated",
                }
            if method == "GET":
                if path not in self.documents:
                    return 404, {"_index": index, "_id": doc_id, "found": False}
                return 200, {
                    "_index": index,
                    "_id": doc_id,
                    "_version": 1,
                    "found": True,
                    "_source": self.documents[path],
                }

        return 200, {"took": 1, "timed_out": False, "hits": {"total": {"value": 0}, "hits": []}}

    async def get(self, path: str):
        return await self.request("GET", path)

    async def post(self, path: str, body):
        return await self.request("POST", path, body)

    async def put(self, path: str, body):
        return await self.request("PUT", path, body)

    def posted(self) -> List[Tuple[str, Optional[Dict[str, Any]]]]:
        return [(path, body) for method, path, body in self.calls if method == "POST"]


@pytest.fixture
def settings() -> QueryServiceSettings:
    return QueryServiceSettings(
        ELASTIC_SERVER="http://es:9200",
        STARTUP_RETRY_DELAYS=[0.0, 0.0],
        SYSTEM_NAMESPACE_PREFIX="system",
    )


@pytest.fixture
def renderer() -> JinjaRenderer:
    return JinjaRenderer(clock=lambda: FIXED_NOW)


@pytest.fixture
def resolver() -> NamespaceResolver:
    return NamespaceResolver(collection="queries", system_prefix="system")


@pytest.fixture
def fake_es() -> FakeElasticsearch:
    return FakeElasticsearch()


@pytest.fixture
def engine(fake_es, renderer, resolver) -> QueryEngine:
    return QueryEngine(
        store=QueryStore(fake_es, resolver),
        executor=QueryExecutor(fake_es),
        renderer=renderer,
        compiler=QueryCompiler(),
        resolver=resolver,
    )
