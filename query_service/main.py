# query_service/main.py
import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .api import register_error_handlers, router
from .config import QueryServiceSettings, get_settings
from .core import NamespaceResolver, QueryCompiler, QueryEngine, QueryExecutor
from .storage import (
    ElasticsearchClient,
    QueryStore,
    ensure_query_index_template,
    mask_credentials,
    wait_until_ready,
)
from .templates import JinjaRenderer

logger = logging.getLogger(__name__)


def configure_logging(settings: QueryServiceSettings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def build_engine(client: ElasticsearchClient, settings: QueryServiceSettings) -> QueryEngine:
    resolver = NamespaceResolver(
        collection=settings.QUERY_COLLECTION,
        system_prefix=settings.SYSTEM_NAMESPACE_PREFIX,
    )
    return QueryEngine(
        store=QueryStore(client, resolver),
        executor=QueryExecutor(client),
        renderer=JinjaRenderer(),
        compiler=QueryCompiler(),
        resolver=resolver,
    )


def create_app(settings: Optional[QueryServiceSettings] = None) -> FastAPI:
    """Crée et configure l'application FastAPI"""
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Gestionnaire de cycle de vie : readiness gate Elasticsearch puis moteur."""
        logger.info("🚀 Démarrage du Query Service...")
        logger.info(f"🔗 Elasticsearch: {mask_credentials(settings.ELASTIC_SERVER)}")

        client = ElasticsearchClient(settings.ELASTIC_SERVER, timeout=settings.ELASTIC_TIMEOUT_SECONDS)

        async def readiness_check():
            info = await client.info()
            await ensure_query_index_template(
                client,
                collection=settings.QUERY_COLLECTION,
                shards=settings.QUERY_INDEX_SHARDS,
                system_suffix=settings.SYSTEM_ACCOUNT_SUFFIX,
            )
            return info

        try:
            info = await wait_until_ready(readiness_check, settings.STARTUP_RETRY_DELAYS)
        except Exception:
            logger.error("❌ ERREUR CRITIQUE lors de l'initialisation, arrêt du service")
            await client.close()
            raise

        version = (info.get("version") or {}).get("number", "unknown")
        logger.info(f"📊 Elasticsearch version: {version}")

        app.state.elasticsearch_client = client
        app.state.query_engine = build_engine(client, settings)
        logger.info("🎉 Query Service initialisé avec succès!")

        yield

        logger.info("🛑 Query Service en arrêt...")
        app.state.query_engine = None
        await client.close()

    app = FastAPI(
        title="Query Service API",
        version="1.0.0",
        description="Stockage et exécution de requêtes Elasticsearch paramétrées par compte",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.query_engine = None

    register_error_handlers(app)
    app.include_router(router, prefix=settings.API_PREFIX)

    @app.get("/health")
    async def health():
        return {
            "service": "query_service",
            "version": "1.0.0",
            "status": "running",
            "initialized": app.state.query_engine is not None,
        }

    return app


# Instance de l'application
app = create_app()

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        app,
        host=settings.SERVICE_HOST,
        port=settings.SERVICE_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
