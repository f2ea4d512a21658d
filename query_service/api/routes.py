import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from ..core.engine import QueryEngine
from ..core.namespace import AccountScope
from ..models.query import Query
from ..models.responses import ErrorResponse
from .dependencies import get_account_scope, get_parameter_overrides, get_query_engine

logger = logging.getLogger(__name__)

# Les routes doivent être protégées en amont (contrôle d'accès au compte).
router = APIRouter(
    tags=["queries"],
    responses={
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)


@router.post("/run/{account}")
async def run_query(
    query: Query,
    scope: AccountScope = Depends(get_account_scope),
    overrides: Dict[str, str] = Depends(get_parameter_overrides),
    engine: QueryEngine = Depends(get_query_engine),
) -> Dict[str, Any]:
    """Exécute une définition fournie dans le corps, sans la stocker."""
    execution = await engine.run_query(scope, query, overrides)
    return execution.result


@router.get("/exec/{account}/{query_id}")
async def execute_query(
    query_id: str,
    scope: AccountScope = Depends(get_account_scope),
    overrides: Dict[str, str] = Depends(get_parameter_overrides),
    engine: QueryEngine = Depends(get_query_engine),
) -> Dict[str, Any]:
    execution = await engine.execute_stored_query(scope, query_id, overrides)
    return execution.result


@router.get("/exec/system/{account}/{query_id}")
async def execute_system_query(
    query_id: str,
    scope: AccountScope = Depends(get_account_scope),
    overrides: Dict[str, str] = Depends(get_parameter_overrides),
    engine: QueryEngine = Depends(get_query_engine),
) -> Dict[str, Any]:
    """Exécute la requête du compte contre les données du namespace système."""
    execution = await engine.execute_stored_query(scope, query_id, overrides, system_execution=True)
    return execution.result


@router.post("/upsert/{account}")
async def upsert_query(
    query: Query,
    scope: AccountScope = Depends(get_account_scope),
    engine: QueryEngine = Depends(get_query_engine),
) -> Dict[str, Any]:
    return await engine.upsert_query(scope, query)


@router.get("/get/{account}/{query_id}")
async def get_query(
    query_id: str,
    scope: AccountScope = Depends(get_account_scope),
    engine: QueryEngine = Depends(get_query_engine),
) -> Dict[str, Any]:
    result = await engine.get_query(scope, query_id)
    return result.model_dump(by_alias=True)


@router.post("/search/{account}")
async def search_queries(
    criteria: Dict[str, Any] = Body(...),
    scope: AccountScope = Depends(get_account_scope),
    engine: QueryEngine = Depends(get_query_engine),
) -> Dict[str, Any]:
    results = await engine.search_queries(scope, criteria)
    return results.model_dump(by_alias=True)
