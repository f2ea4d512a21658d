"""Dépendances FastAPI du Query Service."""

from typing import Dict

from fastapi import Depends, HTTPException, Path, Request

from ..config import QueryServiceSettings, get_settings
from ..core.engine import QueryEngine
from ..core.namespace import AccountScope


def get_service_settings(request: Request) -> QueryServiceSettings:
    """Settings de l'application (ceux passés à ``create_app``), sinon settings globaux."""
    settings = getattr(request.app.state, "settings", None)
    return settings if settings is not None else get_settings()


def get_account_scope(
    account: str = Path(..., min_length=1, description="Compte propriétaire des requêtes"),
    settings: QueryServiceSettings = Depends(get_service_settings),
) -> AccountScope:
    """Traduit le segment ``{account}`` en scope typé.

    This is the only place the legacy "account id ends with the system
    suffix" convention is looked at; the engine only sees the typed scope.
    """
    suffix = settings.SYSTEM_ACCOUNT_SUFFIX
    if suffix and account.endswith(suffix):
        return AccountScope.system(account)
    return AccountScope.tenant(account)


def get_parameter_overrides(request: Request) -> Dict[str, str]:
    """Valeurs de paramètres fournies dans la query string (première valeur par nom)."""
    overrides: Dict[str, str] = {}
    for name, value in request.query_params.multi_items():
        overrides.setdefault(name, value)
    return overrides


def get_query_engine(request: Request) -> QueryEngine:
    engine = getattr(request.app.state, "query_engine", None)
    if engine is None:
        raise HTTPException(
            status_code=503,
            detail="Service non disponible - Client Elasticsearch non initialisé",
        )
    return engine
