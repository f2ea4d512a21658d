"""Gestionnaires d'erreurs de l'API."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..exceptions import QueryServiceError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Convertit les erreurs du moteur en réponses JSON classifiées."""

    @app.exception_handler(QueryServiceError)
    async def query_service_error_handler(request: Request, exc: QueryServiceError):
        if exc.status_code >= 500:
            logger.error(f"{exc.error_code}: {request.method} {request.url.path} - {exc.message}")
        else:
            logger.info(f"{exc.error_code}: {request.method} {request.url.path} - {exc.message}")

        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
