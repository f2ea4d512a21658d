"""Schémas de réponses d'erreur de l'API."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Corps JSON renvoyé pour toute erreur classifiée."""

    status: str = "error"
    code: str = Field(..., description="Code machine de l'erreur")
    message: str = Field(..., description="Message lisible")
    backend_error: Optional[Any] = Field(default=None, description="Erreur structurée renvoyée par Elasticsearch")
    details: Dict[str, Any] = Field(default_factory=dict)
