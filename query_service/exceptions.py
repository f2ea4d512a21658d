"""
Exceptions du Query Service

Taxonomie des erreurs d'exécution d'une requête stockée. Chaque erreur porte
le statut HTTP et le code machine exposés à l'appelant.
"""

from typing import Any, Dict, Optional


class QueryServiceError(Exception):
    """Erreur de base du Query Service."""

    status_code: int = 500
    error_code: str = "QueryServiceError"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def backend_error(self) -> Optional[Any]:
        return self.details.get("backend_error")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": "error",
            "code": self.error_code,
            "message": self.message,
            "backend_error": self.backend_error,
            "details": {k: v for k, v in self.details.items() if k != "backend_error"},
        }


class TemplateRenderError(QueryServiceError):
    """Le template (corps ou idx_pattern) ne compile pas ou échoue au rendu."""

    status_code = 422
    error_code = "TemplateError"

    def __init__(self, message: str, source: str, line: Optional[int] = None):
        super().__init__(message, {"source": source, "line": line})
        self.source = source
        self.line = line


class QueryCompileError(QueryServiceError):
    """Le texte rendu n'est pas un objet JSON valide."""

    status_code = 422
    error_code = "QueryCompileError"

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        position: Optional[int] = None,
        excerpt: Optional[str] = None,
    ):
        super().__init__(message, {
            "line": line,
            "column": column,
            "position": position,
            "excerpt": excerpt,
        })
        self.line = line
        self.column = column
        self.position = position
        self.excerpt = excerpt


class DefinitionNotFoundError(QueryServiceError):
    """Aucune requête stockée pour cet identifiant."""

    status_code = 404
    error_code = "QueryNotFound"

    def __init__(self, query_id: str, path: str):
        super().__init__(f"Query {query_id} not found.", {"query_id": query_id, "path": path})
        self.query_id = query_id
        self.path = path


class ClientQueryError(QueryServiceError):
    """Elasticsearch a rejeté la requête (4xx), le plus souvent index absent."""

    status_code = 404
    error_code = "IndexNotFound"

    def __init__(self, path: str, backend_status: int, backend_error: Any = None):
        super().__init__("Index not found.", {
            "path": path,
            "backend_status": backend_status,
            "backend_error": backend_error,
        })
        self.path = path
        self.backend_status = backend_status


class BackendUnavailableError(QueryServiceError):
    """Erreur réseau/transport ou réponse 5xx d'Elasticsearch."""

    status_code = 503
    error_code = "BackendUnavailable"

    def __init__(
        self,
        message: str = "Error communicating with database.",
        backend_status: Optional[int] = None,
        backend_error: Any = None,
    ):
        super().__init__(message, {
            "backend_status": backend_status,
            "backend_error": backend_error,
        })
        self.backend_status = backend_status


class StorageError(QueryServiceError):
    """Elasticsearch a refusé l'écriture ou la recherche de documents de requêtes."""

    status_code = 500

    def __init__(self, message: str, error_code: str, backend_status: int, backend_error: Any = None):
        super().__init__(message, {
            "backend_status": backend_status,
            "backend_error": backend_error,
        })
        self.error_code = error_code
        self.backend_status = backend_status
