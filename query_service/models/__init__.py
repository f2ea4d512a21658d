from .query import Parameter, Query, QueryResult, QuerySearchHit, QuerySearchResults
from .responses import ErrorResponse

__all__ = [
    "Parameter",
    "Query",
    "QueryResult",
    "QuerySearchHit",
    "QuerySearchResults",
    "ErrorResponse",
]
