from .elasticsearch_client import ElasticsearchClient, mask_credentials, wait_until_ready
from .index_management import build_query_index_template, ensure_query_index_template
from .query_store import QueryStore

__all__ = [
    "ElasticsearchClient",
    "mask_credentials",
    "wait_until_ready",
    "build_query_index_template",
    "ensure_query_index_template",
    "QueryStore",
]
