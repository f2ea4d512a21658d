"""Index template management for the stored query indices."""
import copy
import logging
from typing import Any, Dict

from ..exceptions import BackendUnavailableError, StorageError

logger = logging.getLogger(__name__)

QUERY_MAPPING_PROPERTIES: Dict[str, Any] = {
    # Identifiants et présentation
    "machine_name": {"type": "text"},
    "display_name": {"type": "text"},
    "description_brief": {"type": "text"},
    "description": {"type": "text"},

    # Classification
    "parsers": {"type": "keyword"},
    "query_class": {"type": "keyword"},
    "group": {"type": "keyword"},
    "model": {"type": "keyword"},

    # Définition de la requête
    "idx_pattern": {"type": "text"},
    "query_json": {"type": "text"},
    "query_template": {"type": "text"},
    "parameters": {"type": "nested"},

    # Forme des résultats
    "result_fields": {"type": "nested"},
}


def build_query_index_template(collection: str, shards: int, system_suffix: str = "_") -> Dict[str, Any]:
    """Template couvrant les index tenant ``*-queries`` et système ``*_queries``."""
    patterns = [f"*-{collection}"]
    if system_suffix and system_suffix != "-":
        patterns.append(f"*{system_suffix}{collection}")

    return {
        "index_patterns": patterns,
        "template": {
            "settings": {
                "index": {
                    "number_of_shards": shards,
                }
            },
            "mappings": {
                "_source": {"enabled": True},
                "properties": copy.deepcopy(QUERY_MAPPING_PROPERTIES),
            },
        },
    }


async def ensure_query_index_template(
    client: Any, collection: str, shards: int, system_suffix: str = "_"
) -> Dict[str, Any]:
    """Create or update the query index template (idempotent PUT).

    A 5xx answer raises ``BackendUnavailableError`` so the startup gate can
    retry; any other non-2xx answer is a configuration problem and raises
    ``StorageError``.
    """
    template = build_query_index_template(collection, shards, system_suffix)
    status, body = await client.put(f"_index_template/{collection}", template)

    if 200 <= status < 300:
        logger.info(f"Index template '{collection}' ensured for {template['index_patterns']}")
        return body

    logger.error(f"Failed to create index template: {status} - {body}")
    if status >= 500:
        raise BackendUnavailableError(
            "Elasticsearch failed to store the query index template",
            backend_status=status,
            backend_error=body.get("error"),
        )
    raise StorageError(
        "Elasticsearch rejected the query index template",
        error_code="IndexTemplateError",
        backend_status=status,
        backend_error=body.get("error"),
    )
