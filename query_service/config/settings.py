# query_service/config/settings.py
"""Configuration du Query Service chargée depuis l'environnement."""

from functools import lru_cache
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class QueryServiceSettings(BaseSettings):
    """Settings for the query service, loaded from env vars and ``.env``."""

    # Elasticsearch
    ELASTIC_SERVER: str = "http://elasticsearch:9200"
    ELASTIC_TIMEOUT_SECONDS: float = 30.0

    # Stockage des requêtes
    QUERY_COLLECTION: str = "queries"
    QUERY_INDEX_SHARDS: int = 2

    # Namespaces
    SYSTEM_ACCOUNT_SUFFIX: str = "_"
    SYSTEM_NAMESPACE_PREFIX: str = "system"

    # Readiness gate au démarrage (secondes entre tentatives)
    STARTUP_RETRY_DELAYS: List[float] = [1.0, 2.0, 4.0, 8.0, 16.0, 32.0]

    # API
    API_PREFIX: str = ""
    SERVICE_HOST: str = "0.0.0.0"
    SERVICE_PORT: int = 8080

    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @field_validator("ELASTIC_SERVER")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @field_validator("STARTUP_RETRY_DELAYS")
    @classmethod
    def validate_retry_delays(cls, v: List[float]) -> List[float]:
        if any(delay < 0 for delay in v):
            raise ValueError("STARTUP_RETRY_DELAYS must not contain negative values")
        return v

    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() in ("development", "dev", "local")


@lru_cache()
def get_settings() -> QueryServiceSettings:
    """Return the process-wide settings instance."""
    return QueryServiceSettings()
