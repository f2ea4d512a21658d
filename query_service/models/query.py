"""Modèles de requêtes stockées."""

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Parameter(BaseModel):
    """Déclaration d'un paramètre de template."""

    machine_name: str = Field(..., min_length=1, description="Identifiant du paramètre, en minuscules")
    display_name: str = Field(default="", description="Nom affiché")
    description: str = Field(default="", description="Documentation du paramètre")
    default_value: Optional[str] = Field(default="", description="Valeur utilisée si l'appelant n'en fournit pas")

    # metadata descriptive libre (type, exemples...)
    model_config = ConfigDict(extra="allow")

    @field_validator("machine_name")
    @classmethod
    def lowercase_machine_name(cls, v: str) -> str:
        return v.strip().lower()


class Query(BaseModel):
    """Définition d'une requête stockée pour un compte.

    Either ``query`` (a structured Elasticsearch body) or ``query_template`` plus
    ``parameters`` describes what runs. A non-empty ``query_template`` always
    wins over ``query``/``query_json`` at execution time.
    """

    machine_name: str = Field(..., min_length=1, description="Identifiant unique par compte")
    display_name: str = Field(default="", description="Nom court lisible")
    brief_description: str = Field(
        default="",
        alias="description_brief",
        description="Description en une phrase",
    )
    description: str = Field(default="", description="Documentation complète en markdown")
    parsers: List[str] = Field(default_factory=list, description="Parsers nommés")
    query_class: str = Field(default="", description="Classe de requête")
    group: str = Field(default="", description="Groupement des requêtes")
    model: str = Field(default="", description="Modèle de données ciblé")
    idx_pattern: str = Field(default="", description='Suffixe d\'index, ex. "-*" ou template "-{{ year }}*"')

    query: Optional[Dict[str, Any]] = Field(default=None, description="Corps de requête structuré")
    query_json: str = Field(default="", description="Sérialisation du dernier corps structuré")

    query_template: str = Field(default="", description="Template texte du corps de requête")
    parameters: List[Parameter] = Field(default_factory=list, description="Paramètres déclarés du template")

    result_fields: List[Dict[str, Any]] = Field(
        default_factory=list,
        validation_alias=AliasChoices("result_fields", "fields"),
        description="Description de la forme des résultats",
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "machine_name": "daily_status",
                "display_name": "Daily status",
                "model": "events",
                "idx_pattern": "-{{ year }}*",
                "query_template": '{"query": {"match": {"status": "{{ status }}"}}}',
                "parameters": [
                    {"machine_name": "status", "default_value": "active"},
                    {"machine_name": "year", "default_value": "2019"},
                ],
            }
        },
    )

    @field_validator("machine_name")
    @classmethod
    def lowercase_machine_name(cls, v: str) -> str:
        return v.strip().lower()

    @property
    def is_templated(self) -> bool:
        return bool(self.query_template.strip())

    def to_document(self) -> Dict[str, Any]:
        """Persisted form: ``query`` is never stored, only ``query_json``."""
        return self.model_dump(by_alias=True, exclude={"query"})


class QueryResult(BaseModel):
    """Document de requête tel que renvoyé par Elasticsearch."""

    index: str = Field(default="", alias="_index")
    id: str = Field(default="", alias="_id")
    version: Optional[int] = Field(default=None, alias="_version")
    found: bool = True
    source: Query = Field(..., alias="_source")

    model_config = ConfigDict(populate_by_name=True)


class QuerySearchHit(BaseModel):
    """Hit de recherche.

    ``_source`` is kept as returned: search criteria may filter it down to a
    few fields or drop it entirely (``"_source": false``).
    """

    index: str = Field(default="", alias="_index")
    id: str = Field(default="", alias="_id")
    score: Optional[float] = Field(default=None, alias="_score")
    source: Optional[Dict[str, Any]] = Field(default=None, alias="_source")

    model_config = ConfigDict(populate_by_name=True)


class QuerySearchResults(BaseModel):
    """Résultats de recherche parmi les requêtes stockées."""

    took: int = 0
    timed_out: bool = False
    total: int = 0
    max_score: Optional[float] = None
    hits: List[QuerySearchHit] = Field(default_factory=list)

    @classmethod
    def from_elasticsearch(cls, response: Dict[str, Any]) -> "QuerySearchResults":
        hits = response.get("hits", {}) or {}
        total = hits.get("total", 0)
        if isinstance(total, dict):
            total = total.get("value", 0)
        return cls(
            took=response.get("took", 0),
            timed_out=response.get("timed_out", False),
            total=total or 0,
            max_score=hits.get("max_score"),
            hits=[QuerySearchHit.model_validate(hit) for hit in hits.get("hits", [])],
        )
