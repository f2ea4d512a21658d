"""
Résolution des chemins Elasticsearch : documents de requêtes et données.
"""

from dataclasses import dataclass
from enum import Enum


class ScopeKind(str, Enum):
    TENANT = "tenant"
    SYSTEM = "system"


@dataclass(frozen=True)
class AccountScope:
    """Compte appelant et son type de namespace, décidés une fois à la frontière HTTP."""

    account: str
    kind: ScopeKind = ScopeKind.TENANT

    @classmethod
    def tenant(cls, account: str) -> "AccountScope":
        return cls(account=account, kind=ScopeKind.TENANT)

    @classmethod
    def system(cls, account: str) -> "AccountScope":
        return cls(account=account, kind=ScopeKind.SYSTEM)

    @property
    def is_system(self) -> bool:
        return self.kind is ScopeKind.SYSTEM


class NamespaceResolver:
    """Calcule les index et chemins pour un compte.

    Query documents live in ``{account}-{collection}`` for tenants and in
    ``{account}{collection}`` for system namespaces. Data lives in
    ``{account}-data-{model}{idx_pattern}``, where a system execution swaps
    the account for the configured system prefix.
    """

    def __init__(self, collection: str = "queries", system_prefix: str = "system"):
        self.collection = collection
        self.system_prefix = system_prefix

    def document_index(self, scope: AccountScope) -> str:
        if scope.is_system:
            return f"{scope.account}{self.collection}"
        return f"{scope.account}-{self.collection}"

    def document_path(self, scope: AccountScope, machine_name: str) -> str:
        return f"{self.document_index(scope)}/_doc/{machine_name}"

    def document_search_path(self, scope: AccountScope) -> str:
        return f"{self.document_index(scope)}/_search"

    def data_account(self, scope: AccountScope, system_execution: bool = False) -> str:
        return self.system_prefix if system_execution else scope.account

    def data_index(self, account: str, model: str, idx_pattern: str) -> str:
        return f"{account}-data-{model}{idx_pattern}"

    def execution_path(self, account: str, model: str, idx_pattern: str) -> str:
        return f"{self.data_index(account, model, idx_pattern)}/_search"
