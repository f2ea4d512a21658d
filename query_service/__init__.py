"""
Query Service

Stockage de requêtes de recherche nommées et paramétrées par compte, et
exécution à la demande contre Elasticsearch.
"""

__version__ = "1.0.0"
