from infraflow.knowledge.datasource.base import KnowledgeDataSource, KnowledgeFilter
from infraflow.knowledge.datasource.factory import (
    get_knowledge_source,
    reset_knowledge_source,
    set_knowledge_source,
)
from infraflow.knowledge.datasource.static import StaticDataSource

__all__ = [
    "KnowledgeDataSource",
    "KnowledgeFilter",
    "StaticDataSource",
    "get_knowledge_source",
    "reset_knowledge_source",
    "set_knowledge_source",
]
