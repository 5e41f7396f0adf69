from .allocator import IdentifierAllocator
from .mutator import GraphMutator
from .json_graph_client import JsonGraphClient, JsonGraphTransaction
from .neo4j_client import Neo4jClient, Neo4jTransaction

__all__ = [
    'IdentifierAllocator',
    'GraphMutator',
    'JsonGraphClient',
    'JsonGraphTransaction',
    'Neo4jClient',
    'Neo4jTransaction',
]
