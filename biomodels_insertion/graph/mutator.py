from collections import Counter
from typing import List, Dict, Any, Collection, Iterable

from .allocator import IdentifierAllocator
from ..errors import GraphWriteError, NotFoundError
from ..types import NodeRef, DB_ID, SchemaClass, validate_label, validate_relationship_type
from ..utils.logger import app_logger


class GraphMutator:
    """Node and relationship primitives for one import transaction.

    Every created node gets its dbId from the allocator, and relationships are
    always matched by dbId on both ends, never by the in-memory node.
    """

    def __init__(self, tx, allocator: IdentifierAllocator):
        self.logger = app_logger.bind(component="graph_mutator")
        self.tx = tx
        self.allocator = allocator
        self.nodes_created = 0
        self.relationships_created = Counter()

    def create_node(self, labels: Iterable[str], properties: Dict[str, Any]) -> NodeRef:
        """Create a DatabaseObject node with the given labels and properties."""
        node_labels = sorted(
            validate_label(label) for label in labels if label != SchemaClass.DATABASE_OBJECT
        )
        if not node_labels:
            raise ValueError("At least one specific label is required")

        node_properties = dict(properties)
        node_properties[DB_ID] = self.allocator.next_id()

        node = self.tx.create_node(node_labels, node_properties)
        self.nodes_created += 1
        self.logger.debug(f"Created {':'.join(node_labels)} node with dbId {node.db_id}")
        return node

    def create_relationship(self, source: NodeRef, target: NodeRef, relationship_type: str,
                            order: int = 0, stoichiometry: int = 1):
        """Create a typed edge carrying order and stoichiometry between two existing nodes."""
        validate_relationship_type(relationship_type)
        created = self.tx.create_relationship(
            source.db_id,
            target.db_id,
            relationship_type,
            {"order": order, "stoichiometry": stoichiometry},
        )
        if created != 1:
            raise GraphWriteError(
                f"Failed to create relationship: {source.db_id} -[{relationship_type}]-> {target.db_id}",
                context={"created": created},
            )
        self.relationships_created[relationship_type] += 1

    def get_node_by_id(self, db_id: int) -> NodeRef:
        """Get the single node with this dbId."""
        nodes = self.tx.nodes_by_db_id(db_id)
        if len(nodes) != 1:
            raise NotFoundError(
                f"Expected exactly one node with dbId {db_id}, found {len(nodes)}",
                context={"dbId": db_id},
            )
        return nodes[0]

    def get_nodes_by_stable_ids(self, stable_ids: Collection[str],
                                label: str = SchemaClass.PATHWAY) -> List[NodeRef]:
        """Get nodes whose stId is in the given set; result order is unspecified."""
        if not stable_ids:
            return []
        return self.tx.nodes_by_stable_ids(label, stable_ids)

    def find_nodes_by_name(self, label: str, name: str) -> List[NodeRef]:
        """Get nodes whose name list contains the given name."""
        return self.tx.nodes_with_name(label, name)
