from typing import Dict, Optional

from ..errors import GraphWriteError
from ..graph.mutator import GraphMutator
from ..types import NodeRef, SchemaClass, RelationshipType, DATABASE_NAME, DISPLAY_NAME, SCHEMA_CLASS
from ..utils.logger import app_logger

logger = app_logger.bind(component="identifier_registry")


class IdentifierRegistry:
    """Run-scoped map of BioModels id -> DatabaseIdentifier node created in this run."""

    def __init__(self, mutator: GraphMutator):
        self.mutator = mutator
        self._identifiers: Dict[str, NodeRef] = {}

    def __len__(self) -> int:
        return len(self._identifiers)

    def __contains__(self, external_id: str) -> bool:
        return external_id in self._identifiers

    def get(self, external_id: str) -> Optional[NodeRef]:
        return self._identifiers.get(external_id)

    def get_or_create(self, external_id: str, reference_database: NodeRef,
                      instance_edit: NodeRef) -> NodeRef:
        """Return the identifier node for external_id, creating it only the first time."""
        existing = self._identifiers.get(external_id)
        if existing is not None:
            return existing

        logger.info(f"Creating database identifier for BioModels id {external_id}")
        database_name = reference_database.display_name
        try:
            identifier = self.mutator.create_node(
                [SchemaClass.DATABASE_IDENTIFIER],
                {
                    DATABASE_NAME: database_name,
                    DISPLAY_NAME: f"{database_name}:{external_id}",
                    "identifier": external_id,
                    SCHEMA_CLASS: SchemaClass.DATABASE_IDENTIFIER,
                    "url": f"{reference_database.get('url', '')}{external_id}",
                },
            )
            self.mutator.create_relationship(instance_edit, identifier, RelationshipType.CREATED, 0, 1)
            self.mutator.create_relationship(identifier, reference_database, RelationshipType.REFERENCE_DATABASE, 0, 1)
        except GraphWriteError as e:
            raise GraphWriteError(
                f"Unable to create BioModels database identifier for {external_id}: {e}",
                context={"identifier": external_id},
            ) from e

        self._identifiers[external_id] = identifier
        logger.info(f"Successfully created database identifier for BioModels id {external_id}")
        return identifier
