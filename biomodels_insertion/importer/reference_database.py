"""Find-or-create for the single BioModels ReferenceDatabase node."""
from ..errors import GraphWriteError, NotFoundError
from ..graph.mutator import GraphMutator
from ..types import NodeRef, SchemaClass, RelationshipType, DISPLAY_NAME, SCHEMA_CLASS
from ..utils.logger import app_logger

BIOMODELS_NAME = "BioModels"
BIOMODELS_DATABASE_NAME = "BioModels Database"
# ###ID### is substituted per identifier by downstream tooling
BIOMODELS_ACCESS_URL = "https://www.ebi.ac.uk/biomodels/###ID###"
BIOMODELS_URL = "https://www.ebi.ac.uk/biomodels/"

logger = app_logger.bind(component="reference_database")


class ReferenceDatabaseResolver:
    """Resolves the BioModels reference database, creating it on first use."""

    def __init__(self, mutator: GraphMutator):
        self.mutator = mutator

    def find(self):
        """Get the existing BioModels reference database, or None."""
        nodes = self.mutator.find_nodes_by_name(SchemaClass.REFERENCE_DATABASE, BIOMODELS_NAME)
        if len(nodes) > 1:
            raise NotFoundError(
                f"Expected at most one {BIOMODELS_NAME} reference database, found {len(nodes)}",
                context={"dbIds": [node.db_id for node in nodes]},
            )
        return nodes[0] if nodes else None

    def resolve(self, instance_edit: NodeRef) -> NodeRef:
        """Get the BioModels reference database; an existing one is returned untouched."""
        logger.info("Attempting to fetch an existing BioModels reference database")
        reference_database = self.find()
        if reference_database is not None:
            logger.info(f"Found BioModels reference database with db id {reference_database.db_id}")
            return reference_database

        logger.info("Creating BioModels reference database - no existing one was found")
        try:
            reference_database = self.mutator.create_node(
                [SchemaClass.REFERENCE_DATABASE],
                {
                    "accessUrl": BIOMODELS_ACCESS_URL,
                    DISPLAY_NAME: BIOMODELS_DATABASE_NAME,
                    "name": [BIOMODELS_DATABASE_NAME, BIOMODELS_NAME],
                    SCHEMA_CLASS: SchemaClass.REFERENCE_DATABASE,
                    "url": BIOMODELS_URL,
                },
            )
            self.mutator.create_relationship(instance_edit, reference_database, RelationshipType.CREATED, 0, 1)
        except GraphWriteError as e:
            raise GraphWriteError(f"Unable to create BioModels reference database: {e}") from e

        logger.info(f"Successfully created BioModels reference database with db id of {reference_database.db_id}")
        return reference_database
