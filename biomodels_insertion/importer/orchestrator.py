"""
Drives one BioModels insertion run.

Everything happens inside a single write transaction: the instance edit,
the reference database, the identifiers and every pathway link are either
committed together or not at all. ``run`` is the only place that decides
between commit and rollback.
"""
import time
from datetime import datetime
from typing import Callable, List, Mapping, Sequence

from .reference_database import ReferenceDatabaseResolver
from .registry import IdentifierRegistry
from ..errors import BioModelsInsertionError, GraphWriteError, NotFoundError
from ..graph.allocator import IdentifierAllocator
from ..graph.mutator import GraphMutator
from ..types import (
    NodeRef, ImportResult, RunStatus, SchemaClass, RelationshipType,
    DISPLAY_NAME, SCHEMA_CLASS,
)
from ..utils.logger import app_logger

DEFAULT_NOTE = "BioModels reference database creation"


class ImportOrchestrator:
    """Links pathways to BioModels DatabaseIdentifiers in one transaction."""

    def __init__(self, client, person_id: int, note: str = DEFAULT_NOTE,
                 clock: Callable[[], datetime] = datetime.now):
        self.logger = app_logger.bind(component="import_orchestrator")
        self.client = client
        self.person_id = person_id
        self.note = note
        self.clock = clock

    def run(self, pathway_to_biomodels_ids: Mapping[str, Sequence[str]]) -> ImportResult:
        """Import the mapping; returns a COMMITTED or ABORTED result."""
        start = time.monotonic()
        result = ImportResult(status=RunStatus.ABORTED)
        self.logger.info("Running BioModels insertion")

        with self.client.transaction() as tx:
            try:
                mutator = self._import(tx, pathway_to_biomodels_ids, result)
                tx.commit()
            except BioModelsInsertionError as e:
                self.logger.error(f"BioModels insertion aborted: {e.log_message()}")
                tx.rollback()
                result.error = e
            else:
                result.status = RunStatus.COMMITTED
                result.nodes_created = mutator.nodes_created
                result.relationships_created = dict(mutator.relationships_created)
            finally:
                result.elapsed_seconds = time.monotonic() - start

        if result.committed:
            self.logger.info(
                f"BioModels insertion committed: "
                f"{len(result.updated_pathways)} pathways updated, "
                f"{result.identifiers_created} identifiers created"
            )
        return result

    def _import(self, tx, pathway_to_biomodels_ids: Mapping[str, Sequence[str]],
                result: ImportResult) -> GraphMutator:
        allocator = IdentifierAllocator.from_store(tx)
        mutator = GraphMutator(tx, allocator)

        instance_edit = self.create_instance_edit(mutator)
        result.instance_edit_db_id = instance_edit.db_id

        reference_database = ReferenceDatabaseResolver(mutator).resolve(instance_edit)
        result.reference_database_db_id = reference_database.db_id

        registry = IdentifierRegistry(mutator)
        pathways = self.fetch_pathways(mutator, pathway_to_biomodels_ids.keys())

        found = {pathway.stable_id for pathway in pathways}
        result.skipped_pathways = sorted(set(pathway_to_biomodels_ids) - found)
        for stable_id in result.skipped_pathways:
            self.logger.debug(f"Pathway {stable_id} not found in database -- nothing to do")

        for pathway in pathways:
            biomodels_ids = pathway_to_biomodels_ids[pathway.stable_id]
            self.link_pathway(mutator, registry, pathway, biomodels_ids, reference_database, instance_edit)
            result.updated_pathways.append(pathway.stable_id)

        result.identifiers_created = len(registry)
        return mutator

    def create_instance_edit(self, mutator: GraphMutator) -> NodeRef:
        """Create the InstanceEdit for this run, authored by the configured person."""
        self.logger.info(f"Creating new instance edit for person id {self.person_id}")
        try:
            person = mutator.get_node_by_id(self.person_id)
        except NotFoundError as e:
            raise NotFoundError(
                f"Could not fetch Person entity with ID {self.person_id}. "
                f"Please check that a Person entity exists in the database with this ID",
                context={"personId": self.person_id},
            ) from e

        now = self.clock()
        display_name = f"{person.get('surname')}, {person.get('firstname')}, {now:%Y-%m-%d}"

        try:
            instance_edit = mutator.create_node(
                [SchemaClass.INSTANCE_EDIT],
                {
                    "dateTime": f"{now:%Y-%m-%d %H:%M:%S}",
                    DISPLAY_NAME: display_name,
                    "note": self.note,
                    SCHEMA_CLASS: SchemaClass.INSTANCE_EDIT,
                },
            )
            mutator.create_relationship(person, instance_edit, RelationshipType.AUTHOR, 0, 1)
        except GraphWriteError as e:
            raise GraphWriteError(f"Unable to create instance edit: {e}") from e

        self.logger.info(
            f"Successfully created new instance edit with db id {instance_edit.db_id} "
            f"for person id {person.db_id}"
        )
        return instance_edit

    def fetch_pathways(self, mutator: GraphMutator, stable_ids) -> List[NodeRef]:
        """Get the pathways present in the store, in stable id order."""
        pathways = mutator.get_nodes_by_stable_ids(set(stable_ids), SchemaClass.PATHWAY)
        return sorted(pathways, key=lambda pathway: pathway.stable_id)

    def link_pathway(self, mutator: GraphMutator, registry: IdentifierRegistry, pathway: NodeRef,
                     biomodels_ids: Sequence[str], reference_database: NodeRef,
                     instance_edit: NodeRef):
        """Cross-reference a pathway to its identifiers and mark it modified."""
        pathway_name = f"[Pathway:{pathway.db_id}] {pathway.display_name}"
        self.logger.info(f"Adding BioModels ids to pathway {pathway_name}")

        try:
            identifiers = [
                registry.get_or_create(biomodels_id, reference_database, instance_edit)
                for biomodels_id in biomodels_ids
            ]
            for order, identifier in enumerate(identifiers):
                mutator.create_relationship(pathway, identifier, RelationshipType.CROSS_REFERENCE, order, 1)
            mutator.create_relationship(instance_edit, pathway, RelationshipType.MODIFIED, 0, 1)
        except BioModelsInsertionError as e:
            raise GraphWriteError(
                f"Unable to update pathway {pathway_name} with BioModels ids {list(biomodels_ids)}: {e}",
                context={"pathway": pathway.stable_id, "biomodels_ids": list(biomodels_ids)},
            ) from e

        self.logger.info(f"BioModels ids successfully added to pathway {pathway_name}")
