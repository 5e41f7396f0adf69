import pytest

from biomodels_insertion.errors import GraphWriteError, NotFoundError
from biomodels_insertion.graph.allocator import IdentifierAllocator
from biomodels_insertion.graph.mutator import GraphMutator
from biomodels_insertion.importer.reference_database import (
    ReferenceDatabaseResolver,
    BIOMODELS_ACCESS_URL,
    BIOMODELS_URL,
)
from biomodels_insertion.types import SchemaClass, RelationshipType


@pytest.fixture
def instance_edit(mutator: GraphMutator):
    return mutator.create_node([SchemaClass.INSTANCE_EDIT], {"note": "test"})


class TestReferenceDatabaseResolver:
    """Test find-or-create of the BioModels reference database."""

    def test_creates_when_absent(self, mutator: GraphMutator, instance_edit):
        reference_database = ReferenceDatabaseResolver(mutator).resolve(instance_edit)

        assert reference_database.db_id == 502
        assert reference_database.display_name == "BioModels Database"
        assert reference_database.get("name") == ["BioModels Database", "BioModels"]
        assert reference_database.get("accessUrl") == BIOMODELS_ACCESS_URL
        assert "###ID###" in reference_database.get("accessUrl")
        assert reference_database.get("url") == BIOMODELS_URL
        assert reference_database.get("schemaClass") == SchemaClass.REFERENCE_DATABASE

        edges = mutator.tx.data["edges"]
        assert edges == [{
            "source_id": instance_edit.db_id,
            "target_id": reference_database.db_id,
            "relationship_type": RelationshipType.CREATED,
            "properties": {"order": 0, "stoichiometry": 1},
        }]

    def test_reuses_existing_without_mutation(self, graph_client):
        graph_client.add_node([SchemaClass.REFERENCE_DATABASE], {
            "dbId": 77,
            "displayName": "BioModels Database",
            "name": ["BioModels Database", "BioModels"],
            "url": "http://old.example.org/biomodels/",
        })

        with graph_client.transaction() as tx:
            mutator = GraphMutator(tx, IdentifierAllocator.from_store(tx))
            instance_edit = mutator.create_node([SchemaClass.INSTANCE_EDIT], {"note": "test"})

            reference_database = ReferenceDatabaseResolver(mutator).resolve(instance_edit)

            assert reference_database.db_id == 77
            assert reference_database.get("url") == "http://old.example.org/biomodels/"
            assert mutator.nodes_created == 1
            assert tx.data["edges"] == []

    def test_ignores_databases_without_marker_name(self, mutator: GraphMutator, instance_edit):
        mutator.tx.create_node([SchemaClass.REFERENCE_DATABASE], {
            "dbId": 9000,
            "displayName": "ENSEMBL",
            "name": ["ENSEMBL"],
        })

        assert ReferenceDatabaseResolver(mutator).find() is None

    def test_duplicate_reference_databases(self, mutator: GraphMutator, instance_edit):
        for db_id in (9000, 9001):
            mutator.tx.create_node([SchemaClass.REFERENCE_DATABASE], {"dbId": db_id, "name": ["BioModels"]})

        with pytest.raises(NotFoundError):
            ReferenceDatabaseResolver(mutator).resolve(instance_edit)

    def test_creation_failure_is_fatal(self, mutator: GraphMutator, instance_edit, monkeypatch):
        def reject(*args, **kwargs):
            raise GraphWriteError("constraint violation")

        monkeypatch.setattr(mutator.tx, "create_node", reject)

        with pytest.raises(GraphWriteError) as exc:
            ReferenceDatabaseResolver(mutator).resolve(instance_edit)

        assert "Unable to create BioModels reference database" in str(exc.value)
