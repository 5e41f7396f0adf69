import json

import pytest

from biomodels_insertion.errors import GraphWriteError
from biomodels_insertion.graph.json_graph_client import JsonGraphClient
from biomodels_insertion.types import SchemaClass, RelationshipType


class TestJsonGraphClient:
    """Test the in-memory graph store and its transactions."""

    def test_uncommitted_changes_are_discarded(self, graph_client: JsonGraphClient):
        with graph_client.transaction() as tx:
            tx.create_node([SchemaClass.INSTANCE_EDIT], {"dbId": 501})

        assert graph_client.nodes_with_label(SchemaClass.INSTANCE_EDIT) == []
        assert graph_client.commit_count == 0

    def test_commit_publishes_changes(self, graph_client: JsonGraphClient):
        with graph_client.transaction() as tx:
            tx.create_node([SchemaClass.INSTANCE_EDIT], {"dbId": 501})
            assert tx.create_relationship(501, 300, RelationshipType.MODIFIED, {"order": 0}) == 1
            tx.commit()

        assert [node.db_id for node in graph_client.nodes_with_label(SchemaClass.INSTANCE_EDIT)] == [501]
        assert len(graph_client.relationships(RelationshipType.MODIFIED)) == 1
        assert graph_client.commit_count == 1

    def test_rollback(self, graph_client: JsonGraphClient):
        with graph_client.transaction() as tx:
            tx.create_node([SchemaClass.INSTANCE_EDIT], {"dbId": 501})
            tx.rollback()

            assert tx.max_db_id() == 500

    def test_db_id_uniqueness(self, transaction):
        with pytest.raises(GraphWriteError):
            transaction.create_node([SchemaClass.INSTANCE_EDIT], {"dbId": 300})

    def test_relationship_needs_both_endpoints(self, transaction):
        assert transaction.create_relationship(300, 999, RelationshipType.CROSS_REFERENCE, {}) == 0
        assert transaction.data["edges"] == []

    def test_max_db_id_empty(self):
        with JsonGraphClient().transaction() as tx:
            assert tx.max_db_id() is None

    def test_snapshot_round_trip(self, tmp_path):
        snapshot = tmp_path / "graph.json"
        client = JsonGraphClient(str(snapshot))
        client.add_node([SchemaClass.PATHWAY], {"dbId": 1, "stId": "R-HSA-1"})
        with client.transaction() as tx:
            tx.create_node([SchemaClass.INSTANCE_EDIT], {"dbId": 2})
            tx.commit()

        saved = json.loads(snapshot.read_text(encoding="utf-8"))
        assert [node["properties"]["dbId"] for node in saved["nodes"]] == [1, 2]
        assert saved["metadata"]["created_at"] is not None

        reloaded = JsonGraphClient(str(snapshot))
        assert [node.db_id for node in reloaded.nodes_with_label(SchemaClass.DATABASE_OBJECT)] == [1, 2]

    def test_count_cross_references(self, graph_client: JsonGraphClient):
        assert graph_client.count_cross_references("BioModels Database") is None

        graph_client.add_node([SchemaClass.REFERENCE_DATABASE], {"dbId": 7, "displayName": "BioModels Database"})
        assert graph_client.count_cross_references("BioModels Database") == 0

        for db_id in (8, 9):
            graph_client.add_node([SchemaClass.DATABASE_IDENTIFIER], {"dbId": db_id})
            graph_client.add_relationship(db_id, 7, RelationshipType.REFERENCE_DATABASE)
        assert graph_client.count_cross_references("BioModels Database") == 2

    def test_nodes_with_name_matches_whole_names(self, graph_client: JsonGraphClient):
        graph_client.add_node([SchemaClass.REFERENCE_DATABASE], {"dbId": 7, "name": "BioModels Database"})
        graph_client.add_node([SchemaClass.REFERENCE_DATABASE], {"dbId": 8, "name": ["BioModels", "BioModels Database"]})

        with graph_client.transaction() as tx:
            nodes = tx.nodes_with_name(SchemaClass.REFERENCE_DATABASE, "BioModels")

        assert [node.db_id for node in nodes] == [8]
