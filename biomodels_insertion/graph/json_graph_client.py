from contextlib import contextmanager
from typing import List, Dict, Any, Optional, Iterator, Collection, Sequence
import copy
import datetime
import json
from pathlib import Path

from ..errors import GraphWriteError
from ..types import (
    NodeRef, SchemaClass, DB_ID, STABLE_ID, DISPLAY_NAME,
    RelationshipType, validate_label, validate_relationship_type,
)
from ..utils.logger import app_logger


class JsonGraphTransaction:
    """Graph store operations on a private copy of a JsonGraphClient's data."""

    def __init__(self, client: "JsonGraphClient"):
        self.client = client
        self.data = copy.deepcopy(client.data)

    def _nodes(self, label: Optional[str] = None) -> List[Dict[str, Any]]:
        return [
            node for node in self.data["nodes"]
            if SchemaClass.DATABASE_OBJECT in node["labels"]
            and (label is None or label in node["labels"])
        ]

    def _find_by_db_id(self, db_id: int) -> List[Dict[str, Any]]:
        return [node for node in self._nodes() if node["properties"].get(DB_ID) == db_id]

    def max_db_id(self) -> Optional[int]:
        db_ids = [node["properties"][DB_ID] for node in self._nodes() if node["properties"].get(DB_ID) is not None]
        return max(db_ids) if db_ids else None

    def create_node(self, labels: Sequence[str], properties: Dict[str, Any]) -> NodeRef:
        node_labels = [SchemaClass.DATABASE_OBJECT] + [validate_label(label) for label in labels]

        db_id = properties.get(DB_ID)
        if db_id is not None and self._find_by_db_id(db_id):
            raise GraphWriteError(
                f"Node with dbId {db_id} already exists",
                context={"labels": node_labels},
            )

        node_data = {
            "labels": node_labels,
            "properties": copy.deepcopy(dict(properties)),
        }
        self.data["nodes"].append(node_data)

        return NodeRef.from_properties(node_data["labels"], node_data["properties"])

    def create_relationship(self, from_db_id: int, to_db_id: int, relationship_type: str,
                            properties: Dict[str, Any]) -> int:
        validate_relationship_type(relationship_type)
        if not self._find_by_db_id(from_db_id) or not self._find_by_db_id(to_db_id):
            return 0

        self.data["edges"].append({
            "source_id": from_db_id,
            "target_id": to_db_id,
            "relationship_type": relationship_type,
            "properties": dict(properties),
        })
        return 1

    def nodes_by_db_id(self, db_id: int) -> List[NodeRef]:
        return [
            NodeRef.from_properties(node["labels"], node["properties"])
            for node in self._find_by_db_id(db_id)
        ]

    def nodes_by_stable_ids(self, label: str, stable_ids: Collection[str]) -> List[NodeRef]:
        wanted = set(stable_ids)
        return [
            NodeRef.from_properties(node["labels"], node["properties"])
            for node in self._nodes(validate_label(label))
            if node["properties"].get(STABLE_ID) in wanted
        ]

    def nodes_with_name(self, label: str, name: str) -> List[NodeRef]:
        return [
            NodeRef.from_properties(node["labels"], node["properties"])
            for node in self._nodes(validate_label(label))
            if isinstance(node["properties"].get("name"), list)
            and name in node["properties"]["name"]
        ]

    def commit(self):
        self.client.data = self.data
        self.client.commit_count += 1
        self.client._save_data()

    def rollback(self):
        self.data = copy.deepcopy(self.client.data)


class JsonGraphClient:
    """JSON-based graph storage client."""

    def __init__(self, storage_path: Optional[str] = None):
        self.logger = app_logger.bind(component="json_graph_client")
        self.storage_path = Path(storage_path) if storage_path else None
        self.commit_count = 0

        # Load existing data if file exists
        self.data = self._initialize_data()
        self._load_data()

    def _load_data(self):
        """Load data from JSON file."""
        if self.storage_path and self.storage_path.exists():
            with open(self.storage_path, 'r', encoding='utf-8') as f:
                self.data = json.load(f)
            self.logger.info(f"Loaded graph data from {self.storage_path}")

    def _initialize_data(self) -> Dict[str, Any]:
        """Initialize empty data structure."""
        return {
            "nodes": [],
            "edges": [],
            "metadata": {
                "version": "1.0",
                "created_at": None,
                "updated_at": None
            }
        }

    def _save_data(self):
        """Save data to JSON file."""
        if not self.storage_path:
            return

        self.data["metadata"]["updated_at"] = datetime.datetime.now().isoformat()
        if not self.data["metadata"]["created_at"]:
            self.data["metadata"]["created_at"] = self.data["metadata"]["updated_at"]

        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.storage_path, 'w', encoding='utf-8') as f:
            json.dump(self.data, f, indent=2, ensure_ascii=False)
        self.logger.debug(f"Saved graph data to {self.storage_path}")

    def close(self):
        """Nothing to release; kept for parity with Neo4jClient."""

    @contextmanager
    def transaction(self) -> Iterator[JsonGraphTransaction]:
        """Open a transaction; its changes are dropped unless commit() is called."""
        yield JsonGraphTransaction(self)

    def add_node(self, labels: Sequence[str], properties: Dict[str, Any]) -> NodeRef:
        """Seed a node directly, outside any transaction."""
        node_labels = list(labels)
        if SchemaClass.DATABASE_OBJECT not in node_labels:
            node_labels.insert(0, SchemaClass.DATABASE_OBJECT)

        node_data = {"labels": node_labels, "properties": dict(properties)}
        self.data["nodes"].append(node_data)
        self._save_data()

        return NodeRef.from_properties(node_labels, node_data["properties"])

    def add_relationship(self, source_id: int, target_id: int, relationship_type: str,
                         properties: Dict[str, Any] = None) -> None:
        """Seed a relationship directly, outside any transaction."""
        self.data["edges"].append({
            "source_id": source_id,
            "target_id": target_id,
            "relationship_type": relationship_type,
            "properties": properties or {},
        })
        self._save_data()

    def nodes_with_label(self, label: str) -> List[NodeRef]:
        return [
            NodeRef.from_properties(node["labels"], node["properties"])
            for node in self.data["nodes"]
            if label in node["labels"]
        ]

    def relationships(self, relationship_type: Optional[str] = None) -> List[Dict[str, Any]]:
        return [
            edge for edge in self.data["edges"]
            if relationship_type is None or edge["relationship_type"] == relationship_type
        ]

    def count_cross_references(self, display_name: str) -> Optional[int]:
        """Count nodes linked to the named reference database, or None if it does not exist."""
        reference_db_ids = {
            node.db_id for node in self.nodes_with_label(SchemaClass.REFERENCE_DATABASE)
            if node.get(DISPLAY_NAME) == display_name
        }
        if not reference_db_ids:
            return None

        return sum(
            1 for edge in self.relationships(RelationshipType.REFERENCE_DATABASE)
            if edge["target_id"] in reference_db_ids or edge["source_id"] in reference_db_ids
        )

    def get_database_stats(self) -> Dict[str, Any]:
        """Get database statistics."""
        stats = {"nodes": {}, "relationships": {}}

        for node in self.data["nodes"]:
            specific = [label for label in node["labels"] if label != SchemaClass.DATABASE_OBJECT]
            label = specific[0] if specific else SchemaClass.DATABASE_OBJECT
            stats["nodes"][label] = stats["nodes"].get(label, 0) + 1

        for edge in self.data["edges"]:
            rel_type = edge["relationship_type"]
            stats["relationships"][rel_type] = stats["relationships"].get(rel_type, 0) + 1

        return stats
