from contextlib import contextmanager
from typing import List, Dict, Any, Optional, Iterator, Collection, Sequence
from neo4j import GraphDatabase
from neo4j.exceptions import Neo4jError, DriverError

from ..errors import GraphQueryError, GraphWriteError
from ..types import NodeRef, SchemaClass, validate_label, validate_relationship_type
from ..utils.logger import app_logger


def build_create_node_query(labels: Sequence[str]) -> str:
    """CREATE query for a DatabaseObject node; all properties go in $properties."""
    node_labels = ":".join(validate_label(label) for label in labels)
    return f"CREATE (n:{SchemaClass.DATABASE_OBJECT}:{node_labels} $properties) RETURN n"


def build_create_relationship_query(relationship_type: str) -> str:
    """CREATE query for a typed edge between two DatabaseObjects matched by dbId."""
    return (
        "MATCH (n1:DatabaseObject {dbId: $fromDbId}) "
        "MATCH (n2:DatabaseObject {dbId: $toDbId}) "
        f"CREATE (n1)-[r:{validate_relationship_type(relationship_type)}]->(n2) "
        "SET r = $properties "
        "RETURN count(r) AS created"
    )


def _node_ref(node) -> NodeRef:
    return NodeRef.from_properties(node.labels, dict(node))


class Neo4jTransaction:
    """Graph store operations bound to one explicit Neo4j write transaction."""

    def __init__(self, tx):
        self.tx = tx
        self.logger = app_logger.bind(component="neo4j_transaction")

    def _read(self, query: str, **parameters) -> List[Any]:
        try:
            return list(self.tx.run(query, **parameters))
        except (Neo4jError, DriverError) as e:
            raise GraphQueryError(f"Query failed: {e}", context={"query": query}) from e

    def max_db_id(self) -> Optional[int]:
        """Get the highest dbId of any DatabaseObject, or None for an empty database."""
        records = self._read("MATCH (n:DatabaseObject) RETURN max(n.dbId) AS maxDbId")
        return records[0]["maxDbId"] if records else None

    def create_node(self, labels: Sequence[str], properties: Dict[str, Any]) -> NodeRef:
        """Create a node and return its read-back."""
        query = build_create_node_query(labels)
        try:
            record = self.tx.run(query, properties=properties).single(strict=True)
        except (Neo4jError, DriverError) as e:
            raise GraphWriteError(
                f"Failed to create {':'.join(labels)} node: {e}",
                context={"properties": properties},
            ) from e
        return _node_ref(record["n"])

    def create_relationship(self, from_db_id: int, to_db_id: int, relationship_type: str,
                            properties: Dict[str, Any]) -> int:
        """Create an edge between two nodes; returns the number of edges created."""
        query = build_create_relationship_query(relationship_type)
        try:
            record = self.tx.run(
                query,
                fromDbId=from_db_id,
                toDbId=to_db_id,
                properties=properties,
            ).single()
        except (Neo4jError, DriverError) as e:
            raise GraphWriteError(
                f"Failed to create relationship: {from_db_id} -[{relationship_type}]-> {to_db_id}: {e}"
            ) from e
        return record["created"] if record else 0

    def nodes_by_db_id(self, db_id: int) -> List[NodeRef]:
        records = self._read("MATCH (n:DatabaseObject {dbId: $dbId}) RETURN n", dbId=db_id)
        return [_node_ref(record["n"]) for record in records]

    def nodes_by_stable_ids(self, label: str, stable_ids: Collection[str]) -> List[NodeRef]:
        query = f"MATCH (n:DatabaseObject:{validate_label(label)}) WHERE n.stId IN $stableIds RETURN n"
        records = self._read(query, stableIds=list(stable_ids))
        return [_node_ref(record["n"]) for record in records]

    def nodes_with_name(self, label: str, name: str) -> List[NodeRef]:
        """Find nodes whose multi-valued name property contains the given name."""
        query = f"MATCH (n:DatabaseObject:{validate_label(label)}) WHERE $name IN n.name RETURN n"
        records = self._read(query, name=name)
        return [_node_ref(record["n"]) for record in records]

    def commit(self):
        try:
            self.tx.commit()
        except (Neo4jError, DriverError) as e:
            raise GraphWriteError(f"Commit failed: {e}") from e
        self.logger.info("Transaction committed")

    def rollback(self):
        if not self.tx.closed():
            self.tx.rollback()
        self.logger.info("Transaction rolled back")


class Neo4jClient:
    """Neo4j client for the BioModels insertion."""

    def __init__(self, uri: str, username: str, password: str, database: Optional[str] = None):
        self.logger = app_logger.bind(component="neo4j_client")
        self.uri = uri
        self.database = database
        self.driver = None
        self._connect(username, password)

    @classmethod
    def from_settings(cls, settings) -> "Neo4jClient":
        return cls(
            settings.connection_uri,
            settings.neo4j_username,
            settings.neo4j_password,
            database=settings.neo4j_database,
        )

    def _connect(self, username: str, password: str):
        """Connect to Neo4j server."""
        try:
            self.driver = GraphDatabase.driver(self.uri, auth=(username, password))
            self.logger.info(f"Connected to Neo4j at {self.uri}")
        except Exception as e:
            self.logger.error(f"Failed to connect to Neo4j: {e}")
            raise

    def close(self):
        """Close connection to Neo4j."""
        if self.driver:
            self.driver.close()
            self.logger.info("Disconnected from Neo4j")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @contextmanager
    def transaction(self) -> Iterator[Neo4jTransaction]:
        """Open one explicit write transaction; leaving without commit rolls it back."""
        with self.driver.session(database=self.database) as session:
            try:
                tx = session.begin_transaction()
            except (Neo4jError, DriverError) as e:
                raise GraphQueryError(f"Unable to open transaction on {self.uri}: {e}") from e
            try:
                yield Neo4jTransaction(tx)
            finally:
                if not tx.closed():
                    tx.close()

    def count_cross_references(self, display_name: str) -> Optional[int]:
        """Count nodes linked to the named reference database, or None if it does not exist."""
        query = """
        MATCH (rd:ReferenceDatabase {displayName: $displayName})
        OPTIONAL MATCH (rd)-[:referenceDatabase]-(cr)
        RETURN rd.dbId AS dbId, count(cr) AS crossRefCount
        """

        with self.driver.session(database=self.database) as session:
            records = list(session.run(query, displayName=display_name))

        if not records:
            return None
        return sum(record["crossRefCount"] for record in records)
