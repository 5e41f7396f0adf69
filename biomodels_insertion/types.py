from typing import List, Dict, Any, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum


# Property keys shared by every DatabaseObject node
DB_ID = "dbId"
STABLE_ID = "stId"
DISPLAY_NAME = "displayName"
SCHEMA_CLASS = "schemaClass"
DATABASE_NAME = "databaseName"


class SchemaClass:
    """Node labels / schema classes used by this step."""
    DATABASE_OBJECT = "DatabaseObject"
    REFERENCE_DATABASE = "ReferenceDatabase"
    DATABASE_IDENTIFIER = "DatabaseIdentifier"
    INSTANCE_EDIT = "InstanceEdit"
    PATHWAY = "Pathway"
    PERSON = "Person"


class RelationshipType:
    """Relationship types used by this step."""
    CREATED = "created"
    MODIFIED = "modified"
    AUTHOR = "author"
    REFERENCE_DATABASE = "referenceDatabase"
    CROSS_REFERENCE = "crossReference"


# Only these may be interpolated into query text; everything else is a parameter
NODE_LABELS = frozenset({
    SchemaClass.REFERENCE_DATABASE,
    SchemaClass.DATABASE_IDENTIFIER,
    SchemaClass.INSTANCE_EDIT,
    SchemaClass.PATHWAY,
    SchemaClass.PERSON,
})

RELATIONSHIP_TYPES = frozenset({
    RelationshipType.CREATED,
    RelationshipType.MODIFIED,
    RelationshipType.AUTHOR,
    RelationshipType.REFERENCE_DATABASE,
    RelationshipType.CROSS_REFERENCE,
})


def validate_label(label: str) -> str:
    """Return the label if it is allowed in query text, else raise ValueError."""
    if label != SchemaClass.DATABASE_OBJECT and label not in NODE_LABELS:
        raise ValueError(f"Label not allowed: {label!r}")
    return label


def validate_relationship_type(relationship_type: str) -> str:
    """Return the relationship type if it is allowed in query text, else raise ValueError."""
    if relationship_type not in RELATIONSHIP_TYPES:
        raise ValueError(f"Relationship type not allowed: {relationship_type!r}")
    return relationship_type


class RunStatus(Enum):
    """Terminal state of an import run."""
    COMMITTED = "committed"
    ABORTED = "aborted"


@dataclass(frozen=True)
class NodeRef:
    """Read-back of a node in the graph, identified by its dbId."""
    db_id: int
    labels: Tuple[str, ...]
    properties: Dict[str, Any]

    @classmethod
    def from_properties(cls, labels, properties: Dict[str, Any]) -> "NodeRef":
        """Build a reference from a label collection and a property mapping."""
        return cls(
            db_id=properties.get(DB_ID),
            labels=tuple(sorted(labels)),
            properties=dict(properties),
        )

    def get(self, key: str, default: Any = None) -> Any:
        return self.properties.get(key, default)

    @property
    def display_name(self) -> str:
        return self.properties.get(DISPLAY_NAME, "")

    @property
    def stable_id(self) -> Optional[str]:
        return self.properties.get(STABLE_ID)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "db_id": self.db_id,
            "labels": list(self.labels),
            "properties": self.properties,
        }


@dataclass
class ImportResult:
    """Outcome of one BioModels import run."""
    status: RunStatus
    instance_edit_db_id: Optional[int] = None
    reference_database_db_id: Optional[int] = None
    updated_pathways: List[str] = field(default_factory=list)
    skipped_pathways: List[str] = field(default_factory=list)
    identifiers_created: int = 0
    nodes_created: int = 0
    relationships_created: Dict[str, int] = field(default_factory=dict)
    elapsed_seconds: float = 0.0
    error: Optional[Exception] = None

    @property
    def committed(self) -> bool:
        return self.status is RunStatus.COMMITTED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "status": self.status.value,
            "instance_edit_db_id": self.instance_edit_db_id,
            "reference_database_db_id": self.reference_database_db_id,
            "updated_pathways": self.updated_pathways,
            "skipped_pathways": self.skipped_pathways,
            "identifiers_created": self.identifiers_created,
            "nodes_created": self.nodes_created,
            "relationships_created": self.relationships_created,
            "elapsed_seconds": self.elapsed_seconds,
            "error": str(self.error) if self.error else None,
        }


@dataclass
class VerificationResult:
    """Cross-reference counts of the current and previous releases."""
    current_count: int
    previous_count: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "current_count": self.current_count,
            "previous_count": self.previous_count,
        }
