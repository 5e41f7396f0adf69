import pytest
from datetime import datetime
from pathlib import Path
from typing import Generator
import sys

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from biomodels_insertion.graph.allocator import IdentifierAllocator
from biomodels_insertion.graph.json_graph_client import JsonGraphClient, JsonGraphTransaction
from biomodels_insertion.graph.mutator import GraphMutator
from biomodels_insertion.types import SchemaClass


PERSON_ID = 140
FIXED_NOW = datetime(2026, 10, 19, 9, 30, 5)


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture
def graph_client() -> JsonGraphClient:
    """In-memory graph with a person and three pathways; highest dbId is 500."""
    client = JsonGraphClient()
    client.add_node([SchemaClass.PERSON], {
        "dbId": PERSON_ID,
        "displayName": "Doe, J",
        "surname": "Doe",
        "firstname": "Jane",
        "schemaClass": SchemaClass.PERSON,
    })
    for db_id, stable_id, name in [
        (300, "R-HSA-100", "Glycolysis"),
        (400, "R-HSA-111", "Cell Cycle"),
        (500, "R-HSA-222", "Apoptosis"),
    ]:
        client.add_node([SchemaClass.PATHWAY], {
            "dbId": db_id,
            "stId": stable_id,
            "displayName": name,
            "schemaClass": SchemaClass.PATHWAY,
        })
    return client


@pytest.fixture
def transaction(graph_client: JsonGraphClient) -> Generator[JsonGraphTransaction, None, None]:
    with graph_client.transaction() as tx:
        yield tx


@pytest.fixture
def mutator(transaction: JsonGraphTransaction) -> GraphMutator:
    return GraphMutator(transaction, IdentifierAllocator.from_store(transaction))


@pytest.fixture
def write_tsv(tmp_path: Path):
    """Write lines to a models2pathways.tsv in a temporary directory."""
    def _write(*lines: str) -> str:
        tsv_file = tmp_path / "models2pathways.tsv"
        tsv_file.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
        return str(tsv_file)
    return _write
