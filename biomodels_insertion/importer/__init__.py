from .reference_database import ReferenceDatabaseResolver
from .registry import IdentifierRegistry
from .orchestrator import ImportOrchestrator

__all__ = [
    'ReferenceDatabaseResolver',
    'IdentifierRegistry',
    'ImportOrchestrator',
]
