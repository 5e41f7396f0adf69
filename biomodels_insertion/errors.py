"""Error hierarchy for the BioModels insertion step."""

from typing import Any, Mapping, Optional


class BioModelsInsertionError(Exception):
    """Base exception for BioModels insertion failures."""

    def __init__(self, message: str, *, context: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.context = dict(context) if context else {}

    def log_message(self) -> str:
        if not self.context:
            return str(self)
        return f"{self}: {self.context}"


class ConfigurationError(BioModelsInsertionError):
    """Missing or invalid configuration (properties file, person id, input file)."""


class NotFoundError(BioModelsInsertionError):
    """An expected node is absent, or a lookup that must be unique is not."""


class GraphQueryError(BioModelsInsertionError):
    """The graph store rejected a query."""


class GraphWriteError(GraphQueryError):
    """The graph store rejected a node or relationship creation."""


class VerificationError(BioModelsInsertionError):
    """Release-over-release cross-reference check failed."""


class MalformedInputWarning(UserWarning):
    """A single models2pathways line could not be used."""

    def __init__(self, line_number: int, reason: str):
        super().__init__(f"Line {line_number} {reason} -- skipping")
        self.line_number = line_number
        self.reason = reason


__all__ = [
    "BioModelsInsertionError",
    "ConfigurationError",
    "NotFoundError",
    "GraphQueryError",
    "GraphWriteError",
    "VerificationError",
    "MalformedInputWarning",
]
