"""
Allocation of dbIds for nodes created during one import run.

The allocator is only safe with a single writer: it reads the highest dbId
once and counts up from there inside the run's transaction.
"""
from ..errors import GraphQueryError
from ..utils.logger import app_logger

logger = app_logger.bind(component="identifier_allocator")


class IdentifierAllocator:
    """Hands out consecutive dbIds above the store's current maximum."""

    def __init__(self, current_max: int):
        self._current_max = current_max

    @classmethod
    def from_store(cls, tx) -> "IdentifierAllocator":
        """Query the highest dbId in use; an empty store starts at 0."""
        try:
            current_max = tx.max_db_id()
        except GraphQueryError as e:
            raise GraphQueryError(f"Unable to fetch the maximum dbId: {e}") from e

        logger.info(f"Maximum dbId in database is {current_max}")
        return cls(current_max if current_max is not None else 0)

    def current_max(self) -> int:
        return self._current_max

    def next_id(self) -> int:
        """Reserve and return the next dbId. Call exactly once per created node."""
        self._current_max += 1
        return self._current_max
