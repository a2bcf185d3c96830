"""ProgressRepository protocol: defines per-item scheduling state access."""

from datetime import datetime
from typing import List, Optional, Protocol, Sequence, Set, runtime_checkable


@runtime_checkable
class ProgressRepository(Protocol):
    """Repository interface for ProgressRecord access and persistence."""

    async def get(self, learner_id: int, item_id: str) -> Optional[object]:
        """Return the record for the pair, or None."""
        ...

    async def list_due(self, learner_id: int, boundary: datetime) -> List[object]:
        """Records with ``next_due_at <= boundary`` not yet reviewed today.

        Args:
            learner_id: Owner of the records.
            boundary: Inclusive upper bound on ``next_due_at`` (naive UTC).

        Returns:
            ProgressRecords ordered by ``next_due_at`` ascending.
        """
        ...

    async def list_for_learner(self, learner_id: int) -> List[object]:
        ...

    async def tracked_item_ids(self, learner_id: int) -> Set[str]:
        """Item ids that already have a record for this learner."""
        ...

    async def add_all(self, records: Sequence[object]) -> None:
        """Stage several new records in the current transaction (no commit)."""
        ...

    async def reset_reviewed_today(self, learner_id: int) -> int:
        """Clear ``reviewed_today`` on all of the learner's records.

        Returns:
            Number of rows touched.
        """
        ...

    async def roll_back_due_before(
        self,
        learner_id: int,
        horizon: datetime,
        ladder_index: int,
        next_due_at: datetime,
    ) -> int:
        """Move every non-passed record due on or before ``horizon`` back
        to ``ladder_index`` with a new due instant.

        Returns:
            Number of rows rolled back.
        """
        ...

    async def delete(self, learner_id: int, item_id: str) -> bool:
        """Delete the record for the pair. Returns True if a row was removed."""
        ...
