"""LearnerRepository protocol: defines learner persistence and the daily claim."""

from datetime import datetime
from typing import List, Optional, Protocol, runtime_checkable


@runtime_checkable
class LearnerRepository(Protocol):
    """Repository interface for LearnerAccount access."""

    async def get(self, learner_id: int) -> Optional[object]:
        """Look up a learner by id.

        Returns:
            The LearnerAccount, or None if not found.
        """
        ...

    async def add(self, learner: object) -> object:
        """Persist a new learner and return it."""
        ...

    async def list_for_daily_processing(self) -> List[object]:
        """Return every learner with a configured catalog section."""
        ...

    async def try_claim_daily(
        self, learner_id: int, now: datetime, start_of_local_day: datetime
    ) -> bool:
        """Atomically claim today's daily cycle for a learner.

        Sets ``last_daily_claim_at`` to ``now`` only when the stored value is
        NULL or older than ``start_of_local_day``. Safe across processes
        sharing the same store.

        Args:
            learner_id: The learner to claim.
            now: Claim instant (naive UTC).
            start_of_local_day: Start of the learner's local day (naive UTC).

        Returns:
            True if this call won the claim, False if today was already claimed.
        """
        ...

    async def record_activity(self, learner_id: int, at: datetime) -> None:
        """Set ``last_activity_at`` and clear ``is_paused``."""
        ...

    async def set_paused(self, learner_id: int, paused: bool) -> None:
        ...

    async def list_inactive_since(
        self, cutoff: datetime, exclude_paused: bool = False
    ) -> List[object]:
        """Learners whose recorded last activity is older than ``cutoff``.

        Learners with no recorded activity are not returned.

        Args:
            cutoff: Activity threshold (naive UTC).
            exclude_paused: Skip learners that are already paused.
        """
        ...
