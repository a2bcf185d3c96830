"""ItemReferenceRepository protocol: the learner's local mirror of the catalog."""

from datetime import datetime
from typing import List, Protocol, Sequence, runtime_checkable


@runtime_checkable
class ItemReferenceRepository(Protocol):
    async def sync_for_learner(
        self, learner_id: int, items: Sequence[object], refreshed_at: datetime
    ) -> int:
        """Insert or update a reference per catalog item and drop the rest.

        Args:
            learner_id: Owner of the references.
            items: CatalogItem objects (id + title).
            refreshed_at: Refresh instant (naive UTC).

        Returns:
            Number of references inserted or updated.
        """
        ...

    async def list_for_learner(self, learner_id: int) -> List[object]:
        ...
