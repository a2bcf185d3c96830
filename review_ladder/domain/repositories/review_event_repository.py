"""ReviewEventRepository protocol: append-only review history."""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class ReviewEventRepository(Protocol):
    async def add(self, event: object) -> object:
        """Append a review event."""
        ...

    async def latest_for_item(self, learner_id: int, item_id: str) -> Optional[object]:
        """Most recent event for the pair, or None if never reviewed."""
        ...
