"""CatalogClient port: the remote content catalog the scheduler reads from."""

from dataclasses import dataclass
from typing import List, Protocol, runtime_checkable


@dataclass(frozen=True)
class CatalogItem:
    """External content reference: stable id plus display title."""

    id: str
    title: str


@runtime_checkable
class CatalogClient(Protocol):
    """Read-only access to a learner's catalog section.

    Implementations own authentication, pagination and timeouts; any
    failure surfaces as an exception and is treated as fail-fast.
    """

    async def list_items(self, section_ref: str) -> List[CatalogItem]:
        """List every item in the section.

        Args:
            section_ref: Opaque reference to the learner's catalog section.

        Returns:
            All items, in no particular order.
        """
        ...
