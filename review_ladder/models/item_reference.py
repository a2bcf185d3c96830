from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class CatalogItemReference(Base, TimestampMixin):
    """Local mirror of one catalog item for one learner, upserted on refresh."""

    __tablename__ = "catalog_item_references"

    learner_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("learner_accounts.id", ondelete="CASCADE"),
        primary_key=True,
    )
    item_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    refreshed_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    def __repr__(self) -> str:
        return f"<CatalogItemReference(learner_id={self.learner_id}, item_id={self.item_id})>"
