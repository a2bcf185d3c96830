from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

MODE_READING = "reading"
MODE_STANDARD = "standard"


class ReviewEvent(Base):
    """Append-only history of review submissions."""

    __tablename__ = "review_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    learner_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    item_id: Mapped[str] = mapped_column(String(255), nullable=False)
    reviewed_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    mode: Mapped[str] = mapped_column(String(20), nullable=False)

    def __repr__(self) -> str:
        return (
            f"<ReviewEvent(id={self.id}, learner_id={self.learner_id}, "
            f"item_id={self.item_id}, score={self.score})>"
        )
