from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, Boolean, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin
from .value_objects import ProgressionState, state_from_index, state_to_index


class ProgressRecord(Base, TimestampMixin):
    """Scheduling state of one item for one learner.

    The composite primary key enforces exactly one record per pair.
    """

    __tablename__ = "progress_records"
    __table_args__ = (Index("ix_progress_learner_due", "learner_id", "next_due_at"),)

    learner_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("learner_accounts.id", ondelete="CASCADE"),
        primary_key=True,
    )
    item_id: Mapped[str] = mapped_column(String(255), primary_key=True)

    # NULL while in reading mode, otherwise an index into LADDER_DAYS
    ladder_index: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    repetition_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    next_due_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    reviewed_today: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    passed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __init__(self, **kwargs):
        state = kwargs.pop("state", None)
        if state is not None:
            kwargs["ladder_index"] = state_to_index(state)
        kwargs.setdefault("repetition_count", 0)
        kwargs.setdefault("reviewed_today", False)
        kwargs.setdefault("passed", False)
        super().__init__(**kwargs)

    @property
    def state(self) -> ProgressionState:
        return state_from_index(self.ladder_index)

    @state.setter
    def state(self, value: ProgressionState) -> None:
        self.ladder_index = state_to_index(value)

    def __repr__(self) -> str:
        return (
            f"<ProgressRecord(learner_id={self.learner_id}, item_id={self.item_id}, "
            f"state={self.state!r}, next_due_at={self.next_due_at})>"
        )
