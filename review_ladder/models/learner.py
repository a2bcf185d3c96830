"""Learner account: owns scheduling preferences and lifecycle flags."""

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin

DEFAULT_DAILY_CAPACITY = 2


class LearnerAccount(Base, TimestampMixin):
    __tablename__ = "learner_accounts"

    # Chat-platform user id
    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    username: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    timezone: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    daily_capacity: Mapped[int] = mapped_column(
        Integer, default=DEFAULT_DAILY_CAPACITY, nullable=False
    )
    catalog_section_ref: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True
    )

    # Lifecycle
    is_paused: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    last_activity_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, nullable=True, index=True
    )
    last_daily_claim_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, nullable=True
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("daily_capacity", DEFAULT_DAILY_CAPACITY)
        kwargs.setdefault("is_paused", False)
        super().__init__(**kwargs)

    # --- Domain behavior ---

    def has_catalog(self) -> bool:
        """Check whether a catalog section has been configured."""
        return bool(self.catalog_section_ref)

    def __repr__(self) -> str:
        return (
            f"<LearnerAccount(id={self.id}, timezone={self.timezone}, "
            f"capacity={self.daily_capacity}, paused={self.is_paused})>"
        )
