from .base import Base, TimestampMixin
from .item_reference import CatalogItemReference
from .learner import LearnerAccount
from .progress import ProgressRecord
from .review_event import ReviewEvent

__all__ = [
    "Base",
    "TimestampMixin",
    "LearnerAccount",
    "CatalogItemReference",
    "ProgressRecord",
    "ReviewEvent",
]
