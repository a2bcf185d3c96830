from .item_reference_repository import ItemReferenceRepository
from .learner_repository import LearnerRepository
from .progress_repository import ProgressRepository
from .review_event_repository import ReviewEventRepository

__all__ = [
    "ItemReferenceRepository",
    "LearnerRepository",
    "ProgressRepository",
    "ReviewEventRepository",
]
