from .sqlalchemy_item_reference_repository import SqlAlchemyItemReferenceRepository
from .sqlalchemy_learner_repository import SqlAlchemyLearnerRepository
from .sqlalchemy_progress_repository import SqlAlchemyProgressRepository
from .sqlalchemy_review_event_repository import SqlAlchemyReviewEventRepository

__all__ = [
    "SqlAlchemyItemReferenceRepository",
    "SqlAlchemyLearnerRepository",
    "SqlAlchemyProgressRepository",
    "SqlAlchemyReviewEventRepository",
]
