"""
Typed domain errors for the review scheduler.

Callers (the chat-command layer) map each to a user-facing message;
the daily sweep logs them per learner and moves on.
"""


class DomainError(Exception):
    """Base class for all domain-specific errors."""


# ---------------------------------------------------------------------------
# Learners
# ---------------------------------------------------------------------------


class LearnerNotFound(DomainError):
    """No LearnerAccount row exists for the given id."""

    def __init__(self, learner_id: int) -> None:
        self.learner_id = learner_id
        super().__init__(f"Learner {learner_id} not found")


class InvalidCapacity(DomainError):
    """Daily capacity must be a positive integer."""

    def __init__(self, value: int) -> None:
        self.value = value
        super().__init__(f"Daily capacity must be >= 1, got {value}")


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------


class ProgressNotFound(DomainError):
    """The item is not tracked for this learner."""

    def __init__(self, learner_id: int, item_id: str) -> None:
        self.learner_id = learner_id
        self.item_id = item_id
        super().__init__(f"No progress for item {item_id} (learner {learner_id})")


class InvalidScore(DomainError):
    """Review score outside the 0-100 range."""

    def __init__(self, score: int) -> None:
        self.score = score
        super().__init__(f"Score must be within 0..100, got {score}")


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class CatalogNotConfigured(DomainError):
    """Learner has not selected a catalog section yet."""

    def __init__(self, learner_id: int) -> None:
        self.learner_id = learner_id
        super().__init__(f"Catalog not configured for learner {learner_id}")


class CatalogUnavailable(DomainError):
    """The catalog collaborator failed or timed out."""
