"""Domain value objects for item progression.

A progression state is a tagged variant: either ``ReadingMode`` (the item
has been introduced but not yet placed on the ladder) or ``LadderStep``
(an index into ``LADDER_DAYS``). Storage maps ReadingMode to a NULL
``ladder_index`` column.
"""

from __future__ import annotations

import enum
from typing import Optional, Tuple, Union

LADDER_DAYS: Tuple[int, ...] = (1, 3, 7, 14, 30, 90, 180)


class Grade(enum.Enum):
    """Coarse recall-quality bucket derived from a 0-100 score."""

    FORGOT = "forgot"
    HARD = "hard"
    NORMAL = "normal"
    EASY = "easy"

    @classmethod
    def from_score(cls, score: int) -> Grade:
        """Map a 0-100 score: >80 easy, >60 normal, >=40 hard, else forgot."""
        if score > 80:
            return cls.EASY
        if score > 60:
            return cls.NORMAL
        if score >= 40:
            return cls.HARD
        return cls.FORGOT

    @property
    def advances(self) -> bool:
        return self in (Grade.NORMAL, Grade.EASY)


class ReadingMode:
    """Pre-ladder state of a newly introduced item."""

    __slots__ = ()

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable; cannot set {name!r}")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ReadingMode)

    def __hash__(self) -> int:
        return hash("ReadingMode")

    def __repr__(self) -> str:
        return "ReadingMode()"


class LadderStep:
    """Position on the interval ladder.

    ``LadderStep(2)`` is the 7-day step; use ``LadderStep.of_days(7)`` to
    build it from a magnitude.
    """

    __slots__ = ("_index",)

    def __init__(self, index: int) -> None:
        if not isinstance(index, int) or isinstance(index, bool):
            raise TypeError(f"ladder index must be an int, got {type(index).__name__}")
        if not 0 <= index < len(LADDER_DAYS):
            raise ValueError(
                f"Invalid ladder index {index}; must be in 0..{len(LADDER_DAYS) - 1}"
            )
        object.__setattr__(self, "_index", index)

    @classmethod
    def of_days(cls, days: int) -> LadderStep:
        try:
            return cls(LADDER_DAYS.index(days))
        except ValueError:
            raise ValueError(
                f"{days} is not a ladder step; must be one of {list(LADDER_DAYS)}"
            ) from None

    @classmethod
    def first(cls) -> LadderStep:
        return cls(0)

    @classmethod
    def last(cls) -> LadderStep:
        return cls(len(LADDER_DAYS) - 1)

    @property
    def index(self) -> int:
        return self._index

    @property
    def days(self) -> int:
        return LADDER_DAYS[self._index]

    @property
    def is_first(self) -> bool:
        return self._index == 0

    @property
    def is_last(self) -> bool:
        return self._index == len(LADDER_DAYS) - 1

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable; cannot set {name!r}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LadderStep):
            return NotImplemented
        return self._index == other._index

    def __hash__(self) -> int:
        return hash(("LadderStep", self._index))

    def __repr__(self) -> str:
        return f"LadderStep(days={self.days})"


ProgressionState = Union[ReadingMode, LadderStep]


def state_from_index(ladder_index: Optional[int]) -> ProgressionState:
    """Decode the storage column into a progression state."""
    if ladder_index is None:
        return ReadingMode()
    return LadderStep(ladder_index)


def state_to_index(state: ProgressionState) -> Optional[int]:
    """Encode a progression state for the storage column."""
    if isinstance(state, ReadingMode):
        return None
    if isinstance(state, LadderStep):
        return state.index
    raise TypeError(f"not a progression state: {state!r}")
