"""
Core Poll Model Objects

Defines the plain data structures shared by every livepoll component.

These are pure data classes representing:
    - Questions and their category sets
    - Answers (one per respondent per question)
    - Derived views (histogram bins, category totals, term weights)
    - Card geometry for free-text answers
    - Cached synthesis records

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about storage, rendering or the LLM collaborator
        - Carry data, not behaviour (beyond small geometric helpers)
        - Are fully serializable
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class QuestionType(Enum):
    """Answer types a question can collect."""
    MCQ = "mcq"
    NUMBER = "number"
    SHORT = "short"
    LONG = "long"
    ALLOCATION = "allocation"


class SynthesisMode(Enum):
    """How the synthesis collaborator should treat the items."""
    GROUPED = "grouped"
    SUMMARY = "summary"


@dataclass
class Question:
    """
    A single poll question.

    Properties:
        id:
            Stable question identifier
        prompt:
            Text shown to participants
        type:
            QuestionType
        options:
            The category set for MCQ and allocation questions.
            Order matters: consumers render bars and slices positionally.
    """

    id: str
    prompt: str
    type: QuestionType
    options: List[str] = field(default_factory=list)

    def category_set(self) -> List[str]:
        """
        Return the declared categories, in order, without blanks or duplicates.

        The first occurrence of a repeated label wins.
        """
        return unique_categories(self.options)


def unique_categories(options: List[str]) -> List[str]:
    seen = set()
    categories = []
    for opt in options:
        if not isinstance(opt, str) or not opt.strip() or opt in seen:
            continue
        seen.add(opt)
        categories.append(opt)
    return categories


@dataclass
class Answer:
    """
    One respondent's answer to one question.

    Identity is respondent + question, not submission: a later write for
    the same id replaces the earlier one.

    Properties:
        id: Respondent identifier (opaque)
        value: Scalar, string, or a {category: points} mapping
        submitted_at: Optional timestamp from the store
    """

    id: str
    value: Any = None
    submitted_at: Optional[float] = None


@dataclass
class HistogramBin:
    label: str
    count: int = 0


@dataclass
class NumericSummary:
    """
    Result of the numeric summarizer.

    n is the number of values the statistics were computed on (after
    outlier trimming); parsed_count is every value that parsed as a number.
    """

    bins: List[HistogramBin] = field(default_factory=list)
    mean: Optional[float] = None
    median: Optional[float] = None
    n: int = 0
    parsed_count: int = 0
    min: Optional[float] = None
    max: Optional[float] = None


@dataclass
class CategoryTotal:
    category: str
    total: float = 0


@dataclass
class TermWeight:
    term: str
    weight: int


@dataclass
class TextItem:
    """A non-empty, trimmed free-text answer."""
    id: str
    text: str


@dataclass
class CanvasSize:
    width: int = 0
    height: int = 0

    @property
    def is_measured(self) -> bool:
        return self.width > 0 and self.height > 0


@dataclass
class TextCard:
    """
    A placed rectangle representing one free-text answer.

    Owned by the layout engine. Coordinates are the top-left corner in
    canvas pixels.
    """

    id: str
    text: str
    x: int
    y: int
    width: int
    height: int

    def fits_within(self, width: int, height: int) -> bool:
        return (
            self.x >= 0
            and self.y >= 0
            and self.x + self.width <= width
            and self.y + self.height <= height
        )

    def intersects(self, other: "TextCard", padding: int = 0) -> bool:
        """True if this card, grown by padding on every side, overlaps other."""
        left = self.x - padding
        right = self.x + self.width + padding
        top = self.y - padding
        bottom = self.y + self.height + padding
        return (
            left < other.x + other.width
            and right > other.x
            and top < other.y + other.height
            and bottom > other.y
        )


@dataclass
class SynthesisGroup:
    theme: str
    summary: str = ""
    contributions: List[str] = field(default_factory=list)


@dataclass
class SynthesisRecord:
    """
    A thematic summary produced by the synthesis collaborator.

    source_count is the number of eligible answers the record was produced
    from, or None when that is unknown (a record with no count is never
    reported stale).
    """

    groups: List[SynthesisGroup] = field(default_factory=list)
    overall_summary: Optional[str] = None
    source_count: Optional[int] = None


@dataclass
class SynthesisRequest:
    """
    Items handed to the synthesis collaborator.

    items may be capped; eligible_count is how many eligible answers there
    were before the cap.
    """

    items: List[str]
    mode: SynthesisMode = SynthesisMode.GROUPED
    question: Optional[str] = None
    eligible_count: Optional[int] = None

    @property
    def source_count(self) -> int:
        return self.eligible_count if self.eligible_count is not None else len(self.items)

    def to_payload(self) -> Dict[str, Any]:
        return {"question": self.question, "items": list(self.items), "mode": self.mode.value}
