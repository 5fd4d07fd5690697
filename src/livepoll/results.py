"""
Results view - the derived data a live results screen renders.

summarize_question() is a pure recomputation from the current answers.
LiveResults is the explicit "recompute on notify" host: the caller invokes
notify_answers(), notify_canvas() or notify_question() whenever the
answer collection, canvas size or question changes. Nothing is scheduled
behind the caller's back.

IMPORTANT: This layer does NOT write anything. It only produces read-only
views; publishing a synthesis to the store is the presenter's job.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from livepoll.answers import AnswerCollection, text_items
from livepoll.categorical import tally_allocations, tally_choices
from livepoll.config import WORD_CLOUD_TOP_N
from livepoll.layout import LayoutEngine
from livepoll.model import (
    Answer,
    CategoryTotal,
    NumericSummary,
    Question,
    QuestionType,
    SynthesisRecord,
    TermWeight,
    TextCard,
    TextItem,
)
from livepoll.numeric import summarize_numbers
from livepoll.synthesis import (
    SYNTHESIS_QUESTION_TYPES,
    SynthesisCacheController,
    Synthesizer,
    question_key,
)
from livepoll.text import word_frequencies


@dataclass
class QuestionResults:
    """Derived view for one question. Only the fields for its type are set."""

    question_id: str
    question_type: QuestionType
    response_count: int = 0

    numeric: Optional[NumericSummary] = None
    category_totals: Optional[List[CategoryTotal]] = None
    terms: Optional[List[TermWeight]] = None
    text_items: Optional[List[TextItem]] = None

    synthesis_eligible_count: int = 0
    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the results."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def summarize_question(
    question: Question,
    answers: Iterable[Answer],
    top_n: int = WORD_CLOUD_TOP_N,
) -> QuestionResults:
    """
    Recompute the results view for question from its current answers.

    Dispatches on question type:
        mcq        -> category_totals (single choice)
        allocation -> category_totals (summed points)
        number     -> numeric
        short      -> text_items + terms
        long       -> text_items
    """
    answers = list(answers)
    results = QuestionResults(
        question_id=question.id,
        question_type=question.type,
        response_count=len(answers),
    )
    values = [a.value for a in answers]

    if question.type in (QuestionType.MCQ, QuestionType.ALLOCATION):
        categories = question.category_set()
        if not categories:
            results.add_warning(f"Question {question.id} has no categories")
        if question.type is QuestionType.MCQ:
            results.category_totals = tally_choices(values, categories)
        else:
            results.category_totals = tally_allocations(values, categories)

    elif question.type is QuestionType.NUMBER:
        results.numeric = summarize_numbers(values)
        skipped = results.numeric.parsed_count - results.numeric.n
        if skipped:
            results.add_warning(f"{skipped} outlier(s) excluded from statistics")
        unparsed = len(values) - results.numeric.parsed_count
        if unparsed:
            results.add_warning(f"{unparsed} non-numeric answer(s) ignored")

    else:
        items = text_items(answers)
        results.text_items = items
        if question.type is QuestionType.SHORT:
            results.terms = word_frequencies([i.text for i in items], top_n=top_n)

    if question.type in SYNTHESIS_QUESTION_TYPES:
        results.synthesis_eligible_count = len(text_items(answers))

    return results


class LiveResults:
    """
    Host for one question on a results screen.

    Owns the answer mirror, the card layout engine and the synthesis cache,
    and recomputes the derived view whenever it is notified.
    """

    def __init__(
        self,
        question: Question,
        engine: Optional[LayoutEngine] = None,
        controller: Optional[SynthesisCacheController] = None,
        top_n: int = WORD_CLOUD_TOP_N,
    ):
        self.question = question
        self.answers = AnswerCollection()
        self.engine = engine if engine is not None else LayoutEngine()
        self.controller = controller if controller is not None else SynthesisCacheController(question_key(question))
        self.top_n = top_n
        self.results = summarize_question(question, [], top_n)
        self.layout: Dict[str, TextCard] = {}

    def _recompute(self) -> QuestionResults:
        self.results = summarize_question(self.question, self.answers, self.top_n)
        if self.question.type is QuestionType.SHORT:
            self.layout = self.engine.set_items(self.results.text_items or [])
        return self.results

    def notify_answers(self, answers: Iterable[Answer]) -> QuestionResults:
        """A change notification delivered the full current answer snapshot."""
        self.answers.replace_all(answers)
        return self._recompute()

    def notify_answer(self, answer: Answer) -> QuestionResults:
        """A single respondent wrote (or rewrote) their answer."""
        self.answers.upsert(answer)
        return self._recompute()

    def notify_canvas(self, width: int, height: int) -> Dict[str, TextCard]:
        self.layout = self.engine.set_canvas_size(width, height)
        return self.layout

    def notify_question(self, question: Question, answers: Iterable[Answer] = ()) -> QuestionResults:
        """The presenter moved to another question, or edited this one."""
        if question_key(question) != question_key(self.question):
            self.controller.change_question(question_key(question))
            self.engine.set_items([])
            self.layout = {}
        self.question = question
        self.answers.replace_all(answers)
        return self._recompute()

    def load_synthesis(self, record: Optional[SynthesisRecord]) -> None:
        self.controller.load(record)

    @property
    def synthesis_stale(self) -> bool:
        return self.controller.is_stale(self.results.synthesis_eligible_count)

    async def synthesize(self, synthesizer: Synthesizer) -> Optional[SynthesisRecord]:
        if self.question.type not in SYNTHESIS_QUESTION_TYPES:
            return None
        texts = [item.text for item in text_items(self.answers)]
        return await self.controller.synthesize(synthesizer, texts, self.question)

    def teardown(self) -> None:
        self.engine.teardown()
        self.layout = {}
