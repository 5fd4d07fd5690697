"""
In-memory mirror of the live answer collection for one question.

The storage collaborator delivers answers keyed by respondent with
replace-on-write semantics. AnswerCollection keeps that contract locally:
    - order is first arrival
    - a later write for the same respondent replaces the value in place
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List

from livepoll.model import Answer, TextItem


class AnswerCollection:
    """Answers keyed by respondent id, ordered by first arrival."""

    def __init__(self, answers: Iterable[Answer] = ()):
        self._answers: Dict[str, Answer] = {}
        for answer in answers:
            self.upsert(answer)

    def upsert(self, answer: Answer) -> None:
        # dict assignment to an existing key keeps its original position
        self._answers[answer.id] = answer

    def remove(self, answer_id: str) -> bool:
        return self._answers.pop(answer_id, None) is not None

    def replace_all(self, answers: Iterable[Answer]) -> None:
        """Swap in a full snapshot from a change notification."""
        self._answers = {}
        for answer in answers:
            self.upsert(answer)

    def get(self, answer_id: str) -> Answer | None:
        return self._answers.get(answer_id)

    def ids(self) -> List[str]:
        return list(self._answers.keys())

    def values(self) -> List[Any]:
        return [a.value for a in self._answers.values()]

    def __iter__(self) -> Iterator[Answer]:
        return iter(list(self._answers.values()))

    def __len__(self) -> int:
        return len(self._answers)

    def __contains__(self, answer_id: object) -> bool:
        return answer_id in self._answers


def answer_text(value: Any) -> str:
    """Coerce an answer value to trimmed text; None becomes empty."""
    if value is None:
        return ""
    return (value if isinstance(value, str) else str(value)).strip()


def text_items(answers: Iterable[Answer]) -> List[TextItem]:
    """Return the non-empty free-text answers, in collection order."""
    items = []
    for answer in answers:
        text = answer_text(answer.value)
        if text:
            items.append(TextItem(id=answer.id, text=text))
    return items
