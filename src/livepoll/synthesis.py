"""
Synthesis Cache Controller and the hosted LLM synthesis collaborator.

The presenter asks for a thematic summary of free-text answers by hand.
The controller owns the one cached SynthesisRecord for the current
question and decides:
    - whether a new call may start (one in flight at a time)
    - whether an arriving result still belongs to the current question
    - whether the cached record is stale against the live answer count

Staleness is advisory only. A failed call never discards the cached record.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, List, Optional, Protocol

from openai import AsyncOpenAI, OpenAIError

from livepoll import config
from livepoll.errors import SynthesisError
from livepoll.model import (
    Question,
    QuestionType,
    SynthesisMode,
    SynthesisRecord,
    SynthesisRequest,
)
from livepoll.serialization import parse_synthesis_payload

logger = logging.getLogger(__name__)

SYNTHESIS_QUESTION_TYPES = (QuestionType.SHORT, QuestionType.LONG)

GROUPED_PROMPT = (
    "Group the responses into thematic clusters and write a concise synthesis for each group. "
    "Use every response exactly once. Do not invent content. Return JSON only with keys: "
    '"overall_summary" (string, optional) and "groups" (array). Each group has keys: '
    '"theme" (string), "summary" (string), and "contributions" (array of response strings).'
)

SUMMARY_PROMPT = (
    "Write a concise synthesis that integrates and summarizes all responses. "
    "Use every response. Do not invent content. Return JSON only with keys: "
    '"overall_summary" (string).'
)


def clean_items(items: Iterable[Any], limit: Optional[int] = config.MAX_SYNTHESIS_ITEMS) -> List[str]:
    """Keep trimmed, non-empty strings, capped at limit (None for no cap)."""
    cleaned = []
    for item in items:
        if not isinstance(item, str):
            continue
        text = item.strip()
        if text:
            cleaned.append(text)
        if limit is not None and len(cleaned) >= limit:
            break
    return cleaned


def question_key(question: Question) -> str:
    """Identity used to discard results that arrive after the question changed."""
    return f"{question.id}:{question.type.value}"


def build_request(question: Optional[Question], items: Iterable[Any]) -> SynthesisRequest:
    """
    Long answers are summarized as a whole; everything else is grouped.

    At most MAX_SYNTHESIS_ITEMS items are sent, but the request remembers
    how many were eligible so the record can be compared with the live count.
    """
    mode = SynthesisMode.SUMMARY if question and question.type is QuestionType.LONG else SynthesisMode.GROUPED
    eligible = clean_items(items, limit=None)
    return SynthesisRequest(
        items=eligible[:config.MAX_SYNTHESIS_ITEMS],
        mode=mode,
        question=question.prompt if question else None,
        eligible_count=len(eligible),
    )


class Synthesizer(Protocol):
    async def __call__(self, request: SynthesisRequest) -> SynthesisRecord:
        ...


class OpenAISynthesizer:
    """
    Synthesis collaborator backed by OpenAI chat completions.

    Usage:
        synthesizer = OpenAISynthesizer()
        record = await synthesizer(build_request(question, items))
    """

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        model: str = config.SYNTHESIS_MODEL,
        temperature: float = config.SYNTHESIS_TEMPERATURE,
        api_key: Optional[str] = None,
    ):
        self._client = client
        self._api_key = api_key or config.OPENAI_API_KEY
        self.model = model
        self.temperature = temperature

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self._api_key:
                raise SynthesisError("OpenAI API key is not configured.")
            self._client = AsyncOpenAI(
                api_key=self._api_key,
                base_url=config.OPENAI_BASE_URL,
                timeout=config.SYNTHESIS_TIMEOUT,
            )
        return self._client

    def build_messages(self, request: SynthesisRequest) -> List[dict]:
        system = SUMMARY_PROMPT if request.mode is SynthesisMode.SUMMARY else GROUPED_PROMPT
        prompt = {"question": request.question, "responses": request.items}
        return [
            {"role": "system", "content": system},
            {"role": "user", "content": json.dumps(prompt)},
        ]

    async def __call__(self, request: SynthesisRequest) -> SynthesisRecord:
        if not request.items:
            raise SynthesisError("No responses to synthesize.")

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                response_format={"type": "json_object"},
                messages=self.build_messages(request),
            )
        except OpenAIError as e:
            raise SynthesisError(f"OpenAI request failed. {e}") from e

        choices = getattr(response, "choices", None) or []
        content = choices[0].message.content if choices else None
        if not content:
            raise SynthesisError("OpenAI response missing content.")

        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as e:
            raise SynthesisError("Failed to parse OpenAI JSON response.") from e

        return parse_synthesis_payload(parsed, source_count=request.source_count)


class SynthesisCacheController:
    """
    Holds the cached synthesis for one question at a time.

    Properties:
        question_key: identity of the question the cache belongs to
        record: cached SynthesisRecord or None
        error: message from the last failed call, or None
        in_flight: True while a synthesis call is outstanding
    """

    def __init__(self, question_key: Optional[str] = None, record: Optional[SynthesisRecord] = None):
        self.question_key = question_key
        self.record = record
        self.error: Optional[str] = None
        self.in_flight = False
        self._generation = 0

    def load(self, record: Optional[SynthesisRecord]) -> None:
        """Seed the cache from a record published to the store."""
        if record is not None:
            self.record = record

    def change_question(self, question_key: Optional[str]) -> None:
        """Switch questions; any outstanding call's result will be discarded."""
        if question_key == self.question_key:
            return
        self.question_key = question_key
        self.record = None
        self.error = None
        self.in_flight = False
        self._generation += 1

    def is_stale(self, eligible_count: int) -> bool:
        if self.record is None or self.record.source_count is None:
            return False
        return self.record.source_count != eligible_count

    async def synthesize(
        self,
        synthesizer: Synthesizer,
        items: Iterable[Any],
        question: Optional[Question] = None,
    ) -> Optional[SynthesisRecord]:
        """
        Run one synthesis call and cache its result.

        Returns the new record, or None if the call was skipped, failed,
        or finished after the question changed.
        """
        if self.in_flight:
            logger.debug("Synthesis already in flight for %s; ignoring request", self.question_key)
            return None
        request = build_request(question, items)
        if not request.items:
            return None

        captured = (self.question_key, self._generation)
        self.in_flight = True
        self.error = None
        logger.info("Synthesizing %d item(s) for %s (%s)", len(request.items), self.question_key, request.mode.value)
        try:
            result = await synthesizer(request)
        except Exception as e:
            if captured == (self.question_key, self._generation):
                self.error = str(e) or "Failed to synthesize responses."
                logger.warning("Synthesis failed for %s: %s", self.question_key, self.error)
            return None
        finally:
            if captured == (self.question_key, self._generation):
                self.in_flight = False

        if captured != (self.question_key, self._generation):
            logger.info("Discarding synthesis for %s; question changed", captured[0])
            return None

        result.source_count = request.source_count
        self.record = result
        return result
