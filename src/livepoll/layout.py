"""
Layout Engine - places one card per free-text answer on a bounded canvas.

The engine is the only stateful component: it remembers every card's
position between updates so that new answers arriving do not reshuffle
cards that are already on screen.

Update rules (run on every recompute with a measured canvas):
    1. Re-validate: a card whose previous box still fits inside the canvas
       keeps its x, y. Only its text and size estimate are refreshed.
    2. Place: every other item gets a size estimate and up to
       max_attempts random positions; the first whose padded box clears
       every card placed so far wins.
    3. Give up gracefully: if no candidate clears, the last candidate is
       used anyway. Placement always terminates.
    4. Ids missing from the current items are dropped.

State machine:
    EMPTY -> POPULATED -> RESIZED -> POPULATED ... -> TORN_DOWN
"""

from __future__ import annotations

import logging
import math
import random
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from livepoll.config import (
    CARD_CHAR_WIDTH,
    CARD_CHARS_PER_LINE,
    CARD_HORIZONTAL_PADDING,
    CARD_LINE_HEIGHT,
    CARD_MARGIN,
    CARD_MAX_WIDTH,
    CARD_MIN_HEIGHT,
    CARD_MIN_WIDTH,
    CARD_VERTICAL_PADDING,
    MAX_PLACEMENT_ATTEMPTS,
)
from livepoll.model import CanvasSize, TextCard, TextItem

logger = logging.getLogger(__name__)


class LayoutState(Enum):
    EMPTY = "empty"
    POPULATED = "populated"
    RESIZED = "resized"
    TORN_DOWN = "torn_down"


def estimate_box(text: str) -> Tuple[int, int]:
    """Deterministic (width, height) estimate from text length."""
    length = len(text)
    width = min(CARD_MAX_WIDTH, max(CARD_MIN_WIDTH, length * CARD_CHAR_WIDTH + CARD_HORIZONTAL_PADDING))
    height = max(CARD_MIN_HEIGHT, int(math.ceil(length / CARD_CHARS_PER_LINE)) * CARD_LINE_HEIGHT + CARD_VERTICAL_PADDING)
    return width, height


def random_int(rng: random.Random, lo: int, hi: int) -> int:
    """Inclusive random integer; a collapsed range returns lo."""
    if hi <= lo:
        return lo
    return rng.randint(lo, hi)


def _collides(candidate: TextCard, placed: Iterable[TextCard], margin: int) -> bool:
    # both boxes padded by margin == one box padded by twice the margin
    return any(candidate.intersects(other, 2 * margin) for other in placed)


def count_overlaps(cards: Iterable[TextCard], margin: int = 0) -> int:
    """Number of card pairs whose padded boxes intersect."""
    cards = list(cards)
    total = 0
    for i, a in enumerate(cards):
        for b in cards[i + 1:]:
            if a.intersects(b, 2 * margin):
                total += 1
    return total


def place_card(
    item: TextItem,
    canvas: CanvasSize,
    placed: List[TextCard],
    rng: random.Random,
    margin: int = CARD_MARGIN,
    max_attempts: int = MAX_PLACEMENT_ATTEMPTS,
) -> TextCard:
    """
    Find a position for item that clears every card in placed.

    Never raises and never loops more than max_attempts times; if nothing
    clears, the last candidate is returned and may overlap.
    """
    width, height = estimate_box(item.text)
    max_x = max(0, canvas.width - width)
    max_y = max(0, canvas.height - height)

    attempts = max(1, max_attempts)
    candidate = None
    for _ in range(attempts):
        candidate = TextCard(
            id=item.id,
            text=item.text,
            x=random_int(rng, 0, max_x),
            y=random_int(rng, 0, max_y),
            width=width,
            height=height,
        )
        if not _collides(candidate, placed, margin):
            return candidate

    logger.debug("No free spot for card %s after %d attempts; allowing overlap", item.id, attempts)
    return candidate


def layout_cards(
    items: Iterable[TextItem],
    canvas: CanvasSize,
    previous: Dict[str, TextCard],
    rng: random.Random,
    margin: int = CARD_MARGIN,
    max_attempts: int = MAX_PLACEMENT_ATTEMPTS,
) -> Dict[str, TextCard]:
    """
    Compute the next id -> card store from the previous one.

    Pure apart from drawing from rng. Cards that still fit are kept before
    anything new is placed, so new cards route around all of them.
    """
    items = list(items)
    kept: Dict[str, TextCard] = {}
    pending: List[TextItem] = []

    for item in items:
        if item.id in kept:
            continue
        prev = previous.get(item.id)
        if prev is not None and prev.fits_within(canvas.width, canvas.height):
            width, height = estimate_box(item.text)
            refreshed = TextCard(id=item.id, text=item.text, x=prev.x, y=prev.y, width=width, height=height)
            if refreshed.fits_within(canvas.width, canvas.height):
                kept[item.id] = refreshed
                continue
        pending.append(item)

    placed = list(kept.values())
    fresh: Dict[str, TextCard] = {}
    for item in pending:
        if item.id in fresh:
            continue
        card = place_card(item, canvas, placed, rng, margin, max_attempts)
        fresh[item.id] = card
        placed.append(card)

    # preserve item order in the result
    result: Dict[str, TextCard] = {}
    for item in items:
        if item.id not in result:
            result[item.id] = kept.get(item.id) or fresh[item.id]
    return result


class LayoutEngine:
    """
    Stateful wrapper around layout_cards for one canvas.

    The host calls set_items() when answers change and set_canvas_size()
    when the canvas is measured or resized; either signal may come first.
    Nothing is laid out until both a non-zero size and at least one item
    are known.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        margin: int = CARD_MARGIN,
        max_attempts: int = MAX_PLACEMENT_ATTEMPTS,
    ):
        self.rng = rng if rng is not None else random.Random()
        self.margin = margin
        self.max_attempts = max_attempts
        self.canvas = CanvasSize()
        self.items: List[TextItem] = []
        self.positions: Dict[str, TextCard] = {}
        self.state = LayoutState.EMPTY

    def set_canvas_size(self, width: int, height: int) -> Dict[str, TextCard]:
        if self.state is LayoutState.TORN_DOWN:
            return {}
        size = CanvasSize(width=int(width), height=int(height))
        if size != self.canvas and self.state is LayoutState.POPULATED:
            self.state = LayoutState.RESIZED
        self.canvas = size
        return self.recompute()

    def set_items(self, items: Iterable[TextItem]) -> Dict[str, TextCard]:
        if self.state is LayoutState.TORN_DOWN:
            return {}
        self.items = list(items)
        return self.recompute()

    def recompute(self) -> Dict[str, TextCard]:
        """Bring positions in line with the current items and canvas."""
        if self.state is LayoutState.TORN_DOWN or not self.canvas.is_measured:
            return dict(self.positions)
        if not self.items:
            self.positions = {}
            self.state = LayoutState.EMPTY
            return {}

        self.positions = layout_cards(
            self.items, self.canvas, self.positions, self.rng, self.margin, self.max_attempts
        )
        self.state = LayoutState.POPULATED
        return dict(self.positions)

    def teardown(self) -> None:
        self.positions = {}
        self.items = []
        self.state = LayoutState.TORN_DOWN
