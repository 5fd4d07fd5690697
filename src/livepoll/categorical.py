"""
Categorical Aggregator - totals for choice and point-allocation questions.

Both modes share one contract:
    - every declared category is reported, starting at 0
    - totals come back in declared order
    - values that do not match a declared category are ignored; they
      never create new buckets
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List

from livepoll.model import CategoryTotal, unique_categories
from livepoll.numeric import parse_number

logger = logging.getLogger(__name__)


def _empty_totals(categories: List[str]) -> Dict[str, float]:
    # dict preserves declared order
    return {cat: 0 for cat in unique_categories(categories)}


def _as_list(totals: Dict[str, float]) -> List[CategoryTotal]:
    return [CategoryTotal(category=cat, total=total) for cat, total in totals.items()]


def tally_choices(values: Iterable[Any], categories: List[str]) -> List[CategoryTotal]:
    """
    Count single-choice answers against the category set.

    Matching is exact and case-sensitive on the string form of the value.
    """
    totals = _empty_totals(categories)
    ignored = 0
    for value in values:
        key = "" if value is None else (value if isinstance(value, str) else str(value))
        if key in totals:
            totals[key] += 1
        else:
            ignored += 1
    if ignored:
        logger.debug("Ignored %d choice(s) outside the category set", ignored)
    return _as_list(totals)


def tally_allocations(values: Iterable[Any], categories: List[str]) -> List[CategoryTotal]:
    """
    Sum point allocations per category across all respondents.

    Each value should be a {category: points} mapping. Missing or
    non-finite entries contribute 0. Per-respondent totals are not capped.
    """
    totals = _empty_totals(categories)
    for value in values:
        if not isinstance(value, Mapping):
            continue
        for cat in totals:
            points = parse_number(value.get(cat))
            if points is not None:
                totals[cat] += points
    return _as_list(totals)
