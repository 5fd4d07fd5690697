"""
Numeric Summarizer - histogram and robust statistics for number questions.

Pipeline:
    raw values -> parse (drop non-numeric) -> IQR outlier trim
               -> mean / lower median / Sturges histogram

Every function here is total: empty or garbage input yields an empty
summary, never an exception.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, List, Optional

from livepoll.model import HistogramBin, NumericSummary

logger = logging.getLogger(__name__)

IQR_FENCE = 1.5
MIN_POINTS_FOR_TRIM = 4


def parse_number(value: Any) -> Optional[float]:
    """
    Return value as a finite float, or None.

    Accepts finite ints/floats and strings that parse to a finite number.
    Booleans are not numbers here.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        num = float(value)
        return num if math.isfinite(num) else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            num = float(text)
        except ValueError:
            return None
        return num if math.isfinite(num) else None
    return None


def parse_numbers(values: Iterable[Any]) -> List[float]:
    parsed = []
    dropped = 0
    for value in values:
        num = parse_number(value)
        if num is None:
            dropped += 1
        else:
            parsed.append(num)
    if dropped:
        logger.debug("Discarded %d non-numeric value(s)", dropped)
    return parsed


def quantile(sorted_values: List[float], q: float) -> float:
    """Linear interpolation between order statistics at position (n-1)*q."""
    pos = (len(sorted_values) - 1) * q
    base = int(math.floor(pos))
    rest = pos - base
    if base + 1 >= len(sorted_values):
        return sorted_values[base]
    return sorted_values[base] + rest * (sorted_values[base + 1] - sorted_values[base])


def exclude_outliers(values: List[float]) -> List[float]:
    """
    Drop values outside [Q1 - 1.5*IQR, Q3 + 1.5*IQR].

    Fewer than four points, or a zero IQR, returns the values unchanged.
    The trimmed result is sorted ascending.
    """
    if len(values) < MIN_POINTS_FOR_TRIM:
        return list(values)
    ordered = sorted(values)
    q1 = quantile(ordered, 0.25)
    q3 = quantile(ordered, 0.75)
    iqr = q3 - q1
    if not math.isfinite(iqr) or iqr == 0:
        return list(values)
    low = q1 - IQR_FENCE * iqr
    high = q3 + IQR_FENCE * iqr
    return [v for v in ordered if low <= v <= high]


def sturges_bins(n: int) -> int:
    if n <= 1:
        return 1
    return max(3, int(math.ceil(math.log2(n) + 1)))


def _edge_label(x: float) -> str:
    # half-up to whole numbers
    return str(int(math.floor(x + 0.5)))


def _value_label(x: float) -> str:
    return str(int(x)) if float(x).is_integer() else repr(float(x))


def histogram(values: List[float]) -> List[HistogramBin]:
    """
    Bin already-parsed values with Sturges' rule over their own range.

    The last bin's upper edge is the true maximum, and a value sitting on
    that edge is folded into the last bin.
    """
    if not values:
        return []
    lo = min(values)
    hi = max(values)
    if lo == hi:
        return [HistogramBin(label=_value_label(lo), count=len(values))]

    k = sturges_bins(len(values))
    width = (hi - lo) / k
    if not math.isfinite(width) or width <= 0:
        # range overflows or underflows a float
        return [HistogramBin(label=f"{_edge_label(lo)}-{_edge_label(hi)}", count=len(values))]

    counts = [0] * k
    for v in values:
        pos = (v - lo) / width
        idx = int(math.floor(pos)) if math.isfinite(pos) else k - 1
        counts[min(max(idx, 0), k - 1)] += 1

    bins = []
    for i, count in enumerate(counts):
        start = lo + i * width
        end = hi if i == k - 1 else lo + (i + 1) * width
        bins.append(HistogramBin(label=f"{_edge_label(start)}-{_edge_label(end)}", count=count))
    return bins


def lower_median(values: List[float]) -> Optional[float]:
    """Middle order statistic; for even counts the lower of the two."""
    if not values:
        return None
    ordered = sorted(values)
    return ordered[(len(ordered) - 1) // 2]


def summarize_numbers(values: Iterable[Any]) -> NumericSummary:
    """
    Summarize raw answer values for a number question.

    Statistics and bins use the outlier-trimmed set when trimming kept at
    least one value, otherwise every parsed value.
    """
    parsed = parse_numbers(values)
    if not parsed:
        return NumericSummary()

    trimmed = exclude_outliers(parsed)
    stats = trimmed if trimmed else parsed
    if len(stats) < len(parsed):
        logger.debug("Trimmed %d outlier(s) from %d value(s)", len(parsed) - len(stats), len(parsed))

    return NumericSummary(
        bins=histogram(stats),
        mean=sum(stats) / len(stats),
        median=lower_median(stats),
        n=len(stats),
        parsed_count=len(parsed),
        min=min(stats),
        max=max(stats),
    )
