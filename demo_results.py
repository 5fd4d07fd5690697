"""
Demo: Summarize the example poll and print a results report.
"""

import asyncio
import random

from livepoll.config import configure_logging
from livepoll.examples import build_example_poll
from livepoll.layout import LayoutEngine, count_overlaps
from livepoll.model import QuestionType, SynthesisGroup, SynthesisRecord
from livepoll.results import LiveResults
from livepoll.serialization import layout_to_yaml, synthesis_to_yaml


async def canned_synthesizer(request):
    """Offline stand-in for the hosted synthesizer."""
    return SynthesisRecord(
        overall_summary=f"{len(request.items)} responses received.",
        groups=[SynthesisGroup(theme="All responses", summary="Unsorted.", contributions=list(request.items))],
    )


def print_results(live):
    results = live.results
    print()
    print("=" * 70)
    print(f"QUESTION: {live.question.prompt}  [{results.question_type.value}]")
    print("=" * 70)
    print(f"  Responses:             {results.response_count}")

    if results.category_totals is not None:
        print()
        print("📊 TOTALS")
        for t in results.category_totals:
            print(f"  {t.category:<20} {t.total:g}")

    if results.numeric is not None:
        s = results.numeric
        print()
        print("📈 HISTOGRAM")
        for b in s.bins:
            print(f"  {b.label:<12} {'#' * b.count} ({b.count})")
        print(f"  mean = {'n/a' if s.mean is None else round(s.mean, 2)}")
        print(f"  median = {'n/a' if s.median is None else round(s.median, 2)}")
        print(f"  n = {s.n} (of {s.parsed_count} parsed)")

    if results.terms is not None:
        print()
        print("☁️  TERMS")
        for t in results.terms[:10]:
            print(f"  {t.term:<20} {t.weight}")

    if live.layout:
        print()
        print("🗂  CARDS")
        print(layout_to_yaml(live.layout))
        print(f"  Overlapping pairs:     {count_overlaps(live.layout.values())}")

    if live.controller.record is not None:
        print()
        print("🧠 SYNTHESIS" + ("  (new responses since last synthesis)" if live.synthesis_stale else ""))
        print(synthesis_to_yaml(live.controller.record))

    if results.warnings:
        print()
        print("⚠️  WARNINGS")
        for i, warning in enumerate(results.warnings, 1):
            print(f"  {i}. {warning}")
    print()


async def main():
    for question, answers in build_example_poll():
        live = LiveResults(question, engine=LayoutEngine(rng=random.Random(7)))
        live.notify_canvas(800, 360)
        live.notify_answers(answers)
        if question.type in (QuestionType.SHORT, QuestionType.LONG):
            await live.synthesize(canned_synthesizer)
        print_results(live)


if __name__ == "__main__":
    configure_logging()
    asyncio.run(main())
