"""
Test the example poll used by the demo script.

Runs every example question through the results view and checks the
numbers a presenter would see.
"""

import random

from livepoll.examples import build_example_poll
from livepoll.layout import LayoutEngine
from livepoll.model import QuestionType
from livepoll.results import LiveResults


def results_by_type():
    out = {}
    for question, answers in build_example_poll():
        live = LiveResults(question, engine=LayoutEngine(rng=random.Random(0)))
        live.notify_canvas(800, 360)
        live.notify_answers(answers)
        out[question.type] = live
    return out


def test_example_poll_covers_every_type():
    assert set(results_by_type()) == set(QuestionType)


def test_example_choice_totals():
    totals = results_by_type()[QuestionType.MCQ].results.category_totals
    # "walk" and "Train" are not on the list
    assert [(t.category, t.total) for t in totals] == [("Walk", 2), ("Bike", 1), ("Bus", 4), ("Car", 1)]


def test_example_number_drops_outlier_and_junk():
    numeric = results_by_type()[QuestionType.NUMBER].results.numeric
    assert numeric.parsed_count == 9
    assert numeric.n == 8
    assert numeric.max == 9


def test_example_allocation_ignores_unknown_category():
    totals = results_by_type()[QuestionType.ALLOCATION].results.category_totals
    assert [(t.category, t.total) for t in totals] == [("Lectures", 13), ("Labs", 16), ("Projects", 11)]


def test_example_short_answers_get_cards():
    live = results_by_type()[QuestionType.SHORT]
    assert len(live.layout) == 6
    assert live.results.terms[0].term == "fun"
