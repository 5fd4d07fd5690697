"""
Example poll builder for demos and tests.

Builds one question of each type with a realistic spread of answers,
including the junk a live classroom produces (blank answers, non-numbers,
an outlier, an off-list choice).
"""
from typing import Dict, List, Tuple

from livepoll.model import Answer, Question, QuestionType


def build_example_poll() -> List[Tuple[Question, List[Answer]]]:
    poll = []

    mcq = Question(
        id="q-transport",
        prompt="How did you get to class today?",
        type=QuestionType.MCQ,
        options=["Walk", "Bike", "Bus", "Car"],
    )
    choices = ["Walk", "Bus", "Bus", "Bike", "Walk", "Bus", "walk", "Train", "Car", "Bus"]
    poll.append((mcq, [Answer(id=f"s{i}", value=v) for i, v in enumerate(choices, 1)]))

    number = Question(id="q-sleep", prompt="How many hours did you sleep?", type=QuestionType.NUMBER)
    hours = ["7", 6.5, "8", 5, "7.5", "six", 9, "6", "", 40, "7"]
    poll.append((number, [Answer(id=f"s{i}", value=v) for i, v in enumerate(hours, 1)]))

    allocation = Question(
        id="q-budget",
        prompt="Split 10 points across what the class should focus on.",
        type=QuestionType.ALLOCATION,
        options=["Lectures", "Labs", "Projects"],
    )
    splits: List[Dict[str, object]] = [
        {"Lectures": 3, "Labs": 4, "Projects": 3},
        {"Lectures": 0, "Labs": 5, "Projects": 5},
        {"Labs": "7", "Projects": 3},
        {"Lectures": 10, "Recess": 4},
    ]
    poll.append((allocation, [Answer(id=f"s{i}", value=v) for i, v in enumerate(splits, 1)]))

    short = Question(id="q-word", prompt="One phrase for today's lab?", type=QuestionType.SHORT)
    phrases = [
        "Really fun lab",
        "confusing but fun",
        "Too much reading",
        "fun group work",
        "   ",
        "more examples please https://example.com/slides",
        "group work was great",
    ]
    poll.append((short, [Answer(id=f"s{i}", value=v) for i, v in enumerate(phrases, 1)]))

    long = Question(id="q-reflect", prompt="What would you change about this unit?", type=QuestionType.LONG)
    reflections = [
        "More worked examples before the homework is due.",
        "The pacing in week three was too fast for me.",
        "",
        "I would like the labs to connect more clearly to the lectures.",
    ]
    poll.append((long, [Answer(id=f"s{i}", value=v) for i, v in enumerate(reflections, 1)]))

    return poll
