from dataclasses import dataclass
from typing import Iterable, List

PROXIMITY_BONUS = 15
NEAREST_BONUS = 10
PROXIMITY_PERCENT = 10


@dataclass(frozen=True)
class AnswerRecord:
    contestant_id: str
    contestant_name: str
    value: float
    question_number: int = 0


@dataclass(frozen=True)
class QuestionScore:
    contestant_id: str
    contestant_name: str
    value: float
    score: int


def percent_off(value: float, correct_answer: float) -> float:
    """Relative error of ``value`` in percent.

    A correct answer of 0 has no relative scale: 0 is 0% off and anything
    else is treated as infinitely far off.
    """
    if correct_answer != 0:
        return abs((value - correct_answer) / correct_answer) * 100
    return 0.0 if value == 0 else float('inf')


def score_question(answers: Iterable[AnswerRecord], correct_answer: float) -> List[QuestionScore]:
    """Score every answer to one question.

    +15 when within 10% of the correct answer, +10 for the nearest answer.
    Every answer tied for the nearest distance gets the +10.
    """
    answers = list(answers)
    if not answers:
        return []

    distances = [abs(a.value - correct_answer) for a in answers]
    min_distance = min(distances)

    scores = []
    for answer, distance in zip(answers, distances):
        score = 0
        if percent_off(answer.value, correct_answer) <= PROXIMITY_PERCENT:
            score += PROXIMITY_BONUS
        if distance == min_distance:
            score += NEAREST_BONUS
        scores.append(QuestionScore(answer.contestant_id, answer.contestant_name, answer.value, score))
    return scores


def reveal_breakdown(answers: Iterable[AnswerRecord], correct_answer: float) -> List[dict]:
    """Per-player view of one question, best score first, then closest answer."""
    scored = score_question(answers, correct_answer)
    scored.sort(key=lambda s: (-s.score, abs(s.value - correct_answer)))
    return [
        {
            'contestantId': s.contestant_id,
            'name': s.contestant_name,
            'answer': s.value,
            'score': s.score,
        }
        for s in scored
    ]
