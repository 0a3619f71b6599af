from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from .scoring import AnswerRecord, score_question


@dataclass
class LeaderboardEntry:
    contestant_id: str
    contestant_name: str
    total_score: int = 0
    question_scores: List[int] = field(default_factory=list)

    def to_dict(self):
        return {
            'contestantId': self.contestant_id,
            'contestantName': self.contestant_name,
            'totalScore': self.total_score,
            'questionScores': list(self.question_scores),
        }


def build_leaderboard(
    all_answers: Iterable[AnswerRecord],
    correct_answers: Mapping[int, Optional[float]],
    total_questions: int,
) -> List[LeaderboardEntry]:
    """Rank every contestant that answered at least one question.

    Questions without a correct answer contribute 0 to everyone. Equal totals
    keep the order in which contestants first appear in ``all_answers``.
    """
    all_answers = list(all_answers)

    entries: Dict[str, LeaderboardEntry] = {}
    by_question: Dict[int, List[AnswerRecord]] = {}
    for a in all_answers:
        if a.contestant_id not in entries:
            entries[a.contestant_id] = LeaderboardEntry(
                contestant_id=a.contestant_id,
                contestant_name=a.contestant_name,
                question_scores=[0] * total_questions,
            )
        by_question.setdefault(a.question_number, []).append(a)

    for q in range(1, total_questions + 1):
        correct = correct_answers.get(q)
        if correct is None:
            continue
        for s in score_question(by_question.get(q, []), correct):
            entry = entries[s.contestant_id]
            entry.total_score += s.score
            entry.question_scores[q - 1] = s.score

    # sorted() is stable, so ties stay in first-appearance order
    return sorted(entries.values(), key=lambda e: -e.total_score)


def leaderboard_to_dicts(entries: Iterable[LeaderboardEntry]) -> List[dict]:
    return [e.to_dict() for e in entries]
