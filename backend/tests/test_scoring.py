from partyquiz.services.quiz.leaderboard import build_leaderboard
from partyquiz.services.quiz.scoring import AnswerRecord, percent_off, reveal_breakdown, score_question


def _answers(**values):
    return [AnswerRecord(contestant_id=name, contestant_name=name, value=v) for name, v in values.items()]


def _by_id(scores):
    return {s.contestant_id: s.score for s in scores}


def test_empty_question_scores_nothing():
    assert score_question([], 42) == []
    assert score_question([], 0) == []


def test_exact_close_and_far_answers():
    scores = _by_id(score_question(_answers(A=100, B=90, C=80), 100))
    assert scores == {'A': 25, 'B': 15, 'C': 0}


def test_ten_percent_boundary_is_inclusive_on_both_sides():
    scores = _by_id(score_question(_answers(A=110, B=90, C=111), 100))
    assert scores['A'] == 25
    assert scores['B'] == 25
    assert scores['C'] == 0


def test_zero_correct_answer_only_rewards_exact_zero():
    scores = _by_id(score_question(_answers(A=0, B=5), 0))
    assert scores == {'A': 25, 'B': 0}


def test_zero_correct_answer_nearest_still_awarded_without_exact_hit():
    scores = _by_id(score_question(_answers(A=1, B=-3), 0))
    assert scores == {'A': 10, 'B': 0}


def test_tied_nearest_all_get_bonus():
    scores = _by_id(score_question(_answers(A=47, B=53, C=70), 50))
    # distance 3 is 6% off, so both tied answers also land within 10%
    assert scores == {'A': 25, 'B': 25, 'C': 0}


def test_tied_nearest_outside_proximity_gets_ten_only():
    scores = _by_id(score_question(_answers(A=40, B=60, C=100), 50))
    assert scores == {'A': 10, 'B': 10, 'C': 0}


def test_negative_correct_answer_uses_absolute_percentage():
    scores = _by_id(score_question(_answers(A=-95, B=-120), -100))
    assert scores == {'A': 25, 'B': 0}


def test_percent_off():
    assert percent_off(90, 100) == 10
    assert percent_off(0, 0) == 0
    assert percent_off(1, 0) == float('inf')


def test_reveal_breakdown_orders_by_score_then_closeness():
    answers = _answers(A=70, B=103, C=100, D=130)
    rows = reveal_breakdown(answers, 100)
    assert [r['contestantId'] for r in rows] == ['C', 'B', 'A', 'D']
    assert rows[0] == {'contestantId': 'C', 'name': 'C', 'answer': 100, 'score': 25}
    assert rows[2]['score'] == 0 and rows[3]['score'] == 0


def _record(cid, q, value):
    return AnswerRecord(contestant_id=cid, contestant_name=cid.title(), value=value, question_number=q)


def test_leaderboard_totals_and_question_scores():
    answers = [
        _record('ann', 1, 100), _record('bob', 1, 90),
        _record('ann', 2, 10), _record('bob', 2, 50),
    ]
    board = build_leaderboard(answers, {1: 100, 2: 48}, 3)
    assert [e.contestant_id for e in board] == ['bob', 'ann']
    bob, ann = board
    assert bob.question_scores == [15, 25, 0]
    assert ann.question_scores == [25, 0, 0]
    assert bob.total_score == sum(bob.question_scores) == 40
    assert ann.total_score == 25
    assert bob.to_dict() == {
        'contestantId': 'bob',
        'contestantName': 'Bob',
        'totalScore': 40,
        'questionScores': [15, 25, 0],
    }


def test_leaderboard_skips_questions_without_correct_answer():
    answers = [_record('ann', 1, 5), _record('ann', 2, 5)]
    board = build_leaderboard(answers, {2: 5}, 2)
    assert board[0].question_scores == [0, 25]


def test_leaderboard_only_lists_contestants_with_answers():
    assert build_leaderboard([], {1: 10}, 1) == []
    board = build_leaderboard([_record('ann', 1, 3)], {1: 10}, 1)
    assert [e.contestant_id for e in board] == ['ann']


def test_leaderboard_ties_keep_first_appearance_order():
    answers = [_record('cat', 1, 10), _record('ann', 1, 10), _record('bob', 1, 1)]
    board = build_leaderboard(answers, {1: 10}, 1)
    assert [e.contestant_id for e in board] == ['cat', 'ann', 'bob']


def test_leaderboard_totals_never_drop_as_answers_are_revealed():
    answers = [_record('ann', 1, 10), _record('bob', 1, 12), _record('ann', 2, 7), _record('bob', 2, 1)]
    partial = {e.contestant_id: e.total_score for e in build_leaderboard(answers, {1: 10}, 2)}
    full = {e.contestant_id: e.total_score for e in build_leaderboard(answers, {1: 10, 2: 1}, 2)}
    for cid in partial:
        assert full[cid] >= partial[cid]
