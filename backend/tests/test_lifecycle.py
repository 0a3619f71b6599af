import pytest

from partyquiz.errors import StateError, ValidationError
from partyquiz.services.quiz import lifecycle


def test_first_join_activates_lobby():
    assert lifecycle.status_after_join('LOBBY') == 'ACTIVE'
    assert lifecycle.status_after_join('ACTIVE') == 'ACTIVE'
    with pytest.raises(StateError):
        lifecycle.status_after_join('FINISHED')


def test_status_change_only_moves_forward():
    assert lifecycle.resolve_status_change('LOBBY', 'FINISHED') == 'FINISHED'
    assert lifecycle.resolve_status_change('ACTIVE', 'ACTIVE') == 'ACTIVE'
    with pytest.raises(StateError):
        lifecycle.resolve_status_change('FINISHED', 'ACTIVE')
    assert lifecycle.resolve_status_change('FINISHED', 'LOBBY', lifecycle.DOWNGRADE_IGNORE) == 'FINISHED'
    with pytest.raises(ValidationError):
        lifecycle.resolve_status_change('LOBBY', 'lobby')


def test_answer_window():
    assert lifecycle.check_answer_window('ACTIVE', 3, 3) == 3
    assert lifecycle.check_answer_window('ACTIVE', '2', 3, current_question=1) == 2
    with pytest.raises(StateError):
        lifecycle.check_answer_window('FINISHED', 1, 3)
    with pytest.raises(ValidationError):
        lifecycle.check_answer_window('ACTIVE', 4, 3)
    with pytest.raises(StateError):
        lifecycle.check_answer_window('ACTIVE', 2, 3, current_question=1, enforce_current=True)


def test_parse_number():
    assert lifecycle.parse_number('  -1.5 ') == -1.5
    assert lifecycle.parse_number(1e300) == 1e300
    for bad in (None, '', '  ', 'abc', float('nan'), float('inf'), True, [1]):
        assert lifecycle.parse_number(bad) is None


def test_numbers_too_large_for_float_are_rejected():
    assert lifecycle.parse_number(10 ** 400) is None
    with pytest.raises(ValidationError):
        lifecycle.parse_question_number(float('inf'))
    with pytest.raises(ValidationError):
        lifecycle.parse_question_number(float('-inf'), total_questions=5)
    with pytest.raises(ValidationError, match='between 1 and 50'):
        lifecycle.validate_total_questions(float('inf'), 50)


def test_parse_question_number():
    assert lifecycle.parse_question_number('4') == 4
    assert lifecycle.parse_question_number(2.0) == 2
    for bad in (0, -1, 1.5, 'x', None, True):
        with pytest.raises(ValidationError):
            lifecycle.parse_question_number(bad)
    with pytest.raises(ValidationError):
        lifecycle.parse_question_number(6, total_questions=5)


def test_correct_answers_are_all_or_nothing():
    assert lifecycle.check_correct_answers({'1': 10, '2': '0'}, 2) == {1: 10.0, 2: 0.0}
    with pytest.raises(ValidationError, match='question 2'):
        lifecycle.check_correct_answers({'1': 10}, 2)
    with pytest.raises(ValidationError):
        lifecycle.check_correct_answers([10, 20], 2)


def test_finish_only_once():
    lifecycle.check_finish('ACTIVE', has_correct_answers=False)
    lifecycle.check_finish('FINISHED', has_correct_answers=False)
    with pytest.raises(StateError):
        lifecycle.check_finish('FINISHED', has_correct_answers=True)


def test_party_code_and_name_rules():
    assert lifecycle.normalize_party_code('ab12') == 'AB12'
    for bad in ('ABC', 'ABCDE', 'AB 1', None, 1234):
        with pytest.raises(ValidationError):
            lifecycle.normalize_party_code(bad)
    assert lifecycle.normalize_name('  Zoë ') == 'Zoë'
    with pytest.raises(ValidationError):
        lifecycle.normalize_name('')
    with pytest.raises(ValidationError):
        lifecycle.normalize_name('n' * 51)
