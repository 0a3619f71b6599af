import random

from flask import current_app
from sqlalchemy.exc import IntegrityError

from partyquiz import db
from partyquiz.errors import ConflictError, NotFoundError, StateError, ValidationError
from partyquiz.models import (
    ACTIVE, FINISHED, LOBBY, Contestant, Party, dump_correct_answers, generate_host_id,
)
from . import lifecycle, realtime
from .answers import list_party_answers
from .leaderboard import build_leaderboard, leaderboard_to_dicts
from .scoring import reveal_breakdown


def generate_party_code(length=4):
    """Random short code for players to type in. Avoids O and 0."""
    return ''.join(random.choices(lifecycle.CODE_ALPHABET, k=length))


def _correct_answers_payload(answers):
    return {str(q): v for q, v in sorted(answers.items())}


def _get_party_for_host(host_id: str) -> Party:
    party = Party.query.filter_by(host_id=host_id).first()
    if not party:
        raise NotFoundError('Party not found')
    return party


def create_party(total_questions) -> Party:
    cfg = current_app.config
    total = lifecycle.validate_total_questions(total_questions, int(cfg.get('MAX_QUESTIONS', 50)))
    length = int(cfg.get('PARTY_CODE_LENGTH', 4))
    max_attempts = int(cfg.get('PARTY_CODE_MAX_ATTEMPTS', 10))

    for attempt in range(1, max_attempts + 1):
        code = generate_party_code(length)
        if Party.query.filter_by(code=code).first():
            current_app.logger.warning(f"[party-create] duplicate code={code} attempt={attempt}, retrying")
            continue
        party = Party(code=code, host_id=generate_host_id(), total_questions=total,
                      status=LOBBY, current_question=1)
        db.session.add(party)
        try:
            db.session.commit()
        except IntegrityError:
            # Another request took the code between the check and the insert
            db.session.rollback()
            current_app.logger.warning(f"[party-create] code={code} taken at insert attempt={attempt}, retrying")
            continue
        current_app.logger.info(f"[party-create] party={party.id} code={party.code} total_questions={total}")
        return party

    current_app.logger.error(f"[party-create] no unique code after {max_attempts} attempts")
    raise ConflictError('Failed to generate unique code. Please try again.', status_code=500)


def join_party(code, name) -> dict:
    code = lifecycle.normalize_party_code(code, int(current_app.config.get('PARTY_CODE_LENGTH', 4)))
    name = lifecycle.normalize_name(name)

    party = Party.query.filter_by(code=code).first()
    if not party:
        raise NotFoundError('Party not found')
    next_status = lifecycle.status_after_join(party.status)
    if Contestant.query.filter_by(party_id=party.id, name=name).first():
        raise ConflictError('Name already taken in this party')

    party_id = party.id
    contestant = Contestant(party_id=party_id, name=name)
    try:
        db.session.add(contestant)
        db.session.flush()
        if next_status != party.status:
            # Conditional so a concurrent finish is never overwritten
            Party.query.filter_by(id=party_id, status=LOBBY).update(
                {Party.status: ACTIVE}, synchronize_session=False
            )
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError('Name already taken in this party')

    db.session.refresh(party)
    current_app.logger.info(f"[join] party={party.id} contestant={contestant.id} status={party.status}")
    realtime.notify(party.id, realtime.CONTESTANT_JOINED, {
        'contestant': contestant.to_dict(),
        'partyStatus': party.status,
    })
    return {
        'contestantId': contestant.id,
        'partyId': party.id,
        'code': party.code,
        'totalQuestions': party.total_questions,
        'currentQuestion': party.current_question,
    }


def advance_question(host_id: str, new_question) -> dict:
    lifecycle.parse_question_number(new_question)
    party = _get_party_for_host(host_id)
    number = lifecycle.parse_question_number(new_question, party.total_questions)

    party.current_question = number
    db.session.commit()
    current_app.logger.info(f"[question] party={party.id} current_question={number}")
    realtime.notify(party.id, realtime.QUESTION_CHANGED, {'currentQuestion': number})
    return {'success': True, 'currentQuestion': number}


def reveal_question(host_id: str, question_number, correct_answer) -> dict:
    number = lifecycle.parse_question_number(question_number)
    correct = lifecycle.parse_number(correct_answer)
    if correct is None:
        raise ValidationError('Valid correct answer is required')
    party = _get_party_for_host(host_id)
    lifecycle.parse_question_number(number, party.total_questions)

    records = list_party_answers(party.id, question_number=number)
    current_app.logger.info(f"[reveal] party={party.id} question={number} answers={len(records)}")
    return {
        'questionNumber': number,
        'correctAnswer': correct,
        'playerAnswers': reveal_breakdown(records, correct),
    }


def finish_quiz(host_id: str, correct_answers) -> dict:
    if not isinstance(correct_answers, dict):
        raise ValidationError('Correct answers are required')
    party = _get_party_for_host(host_id)
    lifecycle.check_finish(party.status, party.correct_answers is not None)
    parsed = lifecycle.check_correct_answers(correct_answers, party.total_questions)

    # Commit the status first so late submissions are rejected before we read answers
    updated = Party.query.filter(
        Party.id == party.id, Party.correct_answers_json.is_(None)
    ).update(
        {Party.status: FINISHED, Party.correct_answers_json: dump_correct_answers(parsed)},
        synchronize_session=False,
    )
    db.session.commit()
    if not updated:
        raise StateError('Quiz has already finished')

    leaderboard = leaderboard_to_dicts(
        build_leaderboard(list_party_answers(party.id), parsed, party.total_questions)
    )
    payload = {'leaderboard': leaderboard, 'correctAnswers': _correct_answers_payload(parsed)}
    current_app.logger.info(f"[finish] party={party.id} contestants_ranked={len(leaderboard)}")
    realtime.notify(party.id, realtime.QUIZ_FINISHED, payload)
    return dict(success=True, **payload)


def set_status(host_id: str, status) -> dict:
    party = _get_party_for_host(host_id)
    policy = current_app.config.get('STATUS_DOWNGRADE_POLICY', lifecycle.DOWNGRADE_REJECT)
    current = party.status
    target = lifecycle.resolve_status_change(current, status, policy)
    if target == current:
        return {'success': True, 'status': current}

    updated = Party.query.filter_by(id=party.id, status=current).update(
        {Party.status: target}, synchronize_session=False
    )
    db.session.commit()
    if not updated:
        raise StateError('Party status changed, please retry')
    current_app.logger.info(f"[status] party={party.id} {current} -> {target}")
    realtime.notify(party.id, realtime.QUIZ_STATUS_CHANGED, {'status': target})
    return {'success': True, 'status': target}


def leaderboard_for_party(party: Party) -> dict:
    if party.status != FINISHED:
        raise StateError('Quiz not finished yet')
    correct = party.correct_answers
    if correct is None:
        raise StateError('No correct answers recorded')
    entries = build_leaderboard(list_party_answers(party.id), correct, party.total_questions)
    return {
        'leaderboard': leaderboard_to_dicts(entries),
        'correctAnswers': _correct_answers_payload(correct),
        'party': {'code': party.code, 'totalQuestions': party.total_questions},
    }


def host_leaderboard(host_id: str) -> dict:
    return leaderboard_for_party(_get_party_for_host(host_id))


def contestant_leaderboard(contestant_id: str) -> dict:
    contestant = db.session.get(Contestant, contestant_id)
    if not contestant:
        raise NotFoundError('Contestant not found')
    return leaderboard_for_party(contestant.party)


def host_status(host_id: str) -> dict:
    party = _get_party_for_host(host_id)
    return {
        'party': party.to_summary(),
        'contestants': [c.to_dict() for c in party.contestants],
    }


def party_by_code(code) -> dict:
    code = lifecycle.normalize_party_code(code, int(current_app.config.get('PARTY_CODE_LENGTH', 4)))
    party = Party.query.filter_by(code=code).first()
    if not party:
        raise NotFoundError('Party not found')
    # Public lookup: contestant ids are player credentials, so only a count is exposed
    return party.to_public_dict()
