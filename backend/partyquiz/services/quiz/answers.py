"""Answer storage keyed by (party, contestant, question).

A row exists only while the contestant has a live answer; clearing an
answer deletes the row. Writes go through a single atomic upsert so two
first-time submissions for the same key cannot create two rows.
"""

from datetime import datetime, timezone
from typing import List

from flask import current_app
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError

from partyquiz import db
from partyquiz.errors import NotFoundError
from partyquiz.models import Answer, Contestant
from . import lifecycle, realtime
from .scoring import AnswerRecord

_KEY_COLUMNS = ['party_id', 'contestant_id', 'question_number']
_DIALECT_INSERTS = {'postgresql': pg_insert, 'sqlite': sqlite_insert}


def upsert_answer(party_id: str, contestant_id: str, question_number: int, value: float) -> Answer:
    now = datetime.now(timezone.utc)
    key = {'party_id': party_id, 'contestant_id': contestant_id, 'question_number': question_number}
    dialect_insert = _DIALECT_INSERTS.get(db.engine.dialect.name)
    if dialect_insert is not None:
        stmt = dialect_insert(Answer.__table__).values(value=value, updated_at=now, **key)
        stmt = stmt.on_conflict_do_update(
            index_elements=_KEY_COLUMNS,
            set_={'value': stmt.excluded.value, 'updated_at': stmt.excluded.updated_at},
        )
        db.session.execute(stmt)
    else:
        try:
            with db.session.begin_nested():
                db.session.add(Answer(value=value, updated_at=now, **key))
        except IntegrityError:
            Answer.query.filter_by(**key).update({'value': value, 'updated_at': now})
    db.session.commit()
    return Answer.query.filter_by(**key).one()


def delete_answer(party_id: str, contestant_id: str, question_number: int) -> bool:
    """Remove the answer if present. Returns whether a row was deleted."""
    deleted = Answer.query.filter_by(
        party_id=party_id, contestant_id=contestant_id, question_number=question_number
    ).delete(synchronize_session=False)
    db.session.commit()
    return deleted > 0


def list_contestant_answers(contestant_id: str) -> List[Answer]:
    return Answer.query.filter_by(contestant_id=contestant_id).order_by(Answer.question_number).all()


def list_party_answers(party_id: str, question_number: int = None) -> List[AnswerRecord]:
    """Answers with contestant names, ordered by contestant join time."""
    query = (
        db.session.query(Answer, Contestant.name)
        .join(Contestant, Answer.contestant_id == Contestant.id)
        .filter(Answer.party_id == party_id)
    )
    if question_number is not None:
        query = query.filter(Answer.question_number == question_number)
    rows = query.order_by(Contestant.joined_at, Contestant.id, Answer.question_number).all()
    return [
        AnswerRecord(
            contestant_id=answer.contestant_id,
            contestant_name=name,
            value=answer.value,
            question_number=answer.question_number,
        )
        for answer, name in rows
    ]


def _get_contestant(contestant_id: str) -> Contestant:
    contestant = db.session.get(Contestant, contestant_id)
    if not contestant:
        raise NotFoundError('Contestant not found')
    return contestant


def submit_answer(contestant_id: str, question_number, value) -> dict:
    """Store, replace or clear a contestant's answer.

    An empty or non-numeric ``value`` clears the answer.
    """
    lifecycle.parse_question_number(question_number)
    contestant = _get_contestant(contestant_id)
    party = contestant.party
    number = lifecycle.check_answer_window(
        party.status,
        question_number,
        party.total_questions,
        current_question=party.current_question,
        enforce_current=current_app.config.get('ENFORCE_CURRENT_QUESTION', False),
    )
    party_id = party.id

    parsed = lifecycle.parse_number(value)
    if parsed is None:
        delete_answer(party_id, contestant_id, number)
        current_app.logger.info(f"[answer-delete] party={party_id} contestant={contestant_id} question={number}")
        realtime.notify(party_id, realtime.ANSWER_DELETED, {'contestantId': contestant_id, 'questionNumber': number})
        return {'success': True, 'deleted': True}

    answer = upsert_answer(party_id, contestant_id, number, parsed)
    current_app.logger.info(f"[answer-upsert] party={party_id} contestant={contestant_id} question={number}")
    realtime.notify(party_id, realtime.ANSWER_SUBMITTED, {'contestantId': contestant_id, 'questionNumber': number})
    return {'success': True, 'answer': answer.to_dict()}


def clear_answer(contestant_id: str, question_number) -> dict:
    return submit_answer(contestant_id, question_number, None)


def contestant_answers(contestant_id: str) -> dict:
    contestant = _get_contestant(contestant_id)
    return {
        'party': contestant.party.to_summary(),
        'contestant': {'id': contestant.id, 'name': contestant.name},
        'answers': [a.to_dict() for a in list_contestant_answers(contestant.id)],
    }
