from flask import current_app

from partyquiz import socketio

NAMESPACE = '/ws'

CONTESTANT_JOINED = 'contestant-joined'
ANSWER_SUBMITTED = 'answer-submitted'
ANSWER_DELETED = 'answer-deleted'
QUESTION_CHANGED = 'question-changed'
QUIZ_STATUS_CHANGED = 'quiz-status-changed'
QUIZ_FINISHED = 'quiz-finished'


def party_room(party_id: str) -> str:
    return f"party:{party_id}"


def notify(party_id: str, event: str, payload: dict) -> bool:
    """Push ``event`` to everyone subscribed to the party.

    Only call after the related change is committed. Delivery is best
    effort: a failure is logged and reported as False, never raised.
    """
    try:
        socketio.emit(event, payload, to=party_room(party_id), namespace=NAMESPACE)
    except Exception as exc:
        current_app.logger.warning(f"[notify-failed] party={party_id} event={event} error={exc}")
        return False
    return True
