from flask_socketio import join_room, leave_room, emit

from partyquiz import socketio
from partyquiz.models import Party
from partyquiz.services.quiz.realtime import NAMESPACE, party_room


def handle_connect():
    emit('connected', {'message': f'Connected to {NAMESPACE}'})


def _resolve_party_id(data):
    """Subscribers may name the party by id or by its join code."""
    data = data or {}
    party_id = data.get('partyId')
    code = data.get('code')
    if party_id:
        party = Party.query.filter_by(id=party_id).first()
    elif code:
        party = Party.query.filter_by(code=str(code).upper()).first()
    else:
        emit('error', {'message': 'partyId or code is required'})
        return None
    if not party:
        emit('error', {'message': 'Party not found'})
        return None
    return party.id


def handle_join_party(data):
    party_id = _resolve_party_id(data)
    if not party_id:
        return
    room = party_room(party_id)
    join_room(room)
    emit('joined', {'room': room, 'partyId': party_id})


def handle_leave_party(data):
    party_id = _resolve_party_id(data)
    if not party_id:
        return
    room = party_room(party_id)
    leave_room(room)
    emit('left', {'room': room})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = [NAMESPACE, '/'] if testing else [NAMESPACE]
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('join_party', handle_join_party, namespace=namespace)
        socketio.on_event('leave_party', handle_leave_party, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
