from flask import Blueprint, jsonify, request

from partyquiz.services.quiz import parties

party = Blueprint('party', __name__)


@party.route('/create', methods=['POST'])
def create_party():
    data = request.get_json(silent=True) or {}
    new_party = parties.create_party(data.get('totalQuestions'))
    return jsonify({
        'code': new_party.code,
        'hostId': new_party.host_id,
        'partyId': new_party.id,
        'totalQuestions': new_party.total_questions,
    }), 201


@party.route('/join', methods=['POST'])
def join_party():
    data = request.get_json(silent=True) or {}
    return jsonify(parties.join_party(data.get('code'), data.get('name'))), 201


@party.route('/<string:code>', methods=['GET'])
def get_party(code):
    return jsonify(parties.party_by_code(code))
