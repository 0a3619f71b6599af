from flask import Blueprint, jsonify, request

from partyquiz.services.quiz import answers, parties

quiz = Blueprint('quiz', __name__)


# ---- Host endpoints (authorized by possession of the host token) ----

@quiz.route('/host/<string:host_id>/current-question', methods=['PUT'])
def advance_question(host_id):
    data = request.get_json(silent=True) or {}
    return jsonify(parties.advance_question(host_id, data.get('currentQuestion')))


@quiz.route('/host/<string:host_id>/question/<string:question_number>', methods=['POST'])
def reveal_question(host_id, question_number):
    data = request.get_json(silent=True) or {}
    return jsonify(parties.reveal_question(host_id, question_number, data.get('correctAnswer')))


@quiz.route('/host/<string:host_id>/finish', methods=['POST'])
def finish_quiz(host_id):
    data = request.get_json(silent=True) or {}
    return jsonify(parties.finish_quiz(host_id, data.get('correctAnswers')))


@quiz.route('/host/<string:host_id>/status', methods=['GET'])
def host_status(host_id):
    return jsonify(parties.host_status(host_id))


@quiz.route('/host/<string:host_id>/status', methods=['PUT'])
def set_status(host_id):
    data = request.get_json(silent=True) or {}
    return jsonify(parties.set_status(host_id, data.get('status')))


@quiz.route('/host/<string:host_id>/leaderboard', methods=['GET'])
def host_leaderboard(host_id):
    return jsonify(parties.host_leaderboard(host_id))


# ---- Player endpoints (authorized by possession of the contestant id) ----

@quiz.route('/player/<string:contestant_id>/answer', methods=['PUT'])
def submit_answer(contestant_id):
    data = request.get_json(silent=True) or {}
    return jsonify(answers.submit_answer(contestant_id, data.get('questionNumber'), data.get('value')))


@quiz.route('/player/<string:contestant_id>/answer/<string:question_number>', methods=['DELETE'])
def clear_answer(contestant_id, question_number):
    return jsonify(answers.clear_answer(contestant_id, question_number))


@quiz.route('/player/<string:contestant_id>/answers', methods=['GET'])
def list_answers(contestant_id):
    return jsonify(answers.contestant_answers(contestant_id))


@quiz.route('/player/<string:contestant_id>/leaderboard', methods=['GET'])
def player_leaderboard(contestant_id):
    return jsonify(parties.contestant_leaderboard(contestant_id))
