"""Domain errors raised by the quiz services and their JSON rendering."""

from flask import jsonify
from werkzeug.exceptions import HTTPException


class QuizError(Exception):
    status_code = 400

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'error': self.message}


class ValidationError(QuizError):
    """Malformed input: bad code, out-of-range numbers, bad names."""
    status_code = 400


class NotFoundError(QuizError):
    status_code = 404


class ConflictError(QuizError):
    status_code = 409


class StateError(QuizError):
    """Operation not allowed for the party's current status."""
    status_code = 400


def register_error_handlers(flask_app) -> None:
    from partyquiz import db

    @flask_app.errorhandler(QuizError)
    def handle_quiz_error(exc):
        flask_app.logger.info(f"[rejected] {type(exc).__name__}: {exc.message}")
        return jsonify(exc.to_dict()), exc.status_code

    @flask_app.errorhandler(HTTPException)
    def handle_http_error(exc):
        return jsonify({'error': exc.description}), exc.code

    @flask_app.errorhandler(Exception)
    def handle_unexpected(exc):
        flask_app.logger.exception(f"[internal-error] {exc}")
        db.session.rollback()
        return jsonify({'error': 'Internal server error'}), 500
