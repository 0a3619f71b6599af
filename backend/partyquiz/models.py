from partyquiz import db
from datetime import datetime, timezone
import json
import secrets
import uuid


LOBBY = 'LOBBY'
ACTIVE = 'ACTIVE'
FINISHED = 'FINISHED'


def _utcnow():
    return datetime.now(timezone.utc)


def _new_id():
    return uuid.uuid4().hex


def generate_host_id():
    """Opaque bearer token that grants host control of a party."""
    return secrets.token_hex(32)


def _isoformat(value):
    return value.isoformat() if value else None


def dump_correct_answers(answers):
    """Serialize question number -> value as the JSON stored on the party."""
    return json.dumps({str(q): v for q, v in sorted(answers.items())})


class Party(db.Model):
    __tablename__ = 'party'
    id = db.Column(db.String(32), primary_key=True, default=_new_id)
    code = db.Column(db.String(8), nullable=False, index=True)
    host_id = db.Column(db.String(64), nullable=False, index=True)
    status = db.Column(db.String(16), nullable=False, default=LOBBY)
    total_questions = db.Column(db.Integer, nullable=False)
    current_question = db.Column(db.Integer, nullable=False, default=1)
    correct_answers_json = db.Column('correct_answers', db.Text, nullable=True)  # JSON object, written once at finish
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)

    contestants = db.relationship('Contestant', back_populates='party', order_by='Contestant.joined_at')

    __table_args__ = (
        db.UniqueConstraint('code', name='uq_party_code'),
        db.UniqueConstraint('host_id', name='uq_party_host_id'),
    )

    @property
    def correct_answers(self):
        """Mapping of question number -> correct value, or None before finish."""
        if not self.correct_answers_json:
            return None
        return {int(q): v for q, v in json.loads(self.correct_answers_json).items()}

    def to_summary(self):
        return {
            'id': self.id,
            'code': self.code,
            'status': self.status,
            'currentQuestion': self.current_question,
            'totalQuestions': self.total_questions,
        }

    def to_public_dict(self):
        return {
            'code': self.code,
            'status': self.status,
            'totalQuestions': self.total_questions,
            'currentQuestion': self.current_question,
            'contestantCount': len(self.contestants),
            'createdAt': _isoformat(self.created_at),
        }


class Contestant(db.Model):
    __tablename__ = 'contestant'
    id = db.Column(db.String(32), primary_key=True, default=_new_id)
    party_id = db.Column(db.String(32), db.ForeignKey('party.id'), nullable=False, index=True)
    name = db.Column(db.String(50), nullable=False)
    joined_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)

    party = db.relationship('Party', back_populates='contestants')
    answers = db.relationship('Answer', back_populates='contestant', order_by='Answer.question_number')

    __table_args__ = (
        db.UniqueConstraint('party_id', 'name', name='uq_contestant_party_name'),
    )

    def to_dict(self):
        answered = [a.question_number for a in self.answers]
        return {
            'id': self.id,
            'name': self.name,
            'answeredQuestions': answered,
            'totalAnswered': len(answered),
        }


class Answer(db.Model):
    __tablename__ = 'answer'
    id = db.Column(db.Integer, primary_key=True)
    party_id = db.Column(db.String(32), db.ForeignKey('party.id'), nullable=False)
    contestant_id = db.Column(db.String(32), db.ForeignKey('contestant.id'), nullable=False, index=True)
    question_number = db.Column(db.Integer, nullable=False)
    value = db.Column(db.Float, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    contestant = db.relationship('Contestant', back_populates='answers')

    __table_args__ = (
        db.UniqueConstraint('party_id', 'contestant_id', 'question_number', name='uq_answer_party_contestant_question'),
        db.Index('ix_answer_party_question', 'party_id', 'question_number'),
    )

    def to_dict(self):
        return {
            'questionNumber': self.question_number,
            'value': self.value,
            'updatedAt': _isoformat(self.updated_at),
        }
