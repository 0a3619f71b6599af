"""Party state machine and input rules.

Status only moves forward: LOBBY -> ACTIVE -> FINISHED. Everything here is
pure; callers load the party, ask these helpers whether a change is
allowed, then commit.
"""

import math
import re
from typing import Mapping, Optional

from partyquiz.errors import StateError, ValidationError
from partyquiz.models import ACTIVE, FINISHED, LOBBY

STATUS_ORDER = {LOBBY: 0, ACTIVE: 1, FINISHED: 2}

CODE_ALPHABET = 'ABCDEFGHIJKLMNPQRSTUVWXYZ123456789'
MAX_NAME_LENGTH = 50

DOWNGRADE_REJECT = 'reject'
DOWNGRADE_IGNORE = 'ignore'


def parse_number(raw) -> Optional[float]:
    """Return ``raw`` as a finite float, or None if it is not a usable number."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
    try:
        value = float(raw)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def parse_question_number(raw, total_questions: int = None) -> int:
    if isinstance(raw, bool):
        raise ValidationError('Invalid question number')
    try:
        number = int(raw)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError('Invalid question number')
    if isinstance(raw, float) and raw != number:
        raise ValidationError('Invalid question number')
    if number < 1:
        raise ValidationError('Invalid question number')
    if total_questions is not None and number > total_questions:
        raise ValidationError(f'Question number must be between 1 and {total_questions}')
    return number


def validate_total_questions(raw, max_questions: int) -> int:
    message = f'Total questions must be between 1 and {max_questions}'
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        raise ValidationError(message)
    try:
        total = int(raw)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(message)
    if isinstance(raw, float) and raw != total:
        raise ValidationError(message)
    if not 1 <= total <= max_questions:
        raise ValidationError(message)
    return total


def is_valid_party_code(code, length: int = 4) -> bool:
    return isinstance(code, str) and re.fullmatch(rf'[A-Z0-9]{{{length}}}', code) is not None


def normalize_party_code(raw, length: int = 4) -> str:
    code = raw.upper() if isinstance(raw, str) else None
    if not is_valid_party_code(code, length):
        raise ValidationError('Invalid party code format')
    return code


def normalize_name(raw) -> str:
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError('Name is required')
    name = raw.strip()
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(f'Name must be {MAX_NAME_LENGTH} characters or less')
    return name


def status_after_join(status: str) -> str:
    """Joining is allowed until the party finishes; the first join activates it."""
    if status == FINISHED:
        raise StateError('This quiz has already finished')
    return ACTIVE if status == LOBBY else status


def check_answer_window(status: str, question_number, total_questions: int,
                        current_question: int = None, enforce_current: bool = False) -> int:
    """Validate that a player may change their answer to ``question_number``."""
    number = parse_question_number(question_number)
    if status == FINISHED:
        raise StateError('Quiz has ended')
    if number > total_questions:
        raise ValidationError(f'Question number must be between 1 and {total_questions}')
    if enforce_current and current_question is not None and number > current_question:
        raise StateError(f'Question {number} is not open yet')
    return number


def check_correct_answers(raw, total_questions: int) -> dict:
    """All-or-nothing: every question 1..total needs a numeric correct answer."""
    if not isinstance(raw, Mapping):
        raise ValidationError('Correct answers are required')
    parsed = {}
    for q in range(1, total_questions + 1):
        value = raw.get(str(q), raw.get(q))
        number = parse_number(value)
        if number is None:
            raise ValidationError(f'Missing or invalid correct answer for question {q}')
        parsed[q] = number
    return parsed


def check_finish(status: str, has_correct_answers: bool) -> None:
    """Correct answers are written once.

    A party the host already locked with an explicit FINISHED status may
    still be finished, as long as no correct answers were recorded.
    """
    if has_correct_answers:
        raise StateError('Quiz has already finished')


def resolve_status_change(current: str, requested, downgrade_policy: str = DOWNGRADE_REJECT) -> str:
    """Return the status the party should end up in after an explicit set.

    Forward moves apply, setting the current status is a no-op, and moving
    backwards either raises or is ignored depending on ``downgrade_policy``.
    """
    if requested not in STATUS_ORDER:
        raise ValidationError(f"Status must be one of {', '.join(STATUS_ORDER)}")
    if STATUS_ORDER[requested] >= STATUS_ORDER[current]:
        return requested
    if downgrade_policy == DOWNGRADE_IGNORE:
        return current
    raise StateError(f'Cannot change status from {current} to {requested}')
