"""
Request validation for the auth and forms endpoints.

Each ``validate_*`` function takes the decoded JSON body and returns a list
of human readable error strings; an empty list means the body is accepted.
Errors accumulate rather than stopping at the first problem, and routes
report them joined with ``", "`` through :func:`raise_for_errors`.
"""
import re
from typing import Any, List

from fastapi import HTTPException, status

from feedback_app.models.form import QUESTION_TYPES, MIN_QUESTIONS, MAX_QUESTIONS

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def _is_blank(value: Any, min_length: int = 1) -> bool:
    return not isinstance(value, str) or len(value.strip()) < min_length


def question_text(question: Any) -> Any:
    """Return a question's text, accepting ``questionText`` or ``text``"""
    if not isinstance(question, dict):
        return None
    if "questionText" in question:
        return question.get("questionText")
    return question.get("text")


def validate_registration(data: dict) -> List[str]:
    errors = []

    if _is_blank(data.get("name"), 2):
        errors.append("Name must be at least 2 characters long")

    email = data.get("email")
    if not isinstance(email, str) or "@" not in email:
        errors.append("Valid email is required")

    password = data.get("password")
    if not isinstance(password, str) or len(password) < 6:
        errors.append("Password must be at least 6 characters long")

    return errors


def validate_login(data: dict) -> List[str]:
    errors = []

    if not data.get("email"):
        errors.append("Email is required")

    if not data.get("password"):
        errors.append("Password is required")

    return errors


def validate_user_update(data: dict) -> List[str]:
    """Same rules as registration, applied only to the fields being changed"""
    errors = []

    if data.get("name") is not None and _is_blank(data["name"], 2):
        errors.append("Name must be at least 2 characters long")

    email = data.get("email")
    if email is not None and (not isinstance(email, str) or "@" not in email):
        errors.append("Valid email is required")

    password = data.get("password")
    if password is not None and (not isinstance(password, str) or len(password) < 6):
        errors.append("Password must be at least 6 characters long")

    return errors


def validate_form_creation(data: dict) -> List[str]:
    """
    Validate a form creation body.

    Ordering of the returned errors: title, question count, then for each
    question in order its text, type, option count and empty options.
    A non-list ``questions`` yields a single error and no per-question
    checks.
    """
    errors = []

    if _is_blank(data.get("title"), 3):
        errors.append("Title must be at least 3 characters long")

    questions = data.get("questions")
    if not isinstance(questions, list):
        errors.append("Questions must be an array")
        return errors

    if len(questions) < MIN_QUESTIONS or len(questions) > MAX_QUESTIONS:
        errors.append(f"Forms must have between {MIN_QUESTIONS} and {MAX_QUESTIONS} questions")

    # Per-question checks run even when the count is already wrong
    for index, question in enumerate(questions, start=1):
        if not isinstance(question, dict):
            question = {}

        if _is_blank(question_text(question), 5):
            errors.append(f"Question {index}: Question text must be at least 5 characters long")

        question_type = question.get("type")
        if question_type not in QUESTION_TYPES:
            errors.append(f"Question {index}: Type must be either 'text' or 'multiple-choice'")

        if question_type == "multiple-choice":
            options = question.get("options")
            if not isinstance(options, list) or len(options) < 2:
                errors.append(f"Question {index}: Multiple-choice questions must have at least 2 options")
            else:
                for opt_index, option in enumerate(options, start=1):
                    if _is_blank(option):
                        errors.append(f"Question {index}, Option {opt_index}: Option text cannot be empty")

    return errors


def validate_form_response(data: dict) -> List[str]:
    """
    Structural check of a response body.

    Matching the answers against the target form happens at submission
    time in ``crud.forms.submit_response``.
    """
    errors = []

    answers = data.get("answers")
    if not isinstance(answers, list):
        errors.append("Answers must be an array")
        return errors

    for index, answer in enumerate(answers, start=1):
        if not isinstance(answer, dict):
            answer = {}

        question_index = answer.get("questionIndex")
        # bool is a subclass of int but is not a question index
        if (
            isinstance(question_index, bool)
            or not isinstance(question_index, (int, float))
            or question_index < 0
        ):
            errors.append(f"Answer {index}: Invalid question index")

        value = answer.get("answer")
        if value is None or value == "":
            errors.append(f"Answer {index}: Answer cannot be empty")

    return errors


def is_valid_object_id(value: Any) -> bool:
    return isinstance(value, str) and bool(OBJECT_ID_PATTERN.match(value))


def is_valid_form_id(value: Any) -> bool:
    return isinstance(value, str) and len(value.strip()) > 0


def raise_for_errors(errors: List[str]) -> None:
    """Raise a 400 carrying every collected message, if there are any"""
    if errors:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=", ".join(errors)
        )
