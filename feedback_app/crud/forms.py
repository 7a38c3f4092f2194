import logging
from typing import Any, Dict, List

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from feedback_app.models.form import Form
from feedback_app.models.form_response import FormResponse
from feedback_app.models.user import User
from feedback_app.schemas.form import FormOut, PublicFormOut, ResponseOut
from feedback_app.utils.helpers import as_utc
from feedback_app.utils.validation import question_text

logger = logging.getLogger(__name__)


def normalize_question(question: dict) -> Dict[str, Any]:
    """
    Stored shape of a validated question.

    Text and options are trimmed; text questions keep an empty option list.
    """
    question_type = question["type"]
    options = []
    if question_type == "multiple-choice":
        options = [option.strip() for option in question["options"]]
    return {
        "questionText": question_text(question).strip(),
        "type": question_type,
        "options": options,
    }


def to_form_out(form: Form, response_count: int) -> FormOut:
    return FormOut(
        id=form.id,
        publicId=form.public_id,
        title=form.title,
        questions=form.questions,
        createdBy=form.created_by,
        createdAt=form.created_at,
        updatedAt=form.updated_at,
        responseCount=response_count
    )


def to_public_form(form: Form) -> PublicFormOut:
    return PublicFormOut(
        id=form.public_id,
        title=form.title,
        questions=form.questions,
        responseCount=len(form.responses)
    )


def create_form(db: Session, form_data: dict, owner: User) -> Form:
    """
    Create a new form owned by ``owner``

    Parameters:
    - form_data: request body already accepted by validate_form_creation
    - owner: the authenticated creator

    Returns:
    - The persisted Form with its generated public identifier
    """
    new_form = Form(
        title=form_data["title"].strip(),
        questions=[normalize_question(q) for q in form_data["questions"]],
        created_by=owner.id
    )
    db.add(new_form)
    db.commit()
    db.refresh(new_form)
    logger.info(f"User {owner.id} created form {new_form.public_id}")
    return new_form


def get_form_by_public_id(db: Session, public_id: str, for_update: bool = False) -> Form:
    """
    Look up a form by its public identifier

    Raises:
    - HTTPException 404 when no form has that identifier
    """
    query = db.query(Form).filter(Form.public_id == public_id)
    if for_update:
        query = query.with_for_update()
    form = query.first()
    if not form:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Form not found")
    return form


def get_owned_form(db: Session, public_id: str, user: User, action: str) -> Form:
    """Fetch a form, allowing only its creator through"""
    form = get_form_by_public_id(db, public_id)
    if form.created_by != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Not authorized to {action} for this form"
        )
    return form


def get_forms_for_owner(db: Session, user: User) -> List[Form]:
    return (
        db.query(Form)
        .filter(Form.created_by == user.id)
        .order_by(Form.created_at)
        .all()
    )


def count_responses(db: Session, form: Form) -> int:
    return db.query(FormResponse).filter(FormResponse.form_id == form.id).count()


def check_answers(form: Form, answers: List[dict]) -> None:
    """
    Match submitted answers against the form's current questions.

    Rules are checked in order: one answer per question, answer i bound to
    question i with a string answer, and multiple-choice answers equal to
    one of the options. The first violation raises a 400.
    """
    questions = form.questions
    if len(answers) != len(questions):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="All questions must be answered"
        )

    for index, (question, answer) in enumerate(zip(questions, answers)):
        # Answers are stored and exported as strings only
        if answer.get("questionIndex") != index or not isinstance(answer.get("answer"), str):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid answer format"
            )
        if question["type"] == "multiple-choice" and answer.get("answer") not in question["options"]:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid answer for multiple-choice question"
            )


def submit_response(db: Session, public_id: str, answers: List[dict]) -> int:
    """
    Append a response to a form; the only way responses are ever written

    Parameters:
    - public_id: the form's public identifier
    - answers: list accepted by validate_form_response

    Returns:
    - The form's response count after the append
    """
    # Row lock keeps read, check and append together for this form
    form = get_form_by_public_id(db, public_id, for_update=True)
    try:
        check_answers(form, answers)
    except HTTPException:
        db.rollback()
        raise

    response = FormResponse(
        form_id=form.id,
        answers=[
            {"questionIndex": index, "answer": answer["answer"]}
            for index, answer in enumerate(answers)
        ]
    )
    db.add(response)
    db.commit()
    logger.info(f"Stored response for form {public_id}")
    return count_responses(db, form)


def get_responses(form: Form) -> List[ResponseOut]:
    return [
        ResponseOut(answers=response.answers, submittedAt=as_utc(response.submitted_at))
        for response in form.responses
    ]
