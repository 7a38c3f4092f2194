from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from feedback_app.core.security.auth import get_current_user
from feedback_app.crud import forms as crud_forms
from feedback_app.db.session import get_db
from feedback_app.models.user import User
from feedback_app.schemas.form import FormSummary, OwnerAnalytics
from feedback_app.services.analytics import build_owner_analytics
from feedback_app.services.export import export_filename, export_responses_to_csv
from feedback_app.services.summary import build_summary
from feedback_app.utils.validation import (
    is_valid_form_id,
    raise_for_errors,
    validate_form_creation,
    validate_form_response,
)

router = APIRouter(prefix="/forms", tags=["forms"])


def _require_form_id(form_id: str) -> None:
    if not is_valid_form_id(form_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Form ID is required"
        )


@router.post("", status_code=status.HTTP_201_CREATED)
def create_form(
    body: Dict[str, Any] = Body(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a new form owned by the caller"""
    raise_for_errors(validate_form_creation(body))
    form = crud_forms.create_form(db, body, current_user)
    return {"form": crud_forms.to_form_out(form, response_count=0)}


@router.get("")
def list_forms(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """List the caller's forms without their responses"""
    forms = crud_forms.get_forms_for_owner(db, current_user)
    return {
        "forms": [
            crud_forms.to_form_out(form, crud_forms.count_responses(db, form))
            for form in forms
        ]
    }


@router.get("/analytics", response_model=OwnerAnalytics)
def get_analytics(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Response totals across the caller's forms"""
    return build_owner_analytics(crud_forms.get_forms_for_owner(db, current_user))


@router.get("/{form_id}")
def get_form(form_id: str, db: Session = Depends(get_db)):
    """Public view of a form for respondents"""
    _require_form_id(form_id)
    form = crud_forms.get_form_by_public_id(db, form_id)
    return {"form": crud_forms.to_public_form(form)}


@router.post("/{form_id}/responses", status_code=status.HTTP_201_CREATED)
def submit_response(form_id: str, body: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    """Submit answers to a form; no account needed"""
    _require_form_id(form_id)
    raise_for_errors(validate_form_response(body))
    response_count = crud_forms.submit_response(db, form_id, body["answers"])
    return {
        "message": "Response submitted successfully",
        "responseCount": response_count
    }


@router.get("/{form_id}/responses")
def get_responses(form_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Raw responses, owner only"""
    _require_form_id(form_id)
    form = crud_forms.get_owned_form(db, form_id, current_user, "view responses")
    responses = crud_forms.get_responses(form)
    return {"responses": responses, "responseCount": len(responses)}


@router.get("/{form_id}/summary", response_model=FormSummary)
def get_summary(form_id: str, db: Session = Depends(get_db)):
    """Per-question statistics"""
    _require_form_id(form_id)
    form = crud_forms.get_form_by_public_id(db, form_id)
    return build_summary(form)


@router.get("/{form_id}/export")
def export_responses(
    form_id: str,
    name: str = Query("id", pattern="^(id|title)$"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Download responses as CSV, owner only; ``name=title`` names the file after the title"""
    _require_form_id(form_id)
    form = crud_forms.get_owned_form(db, form_id, current_user, "export responses")
    filename = export_filename(form, use_title=(name == "title"))
    return Response(
        content=export_responses_to_csv(form),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )
