import csv
import io
from typing import Dict, List, Sequence

from feedback_app.models.form import Form
from feedback_app.models.form_response import FormResponse
from feedback_app.services.summary import find_answer
from feedback_app.utils.helpers import format_datetime, sanitize_filename

SUBMITTED_AT_COLUMN = "submittedAt"


def build_csv_headers(questions: Sequence[dict]) -> List[str]:
    """Column labels ``Q{n}: {questionText}`` in question order, then submittedAt"""
    headers = [
        f"Q{index + 1}: {question.get('questionText')}"
        for index, question in enumerate(questions)
    ]
    headers.append(SUBMITTED_AT_COLUMN)
    return headers


def build_csv_rows(questions: Sequence[dict], responses: Sequence[FormResponse]) -> List[Dict[str, str]]:
    """One row per response in submission order; missing answers are blank"""
    headers = build_csv_headers(questions)
    rows = []
    for response in responses:
        row = {}
        for index in range(len(questions)):
            answer = find_answer(response.answers, index)
            row[headers[index]] = answer.get("answer") if answer is not None else ""
        row[SUBMITTED_AT_COLUMN] = format_datetime(response.submitted_at)
        rows.append(row)
    return rows


def export_responses_to_csv(form: Form) -> str:
    """Serialize a form's responses to a CSV string"""
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=build_csv_headers(form.questions))
    writer.writeheader()
    writer.writerows(build_csv_rows(form.questions, form.responses))
    return output.getvalue()


def export_filename(form: Form, use_title: bool = False) -> str:
    """
    Attachment name for an export.

    Defaults to the public identifier; ``use_title`` names the file after
    the form title instead, falling back to the identifier when the title
    has nothing usable left after sanitizing.
    """
    if use_title:
        name = sanitize_filename(form.title or "")
        if name:
            return f"{name}_responses.csv"
    return f"form_{form.public_id}_responses.csv"
