import csv
import io
from datetime import datetime, timezone

from feedback_app.models import Form, FormResponse
from feedback_app.services.export import (
    build_csv_headers,
    export_filename,
    export_responses_to_csv,
)

QUESTIONS = [
    {"questionText": "How satisfied are you?", "type": "multiple-choice", "options": ["Happy", "Sad"]},
    {"questionText": "What could we improve?", "type": "text", "options": []},
    {"questionText": "Would you recommend us?", "type": "multiple-choice", "options": ["Yes", "No"]},
]


def make_form(responses, title="Customer Survey"):
    return Form(
        public_id="7f9c2ba4-e88f-4d2a-9c1e-000000000001",
        title=title,
        questions=QUESTIONS,
        responses=responses,
    )


def parse(text):
    return list(csv.reader(io.StringIO(text)))


def test_headers_use_one_based_labels():
    assert build_csv_headers(QUESTIONS) == [
        "Q1: How satisfied are you?",
        "Q2: What could we improve?",
        "Q3: Would you recommend us?",
        "submittedAt",
    ]


def test_rows_follow_submission_order():
    first = FormResponse(
        answers=[
            {"questionIndex": 0, "answer": "Happy"},
            {"questionIndex": 1, "answer": "Nothing"},
            {"questionIndex": 2, "answer": "Yes"},
        ],
        submitted_at=datetime(2026, 3, 1, 12, 30, tzinfo=timezone.utc),
    )
    second = FormResponse(
        answers=[
            {"questionIndex": 0, "answer": "Sad"},
            {"questionIndex": 1, "answer": "Speed"},
            {"questionIndex": 2, "answer": "No"},
        ],
        submitted_at=datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc),
    )
    rows = parse(export_responses_to_csv(make_form([first, second])))

    assert rows[0][0] == "Q1: How satisfied are you?"
    assert rows[1] == ["Happy", "Nothing", "Yes", "2026-03-01T12:30:00+00:00"]
    assert rows[2] == ["Sad", "Speed", "No", "2026-03-02T08:00:00+00:00"]


def test_missing_answer_is_blank():
    response = FormResponse(
        answers=[{"questionIndex": 0, "answer": "Happy"}, {"questionIndex": 2, "answer": "Yes"}],
        submitted_at=datetime(2026, 3, 1, tzinfo=timezone.utc),
    )
    rows = parse(export_responses_to_csv(make_form([response])))
    assert rows[1][1] == ""
    assert rows[1][0] == "Happy"


def test_missing_timestamp_is_blank():
    response = FormResponse(answers=[{"questionIndex": 0, "answer": "Happy"}], submitted_at=None)
    rows = parse(export_responses_to_csv(make_form([response])))
    assert rows[1][3] == ""


def test_values_are_quoted_when_needed():
    response = FormResponse(
        answers=[
            {"questionIndex": 0, "answer": "Happy"},
            {"questionIndex": 1, "answer": 'Faster, "cheaper"\nand nicer'},
            {"questionIndex": 2, "answer": "Yes"},
        ],
        submitted_at=datetime(2026, 3, 1, tzinfo=timezone.utc),
    )
    text = export_responses_to_csv(make_form([response]))
    assert '"Faster, ""cheaper""\nand nicer"' in text
    assert parse(text)[1][1] == 'Faster, "cheaper"\nand nicer'


def test_no_responses_yields_header_only():
    rows = parse(export_responses_to_csv(make_form([])))
    assert len(rows) == 1


def test_export_is_repeatable():
    response = FormResponse(
        answers=[{"questionIndex": 0, "answer": "Happy"}],
        submitted_at=datetime(2026, 3, 1, tzinfo=timezone.utc),
    )
    form = make_form([response])
    assert export_responses_to_csv(form) == export_responses_to_csv(form)


def test_filename_from_public_id():
    assert export_filename(make_form([])) == "form_7f9c2ba4-e88f-4d2a-9c1e-000000000001_responses.csv"


def test_filename_from_title():
    assert export_filename(make_form([], title='Q3 "Pulse" / Team'), use_title=True) == "Q3_Pulse__Team_responses.csv"


def test_filename_falls_back_when_title_unusable():
    form = make_form([], title="???")
    assert export_filename(form, use_title=True) == "form_7f9c2ba4-e88f-4d2a-9c1e-000000000001_responses.csv"
