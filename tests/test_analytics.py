from datetime import datetime, timedelta, timezone

from feedback_app.models import Form, FormResponse
from feedback_app.services.analytics import build_owner_analytics

NOW = datetime(2026, 10, 16, 12, 0, tzinfo=timezone.utc)

THREE_QUESTIONS = [
    {"questionText": "Question one?", "type": "text", "options": []},
    {"questionText": "Question two?", "type": "text", "options": []},
    {"questionText": "Question three?", "type": "text", "options": []},
]


def make_form(public_id, submitted, questions=THREE_QUESTIONS):
    return Form(
        public_id=public_id,
        title=f"Form {public_id}",
        questions=questions,
        responses=[FormResponse(answers=[], submitted_at=ts) for ts in submitted],
    )


def test_empty_owner():
    analytics = build_owner_analytics([], now=NOW)
    assert analytics == {
        "totalForms": 0,
        "totalResponses": 0,
        "totalQuestions": 0,
        "averageResponses": 0,
        "thisMonthResponses": 0,
        "thisWeekResponses": 0,
        "topForms": [],
    }


def test_totals_and_windows():
    busy = make_form("busy", [
        NOW - timedelta(days=1),       # this week, this month
        NOW - timedelta(days=10),      # this month only
        NOW - timedelta(days=40),      # neither
    ])
    quiet = make_form("quiet", [NOW - timedelta(hours=2)], questions=THREE_QUESTIONS + THREE_QUESTIONS[:1])

    analytics = build_owner_analytics([quiet, busy], now=NOW)

    assert analytics["totalForms"] == 2
    assert analytics["totalResponses"] == 4
    assert analytics["totalQuestions"] == 7
    assert analytics["averageResponses"] == 2.0
    assert analytics["thisMonthResponses"] == 3
    assert analytics["thisWeekResponses"] == 2
    assert [f["publicId"] for f in analytics["topForms"]] == ["busy", "quiet"]
    assert analytics["topForms"][0]["responseCount"] == 3


def test_naive_timestamps_are_treated_as_utc():
    form = make_form("naive", [datetime(2026, 10, 15, 9, 0)])
    analytics = build_owner_analytics([form], now=NOW)
    assert analytics["thisWeekResponses"] == 1


def test_average_is_rounded():
    forms = [make_form("a", [NOW]), make_form("b", []), make_form("c", [])]
    assert build_owner_analytics(forms, now=NOW)["averageResponses"] == 0.3
