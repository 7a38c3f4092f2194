from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Sequence

from feedback_app.models.form import Form
from feedback_app.utils.helpers import as_utc, get_utc_now


def build_owner_analytics(forms: Sequence[Form], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Totals across every form an owner has created.

    ``thisMonthResponses`` counts responses since the first day of the
    current UTC month and ``thisWeekResponses`` those from the last seven
    days.
    """
    now = as_utc(now or get_utc_now())
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    week_start = now - timedelta(days=7)

    total_responses = 0
    total_questions = 0
    this_month = 0
    this_week = 0
    top_forms = []

    for form in forms:
        responses = form.responses
        total_responses += len(responses)
        total_questions += len(form.questions or [])
        for response in responses:
            if response.submitted_at is None:
                continue
            submitted_at = as_utc(response.submitted_at)
            if submitted_at >= month_start:
                this_month += 1
            if submitted_at >= week_start:
                this_week += 1
        top_forms.append({
            "publicId": form.public_id,
            "title": form.title,
            "questionCount": len(form.questions or []),
            "responseCount": len(responses),
        })

    average = total_responses / len(forms) if forms else 0
    # sorted() is stable, so forms with equal counts keep creation order
    top_forms = sorted(top_forms, key=lambda item: item["responseCount"], reverse=True)

    return {
        "totalForms": len(forms),
        "totalResponses": total_responses,
        "totalQuestions": total_questions,
        "averageResponses": round(average, 1),
        "thisMonthResponses": this_month,
        "thisWeekResponses": this_week,
        "topForms": top_forms,
    }
