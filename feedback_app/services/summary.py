"""Per-question statistics over a form's responses."""
from typing import Any, Dict, List, Optional, Sequence

from feedback_app.models.form import Form


def find_answer(answers: Sequence[dict], question_index: int) -> Optional[dict]:
    """Return the first answer bound to ``question_index``, or None"""
    for answer in answers or []:
        if answer.get("questionIndex") == question_index:
            return answer
    return None


def count_options(question: dict, index: int, answer_sets: Sequence[Sequence[dict]]) -> Dict[str, int]:
    # Every declared option is present, even with zero votes
    counts = {option: 0 for option in question.get("options") or []}
    for answers in answer_sets:
        answer = find_answer(answers, index)
        if answer is None:
            continue
        value = answer.get("answer")
        # Values that are not current options (e.g. stale ones) are ignored
        if isinstance(value, str) and value in counts:
            counts[value] += 1
    return counts


def count_text_answers(index: int, answer_sets: Sequence[Sequence[dict]]) -> int:
    count = 0
    for answers in answer_sets:
        answer = find_answer(answers, index)
        if answer is None:
            continue
        value = answer.get("answer")
        if isinstance(value, str) and value.strip() != "":
            count += 1
    return count


def build_question_stats(questions: Sequence[dict], answer_sets: Sequence[Sequence[dict]]) -> List[Dict[str, Any]]:
    """
    Compute statistics for each question, in question order.

    Multiple-choice questions get ``options`` and a ``counts`` mapping;
    text questions get the number of non-blank answers as
    ``responseCount``.
    """
    stats = []
    for index, question in enumerate(questions):
        if question.get("type") == "multiple-choice":
            stats.append({
                "questionText": question.get("questionText"),
                "type": "multiple-choice",
                "options": list(question.get("options") or []),
                "counts": count_options(question, index, answer_sets),
            })
        else:
            stats.append({
                "questionText": question.get("questionText"),
                "type": "text",
                "responseCount": count_text_answers(index, answer_sets),
            })
    return stats


def build_summary(form: Form) -> Dict[str, Any]:
    answer_sets = [response.answers for response in form.responses]
    return {
        "id": form.public_id,
        "title": form.title,
        "questions": form.questions,
        "responseCount": len(answer_sets),
        "questionStats": build_question_stats(form.questions, answer_sets),
    }
