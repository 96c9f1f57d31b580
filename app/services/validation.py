"""
Validatori puri, chiamati all'inizio di ogni operazione che modifica dati.
Ognuno solleva ValidationError con il nome del campo e un motivo breve.
"""
import math
from datetime import datetime
from typing import Optional

from app.core.errors import ValidationError

TITLE_MAX = 100
DESCRIPTION_MAX = 1000
CONTENT_MAX = 2000
FEEDBACK_MAX = 500
MIN_MAX_MARKS = 1


def validate_title(title: str) -> str:
    title = (title or "").strip()
    if not title:
        raise ValidationError("title_required", field="title")
    if len(title) > TITLE_MAX:
        raise ValidationError("title_too_long", field="title")
    return title


def validate_description(description: str) -> str:
    if not description:
        raise ValidationError("description_required", field="description")
    if len(description) > DESCRIPTION_MAX:
        raise ValidationError("description_too_long", field="description")
    return description


def validate_due_date(due_date: datetime, now: datetime) -> datetime:
    if due_date <= now:
        raise ValidationError("due_date_not_in_future", field="dueDate")
    return due_date


def validate_max_marks(max_marks: float) -> float:
    if not math.isfinite(max_marks) or max_marks < MIN_MAX_MARKS:
        raise ValidationError("max_marks_below_minimum", field="maxMarks")
    return max_marks


def validate_content(content: Optional[str]) -> Optional[str]:
    if content is not None and len(content) > CONTENT_MAX:
        raise ValidationError("content_too_long", field="content")
    return content


def validate_feedback(feedback: Optional[str]) -> Optional[str]:
    if feedback is not None and len(feedback) > FEEDBACK_MAX:
        raise ValidationError("feedback_too_long", field="feedback")
    return feedback


def validate_grade(grade: float, max_marks: float) -> float:
    if not math.isfinite(grade):
        raise ValidationError("grade_not_finite", field="grade")
    if grade < 0:
        raise ValidationError("grade_negative", field="grade")
    if grade > max_marks:
        raise ValidationError("grade_exceeds_max_marks", field="grade")
    return grade
