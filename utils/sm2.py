from datetime import datetime, timedelta
from numbers import Real

from models.review import MIN_GRADE, MAX_GRADE, PASSING_GRADE
from models.word import SchedulingState
from utils.clock import ensure_utc
from utils.errors import ValidationError

DEFAULT_E_FACTOR = 2.5
MIN_E_FACTOR = 1.3
FAILED_INTERVAL_DAYS = 1
FIRST_INTERVAL_DAYS = 1
SECOND_INTERVAL_DAYS = 6

def validate_grade(grade) -> float:
    """Reject anything that is not a number in [0, 5]. Out of range values are never clamped."""
    if isinstance(grade, bool) or not isinstance(grade, Real):
        raise ValidationError(f"Grade must be a number, got {grade!r}")
    if not MIN_GRADE <= grade <= MAX_GRADE:
        raise ValidationError(f"Grade must be between {MIN_GRADE} and {MAX_GRADE}, got {grade}")
    return grade

def update_e_factor(e_factor: float, grade: float) -> float:
    """SM-2 easiness update, floored at 1.3."""
    return max(MIN_E_FACTOR, e_factor + (0.1 - (5 - grade) * (0.08 + (5 - grade) * 0.02)))

def next_interval(repetition: int, previous_interval: int, e_factor: float) -> int:
    """Interval in days for the ``repetition``-th consecutive successful recall."""
    if repetition == 1:
        return FIRST_INTERVAL_DAYS
    if repetition == 2:
        return SECOND_INTERVAL_DAYS
    # Rows scheduled before interval_days was stored restart from the second interval.
    previous = previous_interval if previous_interval > 0 else SECOND_INTERVAL_DAYS
    return max(1, round(previous * e_factor))

def compute_next_review(state: SchedulingState, grade, now: datetime) -> SchedulingState:
    """Apply one review to ``state`` and return the new scheduling state.

    Pure: nothing is read from or written to storage.
    """
    grade = validate_grade(grade)
    now = ensure_utc(now)

    e_factor = state.e_factor
    if state.repetition == 0 and e_factor == 0:
        e_factor = DEFAULT_E_FACTOR
    new_ef = update_e_factor(e_factor, grade)

    if grade < PASSING_GRADE:
        new_repetition = 0
        new_interval = FAILED_INTERVAL_DAYS
    else:
        new_repetition = state.repetition + 1
        new_interval = next_interval(new_repetition, state.interval_days, new_ef)

    review_duration = state.review_duration
    if state.last_reviewed_at is not None:
        elapsed = now - ensure_utc(state.last_reviewed_at)
        review_duration += max(0, int(elapsed.total_seconds()))

    return state.model_copy(
        update={
            "e_factor": new_ef,
            "repetition": new_repetition,
            "interval_days": new_interval,
            "review_duration": review_duration,
            "reviewed": True,
            "next_review_at": now + timedelta(days=new_interval),
            "date_first_reviewed": state.date_first_reviewed or now,
            "last_reviewed_at": now,
        }
    )
