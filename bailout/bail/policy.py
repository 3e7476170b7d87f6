"""
Fixed policy constants and the plan expiry check.

These are deliberately not settings: every deployment hands out tokens with the
same lifetime and the same group size bounds.
"""


from datetime import datetime, timedelta

PLAN_TTL = timedelta(days=7)
MIN_PARTICIPANTS = 2
MAX_PARTICIPANTS = 5


def is_expired(created_at: datetime, now: datetime) -> bool:
    return now - created_at > PLAN_TTL


def participant_count_ok(n: int) -> bool:
    return MIN_PARTICIPANTS <= n <= MAX_PARTICIPANTS
