"""
Builds the participant-facing view of a plan.

What it hides:
- Every secret, always
- Other participants' wantsToBail, until the caller has bailed themself

Once a plan is cancelled everybody bailed anyway, so the full picture is shown
to all of its participants.
"""


import hmac

from bailout.bail.schemas import PlanView, ParticipantView, CurrentUserView
from bailout.db.models import Plan, Participant, PLAN_CANCELLED


def secret_matches(participant: Participant, secret: str) -> bool:
    # surrogatepass: a JSON body may carry lone surrogates; they simply never match.
    return hmac.compare_digest(
        participant.secret.encode("utf-8"), secret.encode("utf-8", errors="surrogatepass")
    )


def find_participant(plan: Plan, secret: str) -> Participant | None:
    return next((p for p in plan.participants if secret_matches(p, secret)), None)


def project(plan: Plan, caller_secret: str) -> PlanView:
    caller = find_participant(plan, caller_secret)
    reveal = plan.status == PLAN_CANCELLED or (caller is not None and caller.wants_to_bail)

    participants = []
    for p in plan.participants:
        is_me = caller is not None and p.id == caller.id
        participants.append(
            ParticipantView(
                name=p.name,
                is_current_user=is_me,
                wants_to_bail=p.wants_to_bail if (is_me or reveal) else None,
            )
        )

    current_user = None
    if caller is not None:
        current_user = CurrentUserView(name=caller.name, wants_to_bail=caller.wants_to_bail)

    return PlanView(
        id=plan.id,
        description=plan.description,
        status=plan.status,
        participants=participants,
        current_user=current_user,
    )
