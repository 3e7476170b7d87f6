"""
Creates a plan and all of its participants in one transaction.

Membership is fixed here: nothing later adds, removes or renames participants
or regenerates a secret. Secrets leave the service only in this response.
"""


from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bailout.bail.policy import MIN_PARTICIPANTS, MAX_PARTICIPANTS, participant_count_ok
from bailout.bail.schemas import CreatedPlan, CreatedParticipant
from bailout.core.clock import utcnow
from bailout.core.config import settings
from bailout.core.errors import InvalidPlanRequest
from bailout.core.ids import new_id, new_secret
from bailout.core.logging import get_logger
from bailout.db import repo
from bailout.db.models import Plan, Participant, PLAN_ACTIVE
from bailout.db.tx import run_in_transaction

log = get_logger("bail.creation")

DEFAULT_DESCRIPTION = "A secret plan"


def share_link(plan_id: str, secret: str) -> str:
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/bail/{plan_id}/{secret}"


async def create_plan(
    session_factory: async_sessionmaker[AsyncSession],
    description: str | None = None,
    num_participants: int = MIN_PARTICIPANTS,
    *,
    now: datetime | None = None,
) -> CreatedPlan:
    if not participant_count_ok(num_participants):
        raise InvalidPlanRequest(
            f"Number of participants must be between {MIN_PARTICIPANTS} and {MAX_PARTICIPANTS}."
        )

    description = (description or "").strip() or DEFAULT_DESCRIPTION
    created_at = now or utcnow()

    # Ids and secrets are minted once, outside the retried unit of work, so a
    # retry re-inserts the same rows instead of handing out different tokens.
    plan_id = new_id("plan")
    seats = [(new_id("pt"), new_secret(), f"Participant {i + 1}") for i in range(num_participants)]

    async def _work(db: AsyncSession) -> CreatedPlan:
        plan = Plan(
            id=plan_id,
            description=description,
            status=PLAN_ACTIVE,
            num_required=num_participants,
            created_at=created_at,
            participants=[
                Participant(id=pid, idx=i, secret=secret, name=name, wants_to_bail=False)
                for i, (pid, secret, name) in enumerate(seats)
            ],
        )
        await repo.add_plan(db, plan)
        return CreatedPlan(
            plan_id=plan_id,
            participants=[
                CreatedParticipant(name=name, secret=secret, link=share_link(plan_id, secret))
                for _, secret, name in seats
            ],
        )

    created = await run_in_transaction(session_factory, _work, op="create_plan")
    log.info(f"created plan {plan_id} with {num_participants} participants")
    return created
