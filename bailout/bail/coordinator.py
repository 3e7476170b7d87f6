"""
Bail coordination: the only place plan state changes after creation.

What it does:
- Loads a plan + all participants inside one locked transaction
- Rejects missing/expired plans and unknown secrets
- Flips the caller's wantsToBail (never back)
- Cancels the plan when the last participant bails, exactly once
- Returns the post-transaction state, projected for the caller

Writers of one plan serialize on the plan row lock (BEGIN IMMEDIATE on
SQLite), so the re-read in step "all bailed?" always sees every sibling that
committed before us.
"""


from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bailout.bail.policy import is_expired
from bailout.bail.projector import find_participant, project
from bailout.bail.schemas import PlanView
from bailout.core.clock import utcnow
from bailout.core.errors import NotFound, InvalidParticipant
from bailout.core.logging import get_logger
from bailout.db import repo
from bailout.db.models import Plan, Participant, PLAN_CANCELLED
from bailout.db.tx import run_in_transaction

log = get_logger("bail.coordinator")


async def _load_live(db: AsyncSession, plan_id: str, secret: str, now: datetime, *, for_update: bool) -> tuple[Plan, Participant]:
    plan = await repo.get_plan(db, plan_id, for_update=for_update)
    # Expired and missing are the same answer on purpose.
    if plan is None or is_expired(plan.created_at, now):
        raise NotFound(plan_id)
    caller = find_participant(plan, secret)
    if caller is None:
        raise InvalidParticipant(plan_id)
    return plan, caller


async def submit_bail(
    session_factory: async_sessionmaker[AsyncSession],
    plan_id: str,
    participant_secret: str,
    *,
    now: datetime | None = None,
) -> PlanView:
    now = now or utcnow()

    async def _work(db: AsyncSession) -> PlanView:
        plan, caller = await _load_live(db, plan_id, participant_secret, now, for_update=True)

        if plan.status == PLAN_CANCELLED:
            log.info(f"plan {plan_id} already cancelled; bail from {caller.id} is a no-op")
        elif caller.wants_to_bail:
            log.info(f"participant {caller.id} already bailed on {plan_id}")
        else:
            await repo.mark_bailed(db, caller)
            participants = await repo.list_participants(db, plan_id)
            if all(p.wants_to_bail for p in participants):
                await repo.mark_cancelled(db, plan)
                log.info(f"plan {plan_id} cancelled: all {len(participants)} participants bailed")
            else:
                log.info(f"participant {caller.id} bailed on {plan_id}")

        fresh = await repo.get_plan(db, plan_id)
        return project(fresh, participant_secret)

    return await run_in_transaction(session_factory, _work, op="submit_bail")


async def get_status(
    session_factory: async_sessionmaker[AsyncSession],
    plan_id: str,
    participant_secret: str,
    *,
    now: datetime | None = None,
) -> PlanView:
    now = now or utcnow()

    async def _work(db: AsyncSession) -> PlanView:
        plan, _ = await _load_live(db, plan_id, participant_secret, now, for_update=False)
        return project(plan, participant_secret)

    return await run_in_transaction(session_factory, _work, op="get_status")
