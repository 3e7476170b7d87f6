# bailout/db/repo.py

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from bailout.db.models import Plan, Participant, PLAN_CANCELLED


async def add_plan(db: AsyncSession, plan: Plan) -> Plan:
    # Plan and its participants go in one flush; the caller owns the transaction.
    db.add(plan)
    await db.flush()
    return plan


async def get_plan(db: AsyncSession, plan_id: str, *, for_update: bool = False) -> Plan | None:
    """
    Load a plan together with all of its participants.

    for_update locks the plan row (PostgreSQL) so every writer of this
    aggregate serializes behind it. populate_existing makes a second call in
    the same session return fresh rows instead of identity-map copies.
    """
    stmt = (
        select(Plan)
        .where(Plan.id == plan_id)
        .options(selectinload(Plan.participants))
        .execution_options(populate_existing=True)
    )
    if for_update:
        stmt = stmt.with_for_update(of=Plan)
    res = await db.execute(stmt)
    return res.scalar_one_or_none()


async def list_participants(db: AsyncSession, plan_id: str) -> list[Participant]:
    res = await db.execute(
        select(Participant)
        .where(Participant.plan_id == plan_id)
        .order_by(Participant.idx)
        .execution_options(populate_existing=True)
    )
    return list(res.scalars().all())


async def mark_bailed(db: AsyncSession, participant: Participant) -> Participant:
    participant.wants_to_bail = True
    await db.flush()
    return participant


async def mark_cancelled(db: AsyncSession, plan: Plan) -> Plan:
    plan.status = PLAN_CANCELLED
    await db.flush()
    return plan
