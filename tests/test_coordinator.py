"""
Tests for the bail coordinator.

Covers:
- Two-participant flow through to cancellation
- Idempotent repeat bails, before and after cancellation
- Hidden status until the caller bails
- Unknown plans / secrets
- Concurrent last bails (exactly one cancellation)
- Expiry
"""

import asyncio
from datetime import timedelta

import pytest

from bailout.bail.coordinator import get_status, submit_bail
from bailout.bail.creation import create_plan
from bailout.core.clock import utcnow
from bailout.core.errors import InvalidParticipant, NotFound
from bailout.db import repo


async def _new_plan(sessions, n=2, **kw):
    created = await create_plan(sessions, "dinner at 8", n, **kw)
    return created.plan_id, [p.secret for p in created.participants]


@pytest.mark.asyncio
async def test_first_bail_hides_nothing_of_self_and_stays_active(sessions):
    plan_id, (a, b) = await _new_plan(sessions)

    view = (await submit_bail(sessions, plan_id, a)).as_public()

    assert view["status"] == "active"
    assert view["currentUser"] == {"name": "Participant 1", "wantsToBail": True}
    me, other = view["participants"]
    assert me == {"name": "Participant 1", "isCurrentUser": True, "wantsToBail": True}
    # A has bailed, so B's status is visible to A.
    assert other == {"name": "Participant 2", "isCurrentUser": False, "wantsToBail": False}

    b_view = (await get_status(sessions, plan_id, b)).as_public()
    assert b_view["status"] == "active"
    assert "wantsToBail" not in b_view["participants"][0]
    assert b_view["currentUser"]["wantsToBail"] is False


@pytest.mark.asyncio
async def test_last_bail_cancels_and_reveals_to_everyone(sessions):
    plan_id, (a, b) = await _new_plan(sessions)
    await submit_bail(sessions, plan_id, a)

    view = (await submit_bail(sessions, plan_id, b)).as_public()

    assert view["status"] == "cancelled"
    assert [p["wantsToBail"] for p in view["participants"]] == [True, True]
    a_view = (await get_status(sessions, plan_id, a)).as_public()
    assert a_view["status"] == "cancelled"
    assert [p["wantsToBail"] for p in a_view["participants"]] == [True, True]


@pytest.mark.asyncio
async def test_repeat_bail_after_cancellation_is_noop(sessions):
    plan_id, (a, b) = await _new_plan(sessions)
    await submit_bail(sessions, plan_id, a)
    await submit_bail(sessions, plan_id, b)
    before = await get_status(sessions, plan_id, a)

    again = await submit_bail(sessions, plan_id, a)

    assert again == before
    assert again.status == "cancelled"


@pytest.mark.asyncio
async def test_submit_twice_same_as_once(sessions):
    plan_id, (a, b, c) = await _new_plan(sessions, 3)

    once = await submit_bail(sessions, plan_id, b)
    twice = await submit_bail(sessions, plan_id, b)

    assert once == twice
    assert twice.status == "active"


@pytest.mark.asyncio
async def test_unbailed_participant_never_sees_others(sessions):
    plan_id, (a, b, c) = await _new_plan(sessions, 3)
    await submit_bail(sessions, plan_id, a)
    await submit_bail(sessions, plan_id, c)

    view = (await get_status(sessions, plan_id, b)).as_public()

    assert view["status"] == "active"
    for p in view["participants"]:
        assert ("wantsToBail" in p) == p["isCurrentUser"]


@pytest.mark.asyncio
async def test_no_cancellation_until_all_bailed(sessions):
    plan_id, secrets = await _new_plan(sessions, 4)

    for i, s in enumerate(secrets):
        view = await submit_bail(sessions, plan_id, s)
        expected = "cancelled" if i == len(secrets) - 1 else "active"
        assert view.status == expected

    async with sessions() as db:
        plan = await repo.get_plan(db, plan_id)
    assert plan.status == "cancelled"
    assert all(p.wants_to_bail for p in plan.participants)


@pytest.mark.asyncio
async def test_unknown_plan_and_unknown_secret(sessions):
    plan_id, (a, _) = await _new_plan(sessions)

    with pytest.raises(NotFound):
        await submit_bail(sessions, "plan_missing", a)
    with pytest.raises(NotFound):
        await get_status(sessions, "plan_missing", a)
    with pytest.raises(InvalidParticipant):
        await submit_bail(sessions, plan_id, "not-a-secret")
    with pytest.raises(InvalidParticipant):
        await get_status(sessions, plan_id, "not-a-secret")


@pytest.mark.asyncio
async def test_secret_of_another_plan_is_rejected(sessions):
    plan_id, _ = await _new_plan(sessions)
    _, (foreign, _) = await _new_plan(sessions)

    with pytest.raises(InvalidParticipant):
        await submit_bail(sessions, plan_id, foreign)

    async with sessions() as db:
        plan = await repo.get_plan(db, plan_id)
    assert not any(p.wants_to_bail for p in plan.participants)


@pytest.mark.asyncio
async def test_concurrent_last_bails_cancel_exactly_once(sessions):
    plan_id, (a, b, c) = await _new_plan(sessions, 3)
    await submit_bail(sessions, plan_id, a)

    views = await asyncio.gather(
        submit_bail(sessions, plan_id, b),
        submit_bail(sessions, plan_id, c),
    )

    # Serialized: the first writer sees C/B still out, the second cancels.
    assert sorted(v.status for v in views) == ["active", "cancelled"]
    for s in (a, b, c):
        assert (await get_status(sessions, plan_id, s)).status == "cancelled"


@pytest.mark.asyncio
async def test_everyone_bails_at_once(sessions):
    plan_id, secrets = await _new_plan(sessions, 5)

    views = await asyncio.gather(*(submit_bail(sessions, plan_id, s) for s in secrets))

    assert [v.status for v in views].count("cancelled") == 1
    async with sessions() as db:
        plan = await repo.get_plan(db, plan_id)
    assert plan.status == "cancelled"
    assert all(p.wants_to_bail for p in plan.participants)


@pytest.mark.asyncio
async def test_expired_active_plan_is_not_found(sessions):
    eight_days_ago = utcnow() - timedelta(days=8)
    plan_id, (a, b) = await _new_plan(sessions, now=eight_days_ago)

    with pytest.raises(NotFound):
        await get_status(sessions, plan_id, a)
    with pytest.raises(NotFound):
        await submit_bail(sessions, plan_id, b)

    async with sessions() as db:
        plan = await repo.get_plan(db, plan_id)
    assert not any(p.wants_to_bail for p in plan.participants)


@pytest.mark.asyncio
async def test_expired_cancelled_plan_is_not_found(sessions):
    created_at = utcnow() - timedelta(days=10)
    plan_id, (a, b) = await _new_plan(sessions, now=created_at)
    back_then = created_at + timedelta(days=1)
    await submit_bail(sessions, plan_id, a, now=back_then)
    assert (await submit_bail(sessions, plan_id, b, now=back_then)).status == "cancelled"

    with pytest.raises(NotFound):
        await get_status(sessions, plan_id, a)
    with pytest.raises(NotFound):
        await submit_bail(sessions, plan_id, a)
