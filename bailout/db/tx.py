"""
Runs one unit of work as a single database transaction, with retries.

What it does:
- Opens a session and a transaction per attempt (all-or-nothing)
- Lets domain errors (NotFound, InvalidParticipant, ...) straight through
- Retries DBAPI failures with exponential backoff
- Maps exhausted retries to TransactionConflict / StorageUnavailable

Every unit of work handed in here must be safe to run more than once.
"""


import asyncio
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bailout.core.config import settings
from bailout.core.errors import TransactionConflict, StorageUnavailable
from bailout.core.logging import get_logger

log = get_logger("db.tx")

T = TypeVar("T")

# serialization_failure, deadlock_detected
_CONFLICT_SQLSTATES = {"40001", "40P01"}


def is_conflict(exc: DBAPIError) -> bool:
    orig = getattr(exc, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in _CONFLICT_SQLSTATES:
        return True
    msg = str(orig or exc).lower()
    return "database is locked" in msg or "could not serialize" in msg


async def run_in_transaction(
    session_factory: async_sessionmaker[AsyncSession],
    work: Callable[[AsyncSession], Awaitable[T]],
    *,
    op: str = "tx",
    max_attempts: int | None = None,
    backoff: float | None = None,
) -> T:
    attempts = max_attempts or settings.TX_MAX_ATTEMPTS
    base = settings.TX_RETRY_BACKOFF if backoff is None else backoff

    last_err: DBAPIError | None = None
    for attempt in range(attempts):
        try:
            async with session_factory() as db:
                async with db.begin():
                    return await work(db)
        except DBAPIError as e:
            last_err = e
            if attempt + 1 >= attempts:
                break
            delay = base * (2**attempt)
            log.warning(f"{op} failed: {e.orig!r}. retrying in {delay:.2f}s (attempt {attempt+1}/{attempts})")
            await asyncio.sleep(delay)

    log.error(f"{op} failed after {attempts} attempts: {last_err!r}")
    if last_err is not None and is_conflict(last_err):
        raise TransactionConflict(f"{op}: could not serialize after {attempts} attempts") from last_err
    raise StorageUnavailable(f"{op}: storage failure") from last_err
