from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker
from bailout.core.config import settings
from bailout.db.base import Base
from bailout.db import models  # noqa: F401


def make_engine(url: str | None = None, *, echo: bool | None = None) -> AsyncEngine:
    url = url or settings.DATABASE_URL
    echo = settings.DB_ECHO if echo is None else echo

    if not url.startswith("sqlite"):
        # Postgres & friends: serializable on top of the FOR UPDATE row lock.
        return create_async_engine(url, echo=echo, isolation_level="SERIALIZABLE")

    engine = create_async_engine(
        url,
        echo=echo,
        connect_args={"timeout": settings.SQLITE_BUSY_TIMEOUT},
    )

    # pysqlite's implicit BEGIN is deferred: two transactions could both read
    # the participant set before either writes. Take the write lock up front so
    # concurrent transactions queue on the busy timeout instead.
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_implicit_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


engine = make_engine()
SessionLocal = async_sessionmaker(engine, expire_on_commit=False)

async def init_db(bind: AsyncEngine | None = None):
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
