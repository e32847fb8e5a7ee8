# userauth/db/database.py

from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from userauth.core.configuration import settings
from userauth.models.user import User  # noqa: F401  (registers the table)

engine = create_async_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)


async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def reset_db():
    """
    Drops and recreates every table. Development only.
    """
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)


async def ping_db(session: AsyncSession) -> bool:
    conn = await session.connection()
    result = await conn.execute(text("SELECT 1"))
    return result.scalar() == 1


async def get_session():
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session
