# userauth/dependencies.py

from typing import Annotated

from fastapi import Depends, Request
from redis.asyncio import Redis
from sqlmodel.ext.asyncio.session import AsyncSession

from userauth.core.configuration import settings
from userauth.core.redis import get_redis_client
from userauth.core.session import SessionStore
from userauth.db.database import get_session
from userauth.graphql.context import Context


async def get_context(
        request: Request,
        session: Annotated[AsyncSession, Depends(get_session)],
        redis_client: Annotated[Redis, Depends(get_redis_client)]
) -> Context:
    """
    Resolves the session cookie to a user id and builds the GraphQL context
    """
    sessions = SessionStore(redis_client)
    session_id = request.cookies.get(settings.COOKIE_NAME)
    user_id = await sessions.get_user_id(session_id)

    return Context(
        db=session,
        redis_client=redis_client,
        sessions=sessions,
        session_id=session_id if user_id is not None else None,
        user_id=user_id,
    )
