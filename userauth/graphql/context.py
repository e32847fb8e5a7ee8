# userauth/graphql/context.py

from redis.asyncio import Redis
from sqlmodel.ext.asyncio.session import AsyncSession
from strawberry.fastapi import BaseContext

from userauth.core.configuration import settings
from userauth.core.reset_tokens import ResetTokenStore
from userauth.core.session import SessionStore


class Context(BaseContext):
    """
    Per-request GraphQL context.
    `user_id` is the logged-in user resolved from the session cookie, or None.
    """

    def __init__(
            self,
            db: AsyncSession,
            redis_client: Redis,
            sessions: SessionStore,
            session_id: str | None = None,
            user_id: int | None = None
    ):
        super().__init__()
        self.db = db
        self.redis = redis_client
        self.sessions = sessions
        self.reset_tokens = ResetTokenStore(redis_client)
        self.session_id = session_id
        self.user_id = user_id

    async def log_in(self, user_id: int) -> None:
        # Never reuse a session id issued before authentication
        if self.session_id:
            await self.sessions.destroy(self.session_id)

        self.session_id = await self.sessions.create(user_id)
        self.user_id = user_id
        self.response.set_cookie(
            key=settings.COOKIE_NAME,
            value=self.session_id,
            max_age=settings.SESSION_TTL_SECONDS,
            httponly=True,
            samesite="lax",
            secure=settings.COOKIE_SECURE,
        )

    async def log_out(self) -> bool:
        session_id = self.session_id
        self.clear_session()
        return await self.sessions.destroy(session_id)

    def clear_session(self) -> None:
        self.session_id = None
        self.user_id = None
        self.response.delete_cookie(
            key=settings.COOKIE_NAME,
            httponly=True,
            samesite="lax",
            secure=settings.COOKIE_SECURE,
        )
