# userauth/core/session.py

"""
Server-side login sessions kept in Redis.

The client only holds an opaque session id in a cookie; the id maps to the
logged-in user under ``sess:<id>``. Every session of a user is also listed
under ``user-sessions:<user_id>`` so all of them can be dropped at once.
"""

import json
import logging
import secrets
import datetime as dt

import redis.asyncio as redis

from userauth.core.configuration import settings

logger = logging.getLogger(__name__)


class SessionStore:
    SESSION_PREFIX = "sess:"
    USER_SESSIONS_PREFIX = "user-sessions:"

    def __init__(self, redis_client: redis.Redis, ttl: int | None = None):
        self.redis = redis_client
        self.ttl = ttl or settings.SESSION_TTL_SECONDS

    @staticmethod
    def generate_session_id() -> str:
        return secrets.token_urlsafe(32)

    def _key(self, session_id: str) -> str:
        return f"{self.SESSION_PREFIX}{session_id}"

    def _user_key(self, user_id: int) -> str:
        return f"{self.USER_SESSIONS_PREFIX}{user_id}"

    async def create(self, user_id: int) -> str:
        """
        New session for user_id, returns the id to put in the cookie
        """
        session_id = self.generate_session_id()
        data = {
            "user_id": user_id,
            "created_at": dt.datetime.now(dt.timezone.utc).isoformat(),
        }

        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(self._key(session_id), json.dumps(data), ex=self.ttl)
            pipe.sadd(self._user_key(user_id), session_id)
            pipe.expire(self._user_key(user_id), self.ttl)
            await pipe.execute()

        logger.info(f"Session created for user {user_id} with TTL {self.ttl}s")
        return session_id

    async def get_user_id(self, session_id: str | None) -> int | None:
        if not session_id:
            return None

        raw = await self.redis.get(self._key(session_id))
        if raw is None:
            return None

        try:
            return int(json.loads(raw)["user_id"])
        except (ValueError, KeyError, TypeError):
            logger.warning(f"Discarding malformed session {session_id[:10]}...")
            await self.redis.delete(self._key(session_id))
            return None

    async def destroy(self, session_id: str | None) -> bool:
        if not session_id:
            return False

        user_id = await self.get_user_id(session_id)
        deleted = await self.redis.delete(self._key(session_id))
        if user_id is not None:
            await self.redis.srem(self._user_key(user_id), session_id)

        if deleted:
            logger.info(f"Session destroyed: {session_id[:10]}...")
        return deleted > 0

    async def destroy_all(self, user_id: int) -> int:
        """
        Drops every session of the user, returns how many were live
        """
        session_ids = await self.redis.smembers(self._user_key(user_id))
        keys = [self._key(sid) for sid in session_ids]

        deleted = await self.redis.delete(*keys) if keys else 0
        await self.redis.delete(self._user_key(user_id))

        logger.info(f"Destroyed {deleted} session(s) of user {user_id}")
        return deleted
