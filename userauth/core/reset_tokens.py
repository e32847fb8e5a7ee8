# userauth/core/reset_tokens.py

import logging
from uuid import uuid4

import redis.asyncio as redis

from userauth.core.configuration import settings

logger = logging.getLogger(__name__)


class ResetTokenStore:
    """
    Password reset tokens: uuid4 -> user id, expiring, good for one use.
    Outstanding tokens of a user are also listed under
    ``forget-password-user:<user_id>`` so they can be revoked together.
    """

    USER_TOKENS_PREFIX = "forget-password-user:"

    def __init__(
            self,
            redis_client: redis.Redis,
            ttl: int | None = None,
            prefix: str | None = None
    ):
        self.redis = redis_client
        self.ttl = ttl or settings.RESET_TOKEN_TTL_SECONDS
        self.prefix = prefix or settings.FORGET_PASSWORD_PREFIX

    def _key(self, token: str) -> str:
        return f"{self.prefix}{token}"

    def _user_key(self, user_id: int) -> str:
        return f"{self.USER_TOKENS_PREFIX}{user_id}"

    async def create(self, user_id: int) -> str:
        token = str(uuid4())

        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(self._key(token), str(user_id), ex=self.ttl)
            pipe.sadd(self._user_key(user_id), token)
            pipe.expire(self._user_key(user_id), self.ttl)
            await pipe.execute()

        logger.info(f"Password reset token issued for user {user_id}")
        return token

    async def consume(self, token: str) -> int | None:
        """
        Returns the user id and deletes the token in one step.
        None when the token is unknown, expired or already used.
        """
        if not token:
            return None

        user_id = await self.redis.getdel(self._key(token))
        if user_id is None:
            return None

        try:
            user_id = int(user_id)
        except ValueError:
            logger.warning(f"Reset token {token[:8]}... held a non-numeric user id")
            return None

        await self.redis.srem(self._user_key(user_id), token)
        return user_id

    async def revoke_all(self, user_id: int) -> int:
        """
        Drops every outstanding token of the user, returns how many were live
        """
        tokens = await self.redis.smembers(self._user_key(user_id))
        keys = [self._key(token) for token in tokens]

        revoked = await self.redis.delete(*keys) if keys else 0
        await self.redis.delete(self._user_key(user_id))

        logger.info(f"Revoked {revoked} reset token(s) of user {user_id}")
        return revoked
