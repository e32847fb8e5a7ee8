# userauth/routers/health.py

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from redis.asyncio import Redis
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from userauth.core.redis import get_redis_client
from userauth.db.database import get_session, ping_db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(
    session: Annotated[AsyncSession, Depends(get_session)],
    redis_client: Annotated[Redis, Depends(get_redis_client)]
):
    """
    Checks the database and Redis connections
    """
    try:
        await redis_client.ping()
        await ping_db(session)
    except (RedisError, SQLAlchemyError) as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database or Redis unavailable"
        )

    return {"status": "healthy", "database": "connected", "redis": "connected"}
