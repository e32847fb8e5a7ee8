# userauth/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.exceptions import RedisError

from userauth.core.configuration import settings
from userauth.core.logging import setup_logging
from userauth.core.redis import get_redis_client
from userauth.db.database import engine, init_db, reset_db
from userauth.graphql.schema import graphql_router
from userauth.routers import health

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    redis = get_redis_client()
    try:
        await redis.ping()
        logger.info("Redis connection established")
    except RedisError as e:
        logger.error(f"Redis connection failed: {e}")
        raise

    if settings.RESET_DB_ON_STARTUP:
        await reset_db()
    else:
        await init_db()
    yield

    await redis.aclose()
    await engine.dispose()

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    description=settings.DESCRIPTION,
    summary="User accounts, sessions and password reset over GraphQL",
    lifespan=lifespan,
)


# Cookies need explicit origins, "*" is rejected with credentials
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(graphql_router, prefix="/graphql", tags=["GraphQL"])
app.include_router(health.router, tags=["Health"])

@app.get("/")
async def root():
    return {"service": settings.PROJECT_NAME, "graphql": "/graphql"}
