from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.asyncio import Redis
from redis.exceptions import RedisError
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

import gymdesk.db.base  # noqa: F401
from gymdesk.admin.routes import dashboard as admin_dashboard
from gymdesk.core import redis as redis_module
from gymdesk.core.config import settings
from gymdesk.core.exceptions import register_exception_handlers
from gymdesk.core.log_config import RequestLoggingMiddleware, setup_logging
from gymdesk.core.rate_limit import limiter
from gymdesk.db.session import SessionLocal
from gymdesk.discounts.routes import discounts
from gymdesk.members.routes import members
from gymdesk.memberships.routes import packages as membership_packages
from gymdesk.memberships.routes import subscriptions
from gymdesk.scheduling.routes import class_packages, classes
from gymdesk.staff.routes import staff

setup_logging()
logger = structlog.get_logger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    client = Redis.from_url(settings.REDIS_URL, decode_responses=True, encoding="utf-8")
    try:
        await client.ping()
        logger.info("redis_connected", url=settings.REDIS_URL)
    except RedisError as e:
        # Caching degrades to direct database reads
        logger.warning("redis_unavailable", error=str(e))
    redis_module.redis_client = client

    yield

    redis_module.redis_client = None
    await client.aclose()
    logger.info("redis_closed")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Back-office API for gym class scheduling, members, memberships and discounts",
    version=VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]
register_exception_handlers(app)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

for router in (
    staff.router,
    membership_packages.router,
    subscriptions.router,
    members.router,
    classes.router,
    class_packages.router,
    discounts.router,
):
    app.include_router(router, prefix=settings.API_V1_PREFIX)

app.include_router(admin_dashboard.router, prefix=f"{settings.API_V1_PREFIX}/admin")


@app.get("/")
async def root() -> dict[str, str]:
    return {"name": settings.PROJECT_NAME, "version": VERSION, "status": "running"}


async def _redis_status() -> str:
    if redis_module.redis_client is None:
        return "unknown"
    try:
        await redis_module.redis_client.ping()
    except RedisError:
        return "unhealthy"
    return "healthy"


def _database_status() -> str:
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        return "unhealthy"
    return "healthy"


@app.get("/health")
async def health_check() -> dict[str, str]:
    checks = {"redis": await _redis_status(), "database": _database_status()}
    overall = "healthy" if all(v == "healthy" for v in checks.values()) else "degraded"
    return {"status": overall, **checks}
