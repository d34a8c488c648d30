"""AnyHire API: FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from anyhire.auth.routes import router as auth_router
from anyhire.auth.token_store import close_redis, connect_redis
from anyhire.chat.routes import router as chat_router
from anyhire.config.cors import SecurityHeadersMiddleware, configure_cors
from anyhire.config.settings import get_settings
from anyhire.middleware.error_handler import register_error_handlers
from anyhire.middleware.request_id import RequestIDMiddleware
from anyhire.realtime.socket import router as realtime_router

settings = get_settings()
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await connect_redis(settings.REDIS_URL)
    logger.info("AnyHire API started (environment=%s)", settings.ENVIRONMENT)
    yield
    await close_redis()


app = FastAPI(
    title="AnyHire API",
    description=(
        "Session and realtime chat core of the AnyHire job marketplace.\n\n"
        "## Authentication\n"
        "Login sets httpOnly `accessToken` (15 min) and `refreshToken` (7 days) cookies. "
        "Protected endpoints read the `accessToken` cookie (or `Authorization: Bearer <jwt>`). "
        "Call `/auth/refresh-token` when the access token expires.\n\n"
        "## Realtime\n"
        "Connect to `/ws?token=Bearer%20<accessToken>` and exchange "
        '`{"type": ..., "payload": ...}` frames.'
    ),
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Health", "description": "Health check endpoints"},
        {"name": "Auth", "description": "Signup, login, logout, token refresh, profile"},
        {"name": "Chat", "description": "Booking chat history and message management"},
        {"name": "Realtime", "description": "WebSocket chat rooms"},
    ],
)

# --- Middleware ---
app.add_middleware(RequestIDMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
configure_cors(app)

# --- Error handlers ---
register_error_handlers(app)

# --- Routes ---
app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(chat_router, prefix=settings.API_PREFIX)
app.include_router(realtime_router)


@app.get("/health", tags=["Health"], summary="Health check", description="Returns OK if the service is running.")
async def health_check():
    return {"status": "ok"}
