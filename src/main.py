# src/main.py
"""
FastAPI application exposing cookie-backed JWT sessions.

The whole session lives in the cookie; the endpoints read it from the
Cookie header and answer with Set-Cookie headers.
"""

from fastapi import FastAPI, Depends, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
from contextlib import asynccontextmanager
from datetime import datetime

from src.core.config import settings, build_cookie_options, validate_required_settings
from src.core.exceptions import CookieTooLargeError, SessionConfigurationError
from src.core.logging_config import setup_logging
from src.core.rate_limit_config import get_endpoint_key, get_rate_limit_message, get_rate_limits, get_real_ip
from src.core.security import JWTSessionStorage, get_session_storage, init_session_storage


@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan event handler for startup/shutdown"""
    logger.info("🚀 Session API starting...")

    if not validate_required_settings():
        logger.warning("⚠️ Session security settings incomplete - check SESSION_SECRETS")

    storage = init_session_storage(
        build_cookie_options(),
        encrypt=settings.SESSION_ENCRYPT,
        sign=settings.SESSION_SIGN,
        strict=settings.SESSION_STRICT_SECURITY,
    )
    logger.info(f"  - Cookie: {storage.cookie.name}")
    logger.info(f"  - Token mode: {storage.mode.value}")
    logger.info("✅ Session API ready")

    yield

    logger.info("🛑 Session API shutting down...")


app = FastAPI(
    title=settings.APP_NAME,
    description="Cookie sessions stored as signed or encrypted JWTs",
    version="1.0.0",
    lifespan=lifespan,
)

logger = setup_logging()

# =============================================================================
# RATE LIMITING
# =============================================================================

limiter = Limiter(key_func=get_real_ip, enabled=settings.RATE_LIMIT_ENABLED)


def custom_rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Rate limit response with a readable message"""
    response = PlainTextResponse(
        content=get_rate_limit_message(get_endpoint_key(request.method, request.url.path)),
        status_code=429,
    )
    response.headers["Retry-After"] = "60"
    response.headers["X-RateLimit-Limit"] = str(getattr(exc, "limit", "N/A"))
    return response


app.add_exception_handler(RateLimitExceeded, custom_rate_limit_handler)
app.state.limiter = limiter

RATE_LIMITS = get_rate_limits(settings.RATE_LIMIT_TIER)

# =============================================================================
# ERROR HANDLING
# =============================================================================


@app.exception_handler(CookieTooLargeError)
async def cookie_too_large_handler(request: Request, exc: CookieTooLargeError):
    return JSONResponse(
        status_code=413,
        content={"detail": "Session data too large", "length": exc.length, "limit": exc.limit},
    )


@app.exception_handler(SessionConfigurationError)
async def session_configuration_handler(request: Request, exc: SessionConfigurationError):
    logger.error(f"❌ Session configuration error: {exc}")
    return JSONResponse(status_code=503, content={"detail": "Session storage not available"})

# =============================================================================
# MIDDLEWARE
# =============================================================================


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log non-health requests"""
    if request.url.path != "/health":
        logger.info(f"📥 Request: {request.method} {request.url.path}")
    return await call_next(request)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Add security headers to all responses"""
    response = await call_next(request)

    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    response.headers["Cache-Control"] = "no-store"

    return response

# =============================================================================
# API MODELS
# =============================================================================


class SessionResponse(BaseModel):
    id: str
    data: Dict[str, Any]


class SessionUpdate(BaseModel):
    data: Dict[str, Any] = Field(default_factory=dict)


class TokenResponse(BaseModel):
    token: Optional[str] = None

# =============================================================================
# ENDPOINTS
# =============================================================================


@app.get("/health", status_code=200)
def health():
    """Health check endpoint"""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


@app.get("/session", response_model=SessionResponse)
@limiter.limit(RATE_LIMITS["session_read"])
async def read_session(request: Request, storage: JWTSessionStorage = Depends(get_session_storage)):
    """Return the session carried by the request cookie"""
    session = await storage.get_session(request.headers.get("cookie"))
    return {"id": session.id, "data": session.data}


@app.post("/session", response_model=SessionResponse)
@limiter.limit(RATE_LIMITS["session_write"])
async def update_session(
    request: Request,
    update: SessionUpdate,
    response: Response,
    storage: JWTSessionStorage = Depends(get_session_storage)
):
    """Merge values into the session and send the new cookie"""
    session = await storage.get_session(request.headers.get("cookie"))
    for key, value in update.data.items():
        session.set(key, value)

    response.headers["set-cookie"] = await storage.commit_session(session)
    logger.debug(f"Committed session with {len(session.data)} keys")
    return {"id": session.id, "data": session.data}


@app.delete("/session", status_code=204)
@limiter.limit(RATE_LIMITS["session_destroy"])
async def delete_session(request: Request, storage: JWTSessionStorage = Depends(get_session_storage)):
    """Expire the session cookie"""
    session = await storage.get_session(request.headers.get("cookie"))
    cookie = await storage.destroy_session(session)
    return Response(status_code=204, headers={"set-cookie": cookie})


@app.get("/session/token", response_model=TokenResponse)
@limiter.limit(RATE_LIMITS["session_read"])
async def read_token(request: Request, storage: JWTSessionStorage = Depends(get_session_storage)):
    """Return the raw session token if it is valid"""
    return {"token": await storage.get_jwt(request.headers.get("cookie"))}


if __name__ == "__main__":
    import os
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    logger.info(f"🚀 Starting session API on port {port}...")
    uvicorn.run(app, host="0.0.0.0", port=port, log_level="info")
