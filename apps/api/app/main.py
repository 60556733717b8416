"""FastAPI application entry point."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.core.structured_logging import RequestContextMiddleware, configure_logging
from app.db.session import engine

configure_logging(settings.LOG_LEVEL)

# ============================================================================
# Sentry Integration (optional, for production error tracking)
# ============================================================================

if settings.SENTRY_DSN and settings.ENV != "dev":
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENV,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,
        send_default_pii=False,
    )
    logging.info("Sentry initialized for error tracking")

# ============================================================================
# Rate Limiting
# ============================================================================

from app.core.rate_limit import limiter

# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="Properly API",
    description="Property settlement tracking: matters, pillars, referrals and notifications",
    version=settings.VERSION,
    docs_url="/docs" if settings.ENV == "dev" else None,
    redoc_url="/redoc" if settings.ENV == "dev" else None,
)

app.state.limiter = limiter
register_exception_handlers(app)

app.add_middleware(RequestContextMiddleware)

# CORS middleware - added last so it wraps everything
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)

# ============================================================================
# Routers
# ============================================================================

from app.routers import (
    auth,
    chat,
    documents,
    integrations,
    matters,
    messaging,
    notifications,
    organisations,
    payments,
    playbook,
    referrals,
    tasks,
    two_factor,
    verification,
)

app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(two_factor.router, prefix="/api/2fa", tags=["two-factor"])

# Settlement tracking
app.include_router(matters.router, prefix="/api/matters", tags=["matters"])
app.include_router(tasks.router, prefix="/api/tasks", tags=["tasks"])
app.include_router(documents.router, prefix="/api/documents", tags=["documents"])
app.include_router(chat.router, prefix="/api/chat", tags=["chat"])

# Broker referrals and payouts
app.include_router(referrals.router, prefix="/api/referrals", tags=["referrals"])
app.include_router(payments.router, prefix="/api/payments", tags=["payments"])
app.include_router(organisations.router, prefix="/api/organisations", tags=["organisations"])

# Content and notifications
app.include_router(playbook.router, prefix="/api/playbook", tags=["playbook"])
app.include_router(notifications.router, prefix="/api", tags=["notifications"])

# External services
app.include_router(verification.router, prefix="/api/verification", tags=["verification"])
app.include_router(messaging.router, prefix="/api", tags=["messaging"])
app.include_router(integrations.router, prefix="/api", tags=["integrations"])


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
def health():
    """
    Health check endpoint.

    Verifies database connectivity and returns environment info.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}
