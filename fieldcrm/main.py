"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from fieldcrm.core.config import settings
from fieldcrm.core.exceptions import CRMError
from fieldcrm.core.structured_logging import configure_logging
from fieldcrm.db.session import engine

configure_logging()
logger = logging.getLogger(__name__)

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
    logger.info("Sentry initialized for error tracking")

# ============================================================================
# Rate Limiting
# ============================================================================

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from fieldcrm.core.rate_limit import limiter

# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="Field CRM API",
    description="Multi-tenant CRM for service requests, contracts, installations and orders",
    version=settings.VERSION,
    docs_url="/docs" if settings.ENV == "dev" else None,
    redoc_url="/redoc" if settings.ENV == "dev" else None,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# CORS middleware - must be added before routers
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,  # Required for cookies
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "X-Requested-With"],
)


@app.exception_handler(CRMError)
def handle_crm_error(request: Request, exc: CRMError) -> JSONResponse:
    """Map domain errors to {"detail", "code"} bodies."""
    if exc.status_code >= 500:
        logger.error("%s on %s %s", exc.code, request.method, request.url.path)
    body = {"detail": exc.message, "code": exc.code}
    if exc.details:
        body["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=body)


# ============================================================================
# Routers
# ============================================================================

from fieldcrm.routers import (
    accounts,
    activities,
    auth,
    contacts,
    contracts,
    deals,
    installations,
    internal,
    inventory,
    leads,
    quotes,
    sales_orders,
    service_requests,
)

app.include_router(auth.router, prefix="/auth", tags=["auth"])

# Accounts, contacts, leads, deals
app.include_router(accounts.router, prefix="/accounts", tags=["accounts"])
app.include_router(contacts.router, prefix="/contacts", tags=["contacts"])
app.include_router(leads.router, prefix="/leads", tags=["leads"])
app.include_router(deals.router, prefix="/deals", tags=["deals"])

# Numbered documents
app.include_router(service_requests.router, prefix="/service-requests", tags=["service-requests"])
app.include_router(contracts.router, prefix="/contracts", tags=["contracts"])
app.include_router(installations.router, prefix="/installations", tags=["installations"])
app.include_router(quotes.router, prefix="/quotes", tags=["quotes"])
app.include_router(sales_orders.router, prefix="/sales-orders", tags=["sales-orders"])

app.include_router(inventory.router, prefix="/inventory", tags=["inventory"])

app.include_router(activities.router, prefix="/activities", tags=["activities"])

# Internal endpoints (scheduled jobs - protected by INTERNAL_SECRET)
app.include_router(internal.router)


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
