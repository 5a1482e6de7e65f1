"""MechanicQ billing FastAPI application.

Serves invoicing, gateway checkout, payment verification and the in-app
notification inbox. Each request is wrapped in the correct domain context
based on URL prefix.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

from uuid import uuid4

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
from billing.domain import billing
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from notifications.domain import notifications

from shared.cors import add_cors
from shared.logging import add_context, clear_context

billing.init()
notifications.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/invoices": billing,
    "/payments": billing,
    "/notifications": notifications,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="MechanicQ Billing API",
    description="Invoices, payment verification and notifications for the mechanic marketplace",
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context and log context for each request."""
    clear_context()
    add_context(request_id=request.headers.get("x-request-id") or uuid4().hex, path=request.url.path)
    try:
        domain = _resolve_domain(request.url.path)
        if domain is not None:
            with domain.domain_context():
                return await call_next(request)
        # No domain match: health check and docs
        return await call_next(request)
    finally:
        clear_context()


# Added last so it wraps everything, preflight included.
add_cors(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from billing.api.routes import invoice_router, payment_router  # noqa: E402
from notifications.api.routes import router as notification_router  # noqa: E402

app.include_router(payment_router)
app.include_router(invoice_router)
app.include_router(notification_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "billing": {"name": billing.name},
                "notifications": {"name": notifications.name},
            },
        }
    )
