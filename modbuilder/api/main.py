from __future__ import annotations

from fastapi import FastAPI

from modbuilder.api.endpoints import health, metrics, metrics_export, modules
from modbuilder.api.middleware.error_shaping import SafeErrorMiddleware
from modbuilder.api.middleware.request_context import RequestContextMiddleware

app = FastAPI(
    title="Module Builder API",
    version="0.1.0",
)

# ------------------------------------------------------------
# Middleware stack (ORDER MATTERS)
# Starlette reverses add_middleware order — the LAST call = OUTERMOST wrapper.
#   SafeErrorMiddleware → RequestContext → handler
# ------------------------------------------------------------
app.add_middleware(RequestContextMiddleware)
app.add_middleware(SafeErrorMiddleware)

app.include_router(health.router)
app.include_router(metrics.router)
app.include_router(metrics_export.router)
app.include_router(modules.router)
