"""Academy FastAPI application.

Processes commands synchronously over HTTP inside the academy domain
context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# PROTEAN_ENV selects the config overlay from academy/domain.toml:
#   - "test"       → event_processing = "sync"  (handlers fire after commit)
#   - "production" → event_processing = "async" (handlers fire via Engine)
from academy.api import (
    cart_router,
    enrollment_router,
    order_router,
    payment_router,
    register_error_handlers,
)
from academy.domain import academy
from academy.utils.logging import clear_context
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

academy.init()

app = FastAPI(
    title="Academy API",
    description="Course commerce: cart, orders, payments and enrollments",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the academy domain context for each request."""
    clear_context()
    with academy.domain_context():
        response = await call_next(request)
    return response


register_error_handlers(app)

app.include_router(cart_router)
app.include_router(order_router)
app.include_router(payment_router)
app.include_router(enrollment_router)


@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": academy.name})
