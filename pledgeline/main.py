from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from pledgeline.core.config import settings
from pledgeline.core.logging import setup_logging
from pledgeline.routers import safety as safety_router
from pledgeline.routers import series as series_router
from pledgeline.core.errors import (
    PledgelineException,
    pledgeline_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

setup_logging(settings.LOG_LEVEL)

app = FastAPI(
    title="Pledgeline API",
    description=(
        "**Commitment-line and safety-buffer engine**\n\n"
        "Stateless endpoints that turn a goal's configuration and check-ins into "
        "an urgency level, a derailment deadline and chart series.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(PledgelineException, pledgeline_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(safety_router.router)
app.include_router(series_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health():
    """
    Returns `{"status": "ok"}` when the API is up. The engine holds no
    state and talks to no database, so there is nothing else to check.
    """
    return {"status": "ok", "env": settings.APP_ENV}
