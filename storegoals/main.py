from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text

from storegoals.db.base import get_db
from storegoals.core.config import settings
from storegoals.core.logging_config import configure_logging
from storegoals.routers import goals as goals_router
from storegoals.routers import sales as sales_router
from storegoals.routers import progress as progress_router
from storegoals.core.errors import (
    StoreGoalsException,
    store_goals_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

configure_logging()

app = FastAPI(
    title="Store Goals API",
    description=(
        "**Sales goal progress for store dashboards**\n\n"
        "Stores monthly and weekly bonus goals plus the sales ledger, and reports "
        "week-to-date and month-to-date progress: weighted pro-ration of monthly "
        "targets, projections and ahead / on-track / behind classification.\n\n"
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
app.add_exception_handler(StoreGoalsException, store_goals_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(goals_router.router)
app.include_router(sales_router.router)
app.include_router(progress_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except Exception:
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
