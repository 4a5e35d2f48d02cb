# carbon_api/main.py
import logging
import math
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Depends, HTTPException, Header, BackgroundTasks, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import crud, schemas, __version__
from .activities import ACTIVITIES
from .config import settings, configure_logging
from .database import SessionLocal, get_db, init_db
from .engine import ValidationError, calculate
from .factors import FactorStore

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"CarbonAPI {__version__} ready on port {settings.port}")
    yield


app = FastAPI(title="CarbonAPI", version=__version__, lifespan=lifespan)
app.add_middleware(CORSMiddleware, allow_origins=settings.cors_origins, allow_methods=["*"], allow_headers=["*"])


def get_session_factory():
    """Session factory for background writes, which outlive the request session."""
    return SessionLocal


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": True, "message": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def invalid_body(request: Request, exc: RequestValidationError):
    logger.debug(f"Rejected request body: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": True, "message": "Invalid request format"})


# -----------------
# Calculation
# -----------------
@app.post("/api/v1/calculate", response_model=schemas.CalculateOut, responses={400: {"model": schemas.ErrorOut}})
def calculate_carbon(
    payload: schemas.CalculateIn,
    background_tasks: BackgroundTasks,
    user_id: str = Header("anonymous", alias="User-ID"),
    db: Session = Depends(get_db),
    session_factory=Depends(get_session_factory),
):
    start = time.perf_counter()
    req = payload.to_request()
    try:
        result = calculate(req, store=FactorStore.with_database(db))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not math.isfinite(result.footprint_kg):
        raise HTTPException(status_code=400, detail="Footprint is out of range")

    # persisted after the response is sent; failures are only logged
    elapsed_ms = (time.perf_counter() - start) * 1000
    background_tasks.add_task(crud.store_calculation, session_factory, req, result, user_id)
    background_tasks.add_task(crud.track_api_usage, session_factory, "calculate", user_id, elapsed_ms)
    return result.to_dict()


# -----------------
# Reference data
# -----------------
@app.get("/api/v1/activities")
def list_activities():
    return {"activities": ACTIVITIES, "total": len(ACTIVITIES)}


@app.get("/api/v1/factors", response_model=schemas.FactorsOut)
def list_factors(db: Session = Depends(get_db)):
    try:
        factors = crud.list_emission_factors(db)
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch emission factors: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch emission factors")
    return {"emission_factors": factors, "total": len(factors), "source": "IPCC 2023, IEA 2023, EPA 2023"}


# -----------------
# Analytics
# -----------------
@app.get("/api/v1/analytics")
def analytics(db: Session = Depends(get_db)):
    try:
        stats = crud.usage_analytics(db)
    except SQLAlchemyError as e:
        logger.error(f"Failed to compute analytics: {e}")
        raise HTTPException(status_code=500, detail="Failed to compute analytics")
    return {"analytics": stats, "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/api/v1/index")
def api_index():
    return {
        "message": "CarbonAPI Documentation",
        "endpoints": {
            "POST /api/v1/calculate": "Calculate carbon footprint for an activity",
            "GET /api/v1/activities": "List all supported activities",
            "GET /api/v1/factors": "Get emission factors database",
            "GET /api/v1/analytics": "Usage analytics and statistics",
            "GET /health": "Health check endpoint",
        },
        "example": {
            "url": "POST /api/v1/calculate",
            "method": "POST",
            "body": ACTIVITIES["shipping"]["example"],
        },
    }


@app.get("/health")
def health():
    return {"status": "healthy", "service": "CarbonAPI", "version": __version__}
