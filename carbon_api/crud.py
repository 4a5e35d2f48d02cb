# carbon_api/crud.py
import json
import logging
from dataclasses import asdict
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from . import models
from .factors import iter_default_factors

logger = logging.getLogger(__name__)


# Emission factors
def seed_emission_factors(db: Session):
    if db.query(models.EmissionFactorRow).count() > 0:
        return 0
    rows = [
        models.EmissionFactorRow(activity=f.activity, mode=f.mode, factor=f.factor, unit=f.unit, source=f.source)
        for f in iter_default_factors()
    ]
    db.add_all(rows); db.commit()
    return len(rows)


def list_emission_factors(db: Session):
    rows = db.query(models.EmissionFactorRow).order_by(
        models.EmissionFactorRow.activity, models.EmissionFactorRow.mode
    ).all()
    return [
        {"activity": r.activity, "mode": r.mode or "", "factor": r.factor, "unit": r.unit, "source": r.source or ""}
        for r in rows
    ]


# Background writes. Each opens its own session and never raises.
def store_calculation(session_factory, request, result, user_id="anonymous"):
    db = session_factory()
    try:
        row = models.Calculation(
            activity=request.activity,
            input_data=json.dumps(asdict(request), default=str),
            carbon_footprint=result.footprint_kg,
            unit=result.unit,
            user_id=user_id,
        )
        db.add(row); db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to store calculation: {e}")
    finally:
        db.close()


def track_api_usage(session_factory, endpoint, user_id, response_time_ms):
    db = session_factory()
    try:
        db.add(models.ApiUsage(endpoint=endpoint, user_id=user_id, response_time_ms=int(response_time_ms)))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to track API usage: {e}")
    finally:
        db.close()


# Analytics
def usage_analytics(db: Session, top_n=5):
    total = db.query(func.count(models.Calculation.id)).scalar() or 0
    avg_ms = db.query(func.avg(models.ApiUsage.response_time_ms)).scalar() or 0.0
    total_carbon = db.query(func.sum(models.Calculation.carbon_footprint)).scalar() or 0.0
    counts = func.count(models.Calculation.id)
    rows = db.query(models.Calculation.activity, counts).group_by(
        models.Calculation.activity
    ).order_by(counts.desc()).limit(top_n).all()
    return {
        "total_calculations": int(total),
        "avg_response_time_ms": round(float(avg_ms), 2),
        "total_carbon_calculated": round(float(total_carbon), 2),
        "top_activities": {activity: count for activity, count in rows},
    }
