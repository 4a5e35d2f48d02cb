# carbon_api/engine.py
"""
Carbon footprint calculation.

calculate() resolves an emission factor, runs the formula for the requested
activity, attaches reduction suggestions and rounds the footprint to 3
decimal places (half away from zero). It has no side effects; storing the
result and tracking usage is left to the caller.
"""
import copy
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any, Callable, Dict, List, Optional

from .factors import FactorStore
from .formulas import formula_for
from .suggestions import suggest

RESULT_UNIT = "kg_co2e"


class ValidationError(ValueError):
    pass


@dataclass
class CalculationRequest:
    activity: str
    weight: float = 0.0
    distance: float = 0.0
    origin: str = ""
    destination: str = ""
    mode: str = ""
    amount: float = 0.0
    unit: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CalculationResult:
    footprint_kg: float
    breakdown: Dict[str, Any]
    calculation: Dict[str, Any]
    suggestions: List[str]
    timestamp: datetime
    unit: str = RESULT_UNIT

    def to_dict(self):
        return {
            "carbon_footprint": self.footprint_kg,
            "unit": self.unit,
            "breakdown": copy.deepcopy(self.breakdown),
            "suggestions": list(self.suggestions),
            "calculation": copy.deepcopy(self.calculation),
            "timestamp": self.timestamp.isoformat(),
        }


def round_footprint(value, places=3):
    value = float(value)
    if not math.isfinite(value):
        return value
    d = Decimal(repr(value))
    with localcontext() as ctx:
        # room for every integer digit plus the kept decimals
        ctx.prec = max(d.adjusted() + 1, 1) + places + 1
        return float(d.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))


def _utcnow():
    return datetime.now(timezone.utc)


def calculate(req: CalculationRequest, store: Optional[FactorStore] = None,
              clock: Optional[Callable[[], datetime]] = None) -> CalculationResult:
    if not req.activity or not req.activity.strip():
        raise ValidationError("Activity is required")

    store = store or FactorStore()
    clock = clock or _utcnow

    factor = store.resolve(req.activity, req.mode)
    footprint, breakdown, calculation = formula_for(req.activity)(req, factor)
    tips = suggest(req.activity, req.mode, footprint)

    return CalculationResult(
        footprint_kg=round_footprint(footprint),
        breakdown=breakdown,
        calculation=calculation,
        suggestions=tips,
        timestamp=clock(),
    )
