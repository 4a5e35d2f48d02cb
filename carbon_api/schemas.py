# carbon_api/schemas.py
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, AliasChoices
from typing import Optional, Any, Dict, List
from .engine import CalculationRequest


class CalculateIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    activity: Optional[str] = None
    weight: float = Field(0.0, ge=0, allow_inf_nan=False)
    distance: float = Field(0.0, ge=0, allow_inf_nan=False)
    origin: Optional[str] = Field(None, alias="from")
    destination: Optional[str] = Field(None, alias="to")
    # "transport" is the older wire name
    mode: Optional[str] = Field(None, validation_alias=AliasChoices("mode", "transport"))
    amount: float = Field(0.0, ge=0, allow_inf_nan=False)
    unit: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def to_request(self) -> CalculationRequest:
        return CalculationRequest(
            activity=(self.activity or "").strip(),
            weight=self.weight,
            distance=self.distance,
            origin=self.origin or "",
            destination=self.destination or "",
            mode=self.mode or "",
            amount=self.amount,
            unit=self.unit or "",
            metadata=self.metadata,
        )


class CalculateOut(BaseModel):
    carbon_footprint: float
    unit: str
    breakdown: Dict[str, Any]
    suggestions: List[str]
    calculation: Dict[str, Any]
    timestamp: datetime


class FactorOut(BaseModel):
    activity: str
    mode: str
    factor: float
    unit: str
    source: str


class FactorsOut(BaseModel):
    emission_factors: List[FactorOut]
    total: int
    source: str


class ErrorOut(BaseModel):
    error: bool = True
    message: str
