# carbon_api/factors.py
# Emission factors and the resolver chain that picks one per (activity, mode).
import logging
from dataclasses import dataclass
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from . import models

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmissionFactor:
    activity: str
    mode: str
    factor: float
    unit: str
    source: str


def _ef(activity, mode, factor, unit, source):
    return EmissionFactor(activity=activity, mode=mode, factor=factor, unit=unit, source=source)


# Published 2023 reference figures (kg CO2e per unit). Also used as seed data.
DEFAULT_FACTORS = {
    "shipping": {
        "air": _ef("shipping", "air", 0.996, "kg_co2e_per_tonne_km", "IPCC 2023"),
        "sea": _ef("shipping", "sea", 0.015, "kg_co2e_per_tonne_km", "IPCC 2023"),
        "road": _ef("shipping", "road", 0.209, "kg_co2e_per_tonne_km", "IPCC 2023"),
        "rail": _ef("shipping", "rail", 0.028, "kg_co2e_per_tonne_km", "IPCC 2023"),
    },
    "electricity": {
        "grid": _ef("electricity", "grid", 0.525, "kg_co2e_per_kwh", "IEA 2023"),
        "solar": _ef("electricity", "solar", 0.041, "kg_co2e_per_kwh", "IPCC 2023"),
        "wind": _ef("electricity", "wind", 0.011, "kg_co2e_per_kwh", "IPCC 2023"),
    },
    "fuel": {
        "gasoline": _ef("fuel", "gasoline", 2.31, "kg_co2e_per_liter", "EPA 2023"),
        "diesel": _ef("fuel", "diesel", 2.68, "kg_co2e_per_liter", "EPA 2023"),
        "natural_gas": _ef("fuel", "natural_gas", 0.202, "kg_co2e_per_kwh", "EPA 2023"),
    },
}

UNIVERSAL_FACTOR = 1.0
UNIVERSAL_UNIT = "kg_co2e_per_unit"
UNIVERSAL_SOURCE = "Default"


def iter_default_factors():
    for by_mode in DEFAULT_FACTORS.values():
        for factor in by_mode.values():
            yield factor


class SqlFactorSource:
    """Authoritative factors from the emission_factors table.

    An empty mode matches any row for the activity. Ties go to the lowest id.
    Database errors count as "not found".
    """

    def __init__(self, db):
        self.db = db

    def resolve(self, activity: str, mode: str) -> Optional[EmissionFactor]:
        try:
            q = self.db.query(models.EmissionFactorRow).filter(models.EmissionFactorRow.activity == activity)
            if mode:
                q = q.filter(models.EmissionFactorRow.mode == mode)
            row = q.order_by(models.EmissionFactorRow.id).first()
        except SQLAlchemyError as e:
            logger.warning(f"Emission factor lookup failed for {activity}/{mode or '-'}: {e}, using default table")
            self.db.rollback()
            return None
        if row is None:
            return None
        return _ef(row.activity, row.mode or "", row.factor, row.unit, row.source or "")


class DefaultTableResolver:
    """Exact (activity, mode) match in the built-in table."""

    def __init__(self, table=None):
        self.table = DEFAULT_FACTORS if table is None else table

    def resolve(self, activity: str, mode: str) -> Optional[EmissionFactor]:
        return self.table.get(activity, {}).get(mode)


class ActivityFallbackResolver:
    """Any built-in factor for the activity, whatever the mode."""

    def __init__(self, table=None):
        self.table = DEFAULT_FACTORS if table is None else table

    def resolve(self, activity: str, mode: str) -> Optional[EmissionFactor]:
        for factor in self.table.get(activity, {}).values():
            return factor
        return None


class UniversalDefaultResolver:
    def resolve(self, activity: str, mode: str) -> Optional[EmissionFactor]:
        return _ef(activity, mode, UNIVERSAL_FACTOR, UNIVERSAL_UNIT, UNIVERSAL_SOURCE)


class FactorStore:
    """Tries each resolver in order and returns the first match."""

    def __init__(self, resolvers=None):
        self.resolvers = list(resolvers) if resolvers else default_resolvers()

    def resolve(self, activity: str, mode: str = "") -> EmissionFactor:
        activity = activity or ""
        mode = mode or ""
        for resolver in self.resolvers:
            factor = resolver.resolve(activity, mode)
            if factor is not None:
                return factor
        return UniversalDefaultResolver().resolve(activity, mode)

    @classmethod
    def with_database(cls, db):
        return cls([SqlFactorSource(db)] + default_resolvers())


def default_resolvers():
    return [DefaultTableResolver(), ActivityFallbackResolver(), UniversalDefaultResolver()]
