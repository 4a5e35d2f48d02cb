# carbon_api/formulas.py
# One formula per activity. Each returns (footprint_kg, breakdown, calculation)
# where calculation["values"] is the breakdown and calculation["result"] is unrounded.
from .distances import estimate_distance


def _trace(formula, breakdown, result):
    return {"formula": formula, "values": breakdown, "result": result}


def calc_shipping(req, factor):
    distance = float(req.distance or 0)
    if distance == 0 and req.origin and req.destination:
        distance = estimate_distance(req.origin, req.destination)

    weight_tonnes = float(req.weight or 0) / 1000.0
    footprint = weight_tonnes * distance * factor.factor
    breakdown = {
        "weight_kg": float(req.weight or 0),
        "weight_tonnes": weight_tonnes,
        "distance_km": distance,
        "mode": req.mode,
        "factor": factor.factor,
        "origin": req.origin,
        "destination": req.destination,
    }
    return footprint, breakdown, _trace("weight_tonnes × distance_km × emission_factor", breakdown, footprint)


def calc_electricity(req, factor):
    kwh = float(req.amount or 0)
    footprint = kwh * factor.factor
    breakdown = {
        "energy_kwh": kwh,
        "energy_source": req.mode,
        "factor": factor.factor,
        "grid_mix": "regional_average",
    }
    return footprint, breakdown, _trace("energy_kwh × emission_factor", breakdown, footprint)


def calc_fuel(req, factor):
    # liters, or kWh for natural gas; the factor's unit says which
    quantity = float(req.amount or 0)
    footprint = quantity * factor.factor
    breakdown = {
        "fuel_quantity": quantity,
        "fuel_type": req.mode,
        "factor": factor.factor,
        "combustion": "direct_emissions",
    }
    return footprint, breakdown, _trace("fuel_quantity × emission_factor", breakdown, footprint)


def calc_generic(req, factor):
    amount = float(req.amount or 0)
    footprint = amount * factor.factor
    breakdown = {
        "activity": req.activity,
        "amount": amount,
        "factor": factor.factor,
        "unit": factor.unit,
    }
    return footprint, breakdown, _trace("amount × emission_factor", breakdown, footprint)


FORMULAS = {
    "shipping": calc_shipping,
    "electricity": calc_electricity,
    "fuel": calc_fuel,
}


def formula_for(activity):
    return FORMULAS.get(activity, calc_generic)
