# carbon_api/activities.py
# Catalogue served by GET /api/v1/activities.
ACTIVITIES = {
    "shipping": {
        "description": "Calculate carbon footprint for freight transport",
        "transport_modes": ["air", "sea", "road", "rail"],
        "required_fields": ["activity", "weight", "distance_or_locations", "mode"],
        "example": {"activity": "shipping", "weight": 500, "from": "NYC", "to": "London", "mode": "air"},
    },
    "electricity": {
        "description": "Calculate carbon footprint for electricity consumption",
        "energy_sources": ["grid", "solar", "wind"],
        "required_fields": ["activity", "amount", "mode"],
        "example": {"activity": "electricity", "amount": 100, "unit": "kwh", "mode": "grid"},
    },
    "fuel": {
        "description": "Calculate carbon footprint for fuel consumption",
        "fuel_types": ["gasoline", "diesel", "natural_gas"],
        "required_fields": ["activity", "amount", "mode"],
        "example": {"activity": "fuel", "amount": 50, "unit": "liters", "mode": "gasoline"},
    },
}
