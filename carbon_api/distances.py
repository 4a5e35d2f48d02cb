# carbon_api/distances.py
# Approximate freight distances (km) between named locations.
# Routes are directional: A -> B is looked up independently of B -> A.
DISTANCES_KM = {
    "NYC": {
        "London": 5585.0,
        "Paris": 5837.0,
        "Tokyo": 10847.0,
        "Sydney": 15993.0,
        "LosAngeles": 3944.0,
    },
    "London": {
        "NYC": 5585.0,
        "Paris": 344.0,
        "Tokyo": 9561.0,
    },
    "Paris": {
        "NYC": 5837.0,
        "London": 344.0,
        "Tokyo": 9714.0,
    },
}

DEFAULT_DISTANCE_KM = 1000.0


def estimate_distance(origin, destination):
    return DISTANCES_KM.get(origin, {}).get(destination, DEFAULT_DISTANCE_KM)
