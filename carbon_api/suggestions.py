# carbon_api/suggestions.py
OFFSET_THRESHOLD_KG = 1000.0

# (activity, mode) -> suggestions; mode None matches any mode
RULES = [
    ("shipping", "air", [
        "Consider sea freight to reduce emissions by 98%",
        "Use rail transport when possible for 97% reduction",
    ]),
    ("shipping", "road", [
        "Switch to rail transport for 87% emissions reduction",
        "Optimize routes to reduce distance",
    ]),
    ("electricity", "grid", [
        "Switch to renewable energy for 92% reduction",
        "Install solar panels for clean energy",
    ]),
    ("fuel", None, [
        "Consider electric vehicles for zero direct emissions",
        "Use biofuels to reduce carbon intensity",
    ]),
]

OFFSET_SUGGESTION = "This is a high-impact activity - consider carbon offsetting"


def suggest(activity, mode, footprint_kg):
    """Reduction tips for an activity. Rules are cumulative and kept in order."""
    out = []
    for rule_activity, rule_mode, tips in RULES:
        if activity == rule_activity and (rule_mode is None or mode == rule_mode):
            out.extend(tips)
    if footprint_kg > OFFSET_THRESHOLD_KG:
        out.append(OFFSET_SUGGESTION)
    return out
