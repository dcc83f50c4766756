"""Constants for aggregate reshaping and KPI derivation."""

# Canonical score ranges, in display order
SCORE_RANGES = ["0-20", "21-40", "41-60", "61-80", "81-100"]
UNKNOWN_RANGE = "unknown"

# Series carried by every dense row
SERIES_TYPES = ["lead", "property", "agent"]

# Display names for category dimensions
LEAD_STATUS_LABELS = {
    "new": "New",
    "contacted": "Contacted",
    "qualified": "Qualified",
    "negotiation": "Negotiation",
    "closed": "Closed",
    "lost": "Lost",
}

PROPERTY_TYPE_LABELS = {
    "residential": "Residential",
    "commercial": "Commercial",
    "land": "Land",
}

# Lead statuses counted as converted
CONVERTED_STATUSES = ["closed", "qualified", "negotiation"]

# Trend deadband in percent: changes within +/- this are "flat"
TREND_DEADBAND_PERCENT = 2.0

# Stand-in baselines (previous = current * ratio) when no history exists
BASELINE_RATIOS = {
    "lead": 0.95,
    "conversion": 0.90,
    "property": 0.97,
    "agent": 0.98,
}
