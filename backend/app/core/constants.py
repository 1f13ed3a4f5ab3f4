"""Shared application constants.

Centralizes repeat values used across the API and the goal engine so we can
document and adjust them in one place.
"""

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600

# Derived pace (min/km) and speed (km/h) are rounded for display
PACE_DECIMALS = 2
SPEED_DECIMALS = 2

# Progress percentage bounds
PROGRESS_MIN = 0.0
PROGRESS_MAX = 100.0

# Default window length when a Custom goal is created without an end date
CUSTOM_TIMEFRAME_DAYS = 30

# Field length limits shared by models and schemas
NAME_MAX_LEN = 100
DESCRIPTION_MAX_LEN = 500
USERNAME_MAX_LEN = 50
