"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SWEEP_INTERVAL_SECONDS = 60
DEFAULT_CHECKOUT_BUFFER_MINUTES = 1
DEFAULT_MAX_LATE_CHECKOUT_MINUTES = 30
DEFAULT_SWEEP_WORKERS = 8

DEFAULT_STAFFING_CHECK_SECONDS = 60
MAX_DASHBOARD_ISSUES = 100

GEOFENCE_RADIUS_METERS = 200
EARTH_RADIUS_METERS = 6371e3
