import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "volunteer_desk_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

AUTO_CHECKOUT_ENABLED = False
AUTO_CHECKOUT_INTERVAL_SECONDS = 60
AUTO_CHECKOUT_BUFFER_MINUTES = 1
AUTO_CHECKOUT_MAX_LATE_MINUTES = 30

STAFFING_MONITOR_ENABLED = False
STAFFING_CHECK_SECONDS = 60
GEOFENCE_RADIUS_METERS = 200

PUBLIC_BASE_URL = "http://testserver"
