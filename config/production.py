import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "volunteer_desk"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

AUTO_CHECKOUT_ENABLED = bool(int(os.getenv("AUTO_CHECKOUT_ENABLED", "1")))
AUTO_CHECKOUT_INTERVAL_SECONDS = float(os.getenv("AUTO_CHECKOUT_INTERVAL_SECONDS", "60"))
AUTO_CHECKOUT_BUFFER_MINUTES = int(os.getenv("AUTO_CHECKOUT_BUFFER_MINUTES", "1"))
AUTO_CHECKOUT_MAX_LATE_MINUTES = int(os.getenv("AUTO_CHECKOUT_MAX_LATE_MINUTES", "30"))
AUTO_CHECKOUT_EVENT_ID = os.getenv("AUTO_CHECKOUT_EVENT_ID", "")

# Periodic understaffing warnings for the dashboard issue feed
STAFFING_MONITOR_ENABLED = bool(int(os.getenv("STAFFING_MONITOR_ENABLED", "1")))
STAFFING_CHECK_SECONDS = float(os.getenv("STAFFING_CHECK_SECONDS", "60"))
GEOFENCE_RADIUS_METERS = float(os.getenv("GEOFENCE_RADIUS_METERS", "200"))

PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:5000")
