import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_db_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

REST_DAY = "Sunday"
DEFAULT_SUBJECT_LABEL = "General Attendance"
LOW_ATTENDANCE_THRESHOLD = 75.0

PERIODS = None

API_BASE_URL = "http://school.test/api"
API_TIMEOUT_SECONDS = 5.0
