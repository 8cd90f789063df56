import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "study_hall_test"),
}

STORAGE_BACKEND = "memory"

CHECKIN_TOKEN = "TEST_CHECKIN_TOKEN"

TIMEZONE = "UTC"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
