import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "study_hall"),
}

# "memory" keeps records in-process; "mysql" uses DB_CONFIG
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory")

# Text encoded in the QR code at the library desk
CHECKIN_TOKEN = os.getenv("CHECKIN_TOKEN", "TAXSHILA_LIBRARY_CHECKIN_QR_V1")

# Day/month boundaries for attendance history
TIMEZONE = os.getenv("TIMEZONE", "Asia/Kolkata")

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
