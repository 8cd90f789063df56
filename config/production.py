import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "study_hall"),
}

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mysql")

CHECKIN_TOKEN = os.getenv("CHECKIN_TOKEN", "TAXSHILA_LIBRARY_CHECKIN_QR_V1")

TIMEZONE = os.getenv("TIMEZONE", "Asia/Kolkata")

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
