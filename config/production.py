import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "campus_attendance"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

SCAN_DEBOUNCE_SECONDS = float(os.getenv("SCAN_DEBOUNCE_SECONDS", "3"))
IMPORT_CHUNK_SIZE = int(os.getenv("IMPORT_CHUNK_SIZE", "400"))

IDP_ACCOUNT_HEADER = os.getenv("IDP_ACCOUNT_HEADER", "X-Account-Id")
IDP_EMAIL_HEADER = os.getenv("IDP_EMAIL_HEADER", "X-Account-Email")

SMS_ENABLED = bool(int(os.getenv("SMS_ENABLED", "1")))
