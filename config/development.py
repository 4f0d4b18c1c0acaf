import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "campus_attendance"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# Gate scanner: identical code from the same scanner is ignored for this long.
SCAN_DEBOUNCE_SECONDS = float(os.getenv("SCAN_DEBOUNCE_SECONDS", "3"))
# Rows per import write batch (must stay below the 500-write batch ceiling).
IMPORT_CHUNK_SIZE = int(os.getenv("IMPORT_CHUNK_SIZE", "400"))

# Headers set by the identity-provider proxy after it verified the user.
IDP_ACCOUNT_HEADER = os.getenv("IDP_ACCOUNT_HEADER", "X-Account-Id")
IDP_EMAIL_HEADER = os.getenv("IDP_EMAIL_HEADER", "X-Account-Email")

SMS_ENABLED = bool(int(os.getenv("SMS_ENABLED", "1")))
