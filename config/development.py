import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# "memory" keeps everything in-process; "mysql" uses DB_CONFIG below.
STORE_BACKEND = os.getenv("STORE_BACKEND", "memory")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "workboard_db"),
}

DEBUG = True

# If enabled with the mysql backend, schema.sql is applied on startup (idempotent).
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_FILE = os.getenv("LOG_FILE") or None

CURRENCY_LABEL = os.getenv("CURRENCY_LABEL", "LKR")

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_DEFAULT_PASSWORD = os.getenv("ADMIN_DEFAULT_PASSWORD", "admin123")
SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
