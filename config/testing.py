SECRET_KEY = "test-secret"

STORE_BACKEND = "memory"
DB_CONFIG = {}

DEBUG = False
TESTING = True

AUTO_INIT_DB = False

LOG_LEVEL = "WARNING"
LOG_FILE = None

CURRENCY_LABEL = "LKR"

ADMIN_USERNAME = "admin"
ADMIN_DEFAULT_PASSWORD = "admin123"
SESSION_DAYS = 7
