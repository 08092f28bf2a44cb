"""Constants and defaults.

Note: Keep constants here to avoid magic values spread across code.
"""

ISO_DATE_FORMAT = "%Y-%m-%d"
DISPLAY_DATE_FORMAT = "%d/%m/%Y"

DEFAULT_CURRENCY_LABEL = "LKR"

DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "admin123"
ADMIN_CREDENTIALS_ID = "credentials"

DEFAULT_SESSION_DAYS = 7

WORKER_ID_FIELD = "workerId"
