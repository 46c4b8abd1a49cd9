import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "storefront_test"),
}

JWT_SECRET = "test-access-secret"
JWT_REFRESH_SECRET = "test-refresh-secret"
JWT_EXPIRES_MINUTES = 60
JWT_REFRESH_EXPIRES_DAYS = 7

PAYMENT_GATEWAY = "fake"
STRIPE_SECRET_KEY = ""
STRIPE_WEBHOOK_SECRET = ""
CURRENCY = "usd"

LOW_INVENTORY_THRESHOLD = 10

LOG_LEVEL = "WARNING"
LOG_JSON = False

DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
