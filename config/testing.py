from werkzeug.security import generate_password_hash

SECRET_KEY = "test-secret"

DB_CONFIG = None

STORE_BACKEND = "memory"

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD_HASH = generate_password_hash("admin123")

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

STREAM_KEEPALIVE_SECONDS = 0.05

AUTO_INIT_DB = False
