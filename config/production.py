import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "shift_tracker"),
}

STORE_BACKEND = os.getenv("STORE_BACKEND", "mysql")

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
# Placeholder never matches; set a real Werkzeug hash in the environment.
ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH", "CHANGE_ME")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

STREAM_KEEPALIVE_SECONDS = float(os.getenv("STREAM_KEEPALIVE_SECONDS", "15"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
